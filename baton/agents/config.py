"""
SDK configuration.

Configuration is explicit: a :class:`SDKConfig` instance travels with the run
context instead of being read from process globals at call sites.
``SDKConfig.from_env()`` builds one from environment variables.
"""

import logging
import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_ENV_LITERALS: Dict[str, Any] = {
    "true": True,
    "(true)": True,
    "false": False,
    "(false)": False,
    "null": None,
    "(null)": None,
    "empty": "",
    "(empty)": "",
}


def parse_env_value(value: Optional[str]) -> Any:
    """Convert the textual literals used in env files into Python values."""
    if value is None:
        return None
    return _ENV_LITERALS.get(value.strip().lower(), value)


class SDKConfig(BaseModel):
    """Settings shared by every agent of a run."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra='forbid'
    )

    default_model: str = Field(default="gpt-4o", description="Model used when an agent does not name one", min_length=1)
    default_temperature: float = Field(default=0.7, description="Temperature used by default model settings", ge=0.0, le=2.0)
    tracing_enabled: bool = Field(default=True, description="Whether runs are traced")
    max_turns: int = Field(default=25, description="Maximum model round-trips per agent invocation", ge=1)
    max_model_behavior_retries: int = Field(
        default=3,
        description="Consecutive recoverable model errors tolerated before failing",
        ge=0
    )

    api_key: Optional[str] = Field(None, description="Provider API key")
    organization: Optional[str] = Field(None, description="Provider organization id")
    project: Optional[str] = Field(None, description="Provider project id")
    base_url: Optional[str] = Field(None, description="Provider base URL override")
    timeout: float = Field(default=60.0, description="Provider request timeout in seconds", gt=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SDKConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Returns:
            Configuration with every recognised variable applied
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        def read(key: str) -> Any:
            return parse_env_value(env.get(key))

        if read("AGENTS_SDK_DEFAULT_MODEL"):
            values["default_model"] = read("AGENTS_SDK_DEFAULT_MODEL")
        if read("AGENTS_SDK_DISABLE_TRACING") is True:
            values["tracing_enabled"] = False
        if read("AGENTS_SDK_MAX_TURNS"):
            values["max_turns"] = read("AGENTS_SDK_MAX_TURNS")
        if read("OPENAI_API_KEY"):
            values["api_key"] = read("OPENAI_API_KEY")
        if read("OPENAI_BASE_URL"):
            values["base_url"] = read("OPENAI_BASE_URL")
        if read("AGENTS_SDK_DEFAULT_ORGANIZATION"):
            values["organization"] = read("AGENTS_SDK_DEFAULT_ORGANIZATION")
        if read("AGENTS_SDK_DEFAULT_PROJECT"):
            values["project"] = read("AGENTS_SDK_DEFAULT_PROJECT")

        logger.debug(f"Loaded SDK config from environment: {sorted(values)}")
        return cls(**values)
