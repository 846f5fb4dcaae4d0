"""
Core data models for the agents SDK.

This module defines the conversation vocabulary shared by every transport:
plain messages, tool calls requested by the model, tool outputs, streamed
payload fragments and per-agent model settings.
"""

import json
import weakref
from typing import Dict, Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict, PrivateAttr, model_validator

from .enums import MessageRole
from .exceptions import UnparsableToolCallError


class Message(BaseModel):
    """A single conversation entry."""

    model_config = ConfigDict(extra='forbid')

    role: MessageRole = Field(..., description="Message role")
    content: Optional[str] = Field(None, description="Message text")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider specific extra fields merged into the wire message"
    )
    input_tokens: Optional[int] = Field(None, description="Prompt tokens spent producing this message", ge=0)
    output_tokens: Optional[int] = Field(None, description="Completion tokens spent producing this message", ge=0)

    _owner: Optional[weakref.ref] = PrivateAttr(default=None)

    @property
    def owner(self) -> Optional[Any]:
        """The agent that produced or received this message, if still alive."""
        return self._owner() if self._owner is not None else None

    def with_owner(self, owner: Optional[Any]) -> "Message":
        self._owner = weakref.ref(owner) if owner is not None else None
        return self

    def usage(self) -> Dict[str, Optional[int]]:
        return {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens}

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: role and content merged with the extra parameters."""
        return {"role": self.role.value, "content": self.content, **self.parameters}


def parse_tool_arguments(tool: Optional[str], call_id: Optional[str], payload: Optional[str]) -> Dict[str, Any]:
    """Decode a tool-call argument string into a mapping.

    Empty input decodes to an empty mapping. Anything that is not a JSON
    object raises :class:`UnparsableToolCallError`.
    """
    if payload is None or not payload.strip():
        return {}
    try:
        arguments = json.loads(payload)
    except json.JSONDecodeError as e:
        raise UnparsableToolCallError(
            f"The arguments for {tool} tool are not valid JSON: {e.msg}",
            call_id=call_id,
            tool_name=tool,
            arguments_payload=payload
        ) from e
    if not isinstance(arguments, dict):
        raise UnparsableToolCallError(
            f"The arguments for {tool} tool should be an object",
            call_id=call_id,
            tool_name=tool,
            arguments_payload=payload
        )
    return arguments


class ToolCall(Message):
    """A model request to execute a tool."""

    role: MessageRole = Field(default=MessageRole.ASSISTANT, description="Message role")
    tool: str = Field(..., description="Requested tool name")
    id: str = Field(..., description="Provider assigned call id")
    arguments_payload: Optional[str] = Field(None, description="Raw JSON argument string")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Decoded arguments")

    @model_validator(mode="before")
    @classmethod
    def _decode_arguments(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "arguments" not in data:
            data["arguments"] = parse_tool_arguments(
                data.get("tool"), data.get("id"), data.get("arguments_payload")
            )
        data.setdefault("parameters", {
            "type": "function_call",
            "call_id": data.get("id"),
            "name": data.get("tool"),
            "arguments": data.get("arguments_payload"),
        })
        return data

    @classmethod
    def unparsed(cls, tool: str, call_id: str, arguments_payload: Optional[str]) -> "ToolCall":
        """Build a tool call without decoding its arguments."""
        return cls(tool=tool, id=call_id, arguments_payload=arguments_payload, arguments={})


class ToolOutput(Message):
    """The result of a tool execution, paired with its call by id."""

    role: MessageRole = Field(default=MessageRole.TOOL, description="Message role")
    content: str = Field(default="", description="Tool result text")
    tool_call_id: str = Field(..., description="Id of the tool call this output answers")

    @model_validator(mode="before")
    @classmethod
    def _call_id_parameter(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("parameters", {"tool_call_id": data.get("tool_call_id")})
        return data


class Payload(BaseModel):
    """A (possibly partial) text response from the model."""

    content: Optional[str] = None
    role: Optional[str] = None
    choice: int = 0
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    def usage(self) -> Dict[str, Optional[int]]:
        return {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens}


class ModelSettings(BaseModel):
    """Per-agent model parameters."""

    model_config = ConfigDict(extra='forbid', protected_namespaces=())

    model_name: Optional[str] = Field(None, description="Model identifier, defaults to the SDK default model")
    temperature: float = Field(default=0.7, description="Sampling temperature", ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, description="Maximum output tokens", ge=1)
    extra_options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider options merged into the request"
    )


class TransportResponse(BaseModel):
    """Provider-agnostic outcome of one model round-trip.

    Either the model asked for tools, or it answered with a payload. Both
    fields are empty when a streamed reply carried no text at all.
    """

    tool_calls: List[ToolCall] = Field(default_factory=list)
    payload: Optional[Payload] = None

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)
