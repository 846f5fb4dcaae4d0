"""
OpenAI-backed transport client.

Adapts ``openai.AsyncOpenAI`` to the :class:`TransportClient` capability:
request payloads go in as plain mappings and provider replies come back as
plain data, so transporters never depend on SDK object types.
"""

import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from ..config import SDKConfig
from ..core.exceptions import TransportError
from ..core.interfaces import TransportClient

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10.0


def _create_timeout(read_timeout: float) -> httpx.Timeout:
    return httpx.Timeout(read_timeout, connect=DEFAULT_CONNECT_TIMEOUT)


def _clean_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _to_data(obj: Any) -> Any:
    return obj.model_dump() if hasattr(obj, "model_dump") else obj


class OpenAITransportClient(TransportClient):
    """Transport client for the OpenAI Chat Completions and Responses APIs."""

    def __init__(self, client: AsyncOpenAI):
        self._client = client

    @classmethod
    def from_config(cls, config: SDKConfig) -> "OpenAITransportClient":
        try:
            client = AsyncOpenAI(
                api_key=config.api_key,
                organization=config.organization,
                project=config.project,
                base_url=config.base_url,
                timeout=_create_timeout(config.timeout),
            )
        except OpenAIError as e:
            raise TransportError(f"Cannot create OpenAI client: {e}") from e
        logger.debug(f"Initialized OpenAI client (base_url={config.base_url or 'default'})")
        return cls(client)

    @property
    def openai(self) -> AsyncOpenAI:
        return self._client

    async def create_chat_completion(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.chat.completions.create(**_clean_payload(payload))
        return _to_data(response)

    async def create_streamed_chat_completion(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        stream = await self._client.chat.completions.create(**_clean_payload(payload), stream=True)
        async for chunk in stream:
            yield _to_data(chunk)

    async def create_response(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.responses.create(**_clean_payload(payload))
        return _to_data(response)

    async def create_streamed_response(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        stream = await self._client.responses.create(**_clean_payload(payload), stream=True)
        async for event in stream:
            yield _to_data(event)

    async def close(self) -> None:
        await self._client.close()
