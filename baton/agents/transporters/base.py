"""
Base transporter implementation.

This module provides the functionality shared by every transporter: request
dispatch between batch and streaming mode, tool schema compilation and
consumption of streamed fragments.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Protocol, TYPE_CHECKING

from ..core.interfaces import Transporter
from ..core.models import Payload, TransportResponse
from ..tools.schema import compile_tool

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext


class FragmentStream(Protocol):
    input_tokens: Optional[int]
    output_tokens: Optional[int]

    def __aiter__(self):
        ...


class BaseTransporter(Transporter):
    """Common transporter behaviour.

    Subclasses build the provider request and interpret replies; this class
    decides between batch and streaming mode.
    """

    def __init__(self, api_name: str):
        self.api_name = api_name
        self._logger = logging.getLogger(f"{__name__}.{api_name}")

    async def invoke(self, agent: "Agent", context: "RunContext") -> TransportResponse:
        payload = await self.build_request_payload(agent, context)
        self._logger.debug(
            f"Invoking {payload.get('model')} for agent {agent.name()} "
            f"(streamed={context.is_streamed}, tools={len(payload.get('tools') or [])})"
        )
        if context.is_streamed:
            return await self.invoke_streamed(agent, context, payload)
        return await self.invoke_direct(agent, context, payload)

    @abstractmethod
    async def build_request_payload(self, agent: "Agent", context: "RunContext") -> Dict[str, Any]:
        pass

    @abstractmethod
    async def invoke_direct(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        pass

    @abstractmethod
    async def invoke_streamed(self, agent: "Agent", context: "RunContext", payload: Dict[str, Any]) -> TransportResponse:
        pass

    async def tool_definitions(self, agent: "Agent") -> List[Dict[str, Any]]:
        tools = await agent.executable_tools()
        return [compile_tool(tool) for tool in tools.values()]

    async def consume_stream(self, agent: "Agent", context: "RunContext", stream: FragmentStream) -> Optional[Payload]:
        """Notify every fragment and merge them into the final payload.

        Returns:
            The merged payload, or None when the stream carried no text
        """
        message = ""
        last_payload: Optional[Payload] = None
        async for fragment in stream:
            context.observer_invoker.agent_on_response_interval(context, agent, fragment)
            message += fragment.content or ""
            last_payload = fragment

        if not message or last_payload is None:
            return None
        return last_payload.model_copy(update={
            "content": message,
            "input_tokens": stream.input_tokens,
            "output_tokens": stream.output_tokens,
        })
