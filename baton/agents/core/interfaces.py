"""
Core interfaces for the agents SDK.

This module defines the abstract seams that components plug into: the
provider client, the transports that talk to it, the tool execution engine,
MCP connections, tool-list caches and trace exporters.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, TYPE_CHECKING, runtime_checkable

from .models import ToolCall, TransportResponse

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext
    from ..tools.base import Tool
    from ..tools.mcp_tool import McpTool
    from ..tracing.models import Span, Trace


@runtime_checkable
class TransportClient(Protocol):
    """Provider client capability.

    Every endpoint takes a request payload and returns provider-shaped plain
    data. Streaming endpoints return async iterators of event mappings.
    """

    async def create_chat_completion(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def create_streamed_chat_completion(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        ...

    async def create_response(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def create_streamed_response(self, payload: Dict[str, Any]) -> AsyncIterator[Dict[str, Any]]:
        ...


class Transporter(ABC):
    """Adapter between the agent state machine and one provider API shape."""

    @abstractmethod
    async def invoke(self, agent: "Agent", context: "RunContext") -> TransportResponse:
        """Perform one model round-trip.

        Args:
            agent: Agent whose settings, instruction and tools are sent
            context: Run context holding the conversation and client

        Returns:
            Requested tool calls, or the final text payload

        Raises:
            ModelBehaviorError: If the provider reply cannot be interpreted
        """
        pass


class ToolExecutorInterface(ABC):
    """Runs built tools and records their outputs."""

    @abstractmethod
    async def execute_tool(self, tool: "Tool", tool_call: ToolCall, agent: "Agent") -> bool:
        """Execute one tool and append its call and output to the conversation.

        Returns:
            Whether the tool succeeded
        """
        pass


class McpConnectionInterface(ABC):
    """Connection to one MCP server."""

    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    async def list_tools(self, refresh: bool = False) -> Dict[str, "McpTool"]:
        pass

    @abstractmethod
    async def call_tool(self, tool: "McpTool") -> str:
        pass


@runtime_checkable
class ToolCache(Protocol):
    """Persistent key/value store for MCP tool listings."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class TracingExporter(ABC):
    """Ships finished traces and spans somewhere."""

    @abstractmethod
    def export(self, items: List["Trace | Span"]) -> None:
        pass
