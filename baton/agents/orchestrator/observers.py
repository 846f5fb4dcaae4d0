"""
Run observers.

Observers receive lifecycle events of a run. Every hook is a no-op by
default, so subclasses override only what they need. Hooks are called
synchronously, in registration order, and their return values are ignored.
"""

import logging
from typing import Callable, List, TYPE_CHECKING

from ..core.models import Message, Payload, ToolCall

if TYPE_CHECKING:
    from ..agent import Agent
    from ..tools.base import Tool
    from .run_context import RunContext

logger = logging.getLogger(__name__)


class AgentObserver:
    """Receives agent lifecycle events."""

    def before_invoke(self, agent: "Agent", context: "RunContext") -> None:
        pass

    def on_response(self, agent: "Agent", message: Message, context: "RunContext") -> None:
        pass

    def on_response_interval(self, agent: "Agent", payload: Payload, context: "RunContext") -> None:
        pass

    def on_tool_call(self, agent: "Agent", tool: "Tool", tool_call: ToolCall, context: "RunContext") -> None:
        pass

    def after_tool_call(
        self,
        agent: "Agent",
        tool: "Tool",
        tool_call: ToolCall,
        tool_output: str,
        success: bool,
        context: "RunContext",
    ) -> None:
        pass

    def before_handoff(self, agent: "Agent", handoff_to_agent: "Agent", context: "RunContext") -> None:
        pass


class ToolObserver:
    """Receives tool execution events."""

    def on_tool_call(self, tool: "Tool", tool_call: ToolCall) -> None:
        pass

    def on_success(self, tool: "Tool", tool_call: ToolCall, output: str) -> None:
        pass

    def on_failure(self, tool: "Tool", tool_call: ToolCall, output: str) -> None:
        pass


class StreamedAgentObserver(AgentObserver):
    """Forwards every streamed fragment to a callback."""

    def __init__(self, callback: Callable[[Payload, "RunContext"], None]):
        self._callback = callback

    def on_response_interval(self, agent: "Agent", payload: Payload, context: "RunContext") -> None:
        self._callback(payload, context)


class ObserverInvoker:
    """Fans events out to the observers registered on a run context."""

    def _agent_observers(self, context: "RunContext") -> List[AgentObserver]:
        return context.agent_observers()

    def _tool_observers(self, context: "RunContext") -> List[ToolObserver]:
        return context.tool_observers()

    def agent_before_invoke(self, context: "RunContext", agent: "Agent") -> None:
        for observer in self._agent_observers(context):
            observer.before_invoke(agent, context)

    def agent_on_response(self, context: "RunContext", agent: "Agent", message: Message) -> None:
        for observer in self._agent_observers(context):
            observer.on_response(agent, message, context)

    def agent_on_response_interval(self, context: "RunContext", agent: "Agent", payload: Payload) -> None:
        for observer in self._agent_observers(context):
            observer.on_response_interval(agent, payload, context)

    def agent_on_tool_call(self, context: "RunContext", agent: "Agent", tool: "Tool", tool_call: ToolCall) -> None:
        for observer in self._agent_observers(context):
            observer.on_tool_call(agent, tool, tool_call, context)

    def agent_after_tool_call(
        self,
        context: "RunContext",
        agent: "Agent",
        tool: "Tool",
        tool_call: ToolCall,
        tool_output: str,
        success: bool,
    ) -> None:
        for observer in self._agent_observers(context):
            observer.after_tool_call(agent, tool, tool_call, tool_output, success, context)

    def agent_before_handoff(self, context: "RunContext", agent: "Agent", handoff_to_agent: "Agent") -> None:
        for observer in self._agent_observers(context):
            observer.before_handoff(agent, handoff_to_agent, context)

    def tool_on_tool_call(self, context: "RunContext", tool: "Tool", tool_call: ToolCall) -> None:
        for observer in self._tool_observers(context):
            observer.on_tool_call(tool, tool_call)

    def tool_on_success(self, context: "RunContext", tool: "Tool", tool_call: ToolCall, output: str) -> None:
        for observer in self._tool_observers(context):
            observer.on_success(tool, tool_call, output)

    def tool_on_failure(self, context: "RunContext", tool: "Tool", tool_call: ToolCall, output: str) -> None:
        for observer in self._tool_observers(context):
            observer.on_failure(tool, tool_call, output)
