"""Agent observer recording the run as spans."""

from typing import Optional, TYPE_CHECKING

from ..core.models import Message, ToolCall
from ..orchestrator.observers import AgentObserver
from .models import Span
from .span_factory import SpanFactory

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext
    from ..tools.base import Tool
    from .processor import TracingProcessor


class TraceAgentObserver(AgentObserver):
    """Translates agent events into agent, generation, handoff and tool spans."""

    def __init__(self, processor: "TracingProcessor"):
        self._processor = processor
        self._current_agent: Optional["Agent"] = None
        self._current_agent_span: Optional[Span] = None

    def before_invoke(self, agent: "Agent", context: "RunContext") -> None:
        trace = self._processor.trace()
        if trace is None:
            return
        # Re-invocations of the same agent stay inside its span
        if self._current_agent is not None and self._current_agent.name() == agent.name():
            return

        self._current_agent = agent
        if self._current_agent_span is not None:
            self._processor.stop_span(self._current_agent_span)
        self._current_agent_span = self._processor.start_span(SpanFactory.create_agent_span(agent, trace))

    def on_response(self, agent: "Agent", message: Message, context: "RunContext") -> None:
        trace = self._processor.trace()
        if trace is None or self._current_agent_span is None:
            return
        span = self._processor.start_span_after_previous(
            SpanFactory.create_generation_span([message], context, trace, self._current_agent_span)
        )
        self._processor.stop_span(span)

    def before_handoff(self, agent: "Agent", handoff_to_agent: "Agent", context: "RunContext") -> None:
        trace = self._processor.trace()
        if trace is None or self._current_agent_span is None:
            return
        span = self._processor.start_span(
            SpanFactory.create_handoff_span(agent, handoff_to_agent, trace, self._current_agent_span)
        )
        self._processor.stop_span(span)

    def on_tool_call(self, agent: "Agent", tool: "Tool", tool_call: ToolCall, context: "RunContext") -> None:
        trace = self._processor.trace()
        if trace is None or self._current_agent_span is None:
            return
        self._processor.start_span(SpanFactory.create_tool_span(tool, tool_call, None, trace, self._current_agent_span))

    def after_tool_call(
        self,
        agent: "Agent",
        tool: "Tool",
        tool_call: ToolCall,
        tool_output: str,
        success: bool,
        context: "RunContext",
    ) -> None:
        span = self._processor.stop_current()
        if span is None:
            return
        span.span_data["output"] = tool_output
        if not success:
            span.set_error(tool_output)
