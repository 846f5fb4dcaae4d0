"""Builders for the span kinds recorded during a run."""

from typing import List, Optional, TYPE_CHECKING

from ..core.enums import SpanType
from ..core.models import Message, ToolCall
from .models import Span, Trace

if TYPE_CHECKING:
    from ..agent import Agent
    from ..orchestrator.run_context import RunContext
    from ..tools.base import Tool


class SpanFactory:

    @staticmethod
    def create_agent_span(agent: "Agent", trace: Trace, parent: Optional[Span] = None) -> Span:
        return Span(
            trace_id=trace.id,
            parent_id=parent.id if parent else None,
            span_data={
                "type": SpanType.AGENT.value,
                "name": agent.name(),
                "handoffs": list(agent.handoffs()),
                "tools": list(agent.tools()),
            },
        )

    @staticmethod
    def create_tool_span(
        tool: "Tool",
        tool_call: ToolCall,
        output: Optional[str],
        trace: Trace,
        parent: Optional[Span] = None,
    ) -> Span:
        return Span(
            trace_id=trace.id,
            parent_id=parent.id if parent else None,
            span_data={
                "type": SpanType.FUNCTION.value,
                "name": tool.name(),
                "input": tool_call.arguments_payload,
                "output": output,
            },
        )

    @staticmethod
    def create_generation_span(
        messages: List[Message],
        context: "RunContext",
        trace: Trace,
        parent: Optional[Span] = None,
    ) -> Span:
        output_ids = {id(message) for message in messages}
        conversation_input = [m.to_dict() for m in context.conversation() if id(m) not in output_ids]
        last_message = messages[-1]
        owner = last_message.owner
        settings = owner.model_settings() if owner is not None else None

        return Span(
            trace_id=trace.id,
            parent_id=parent.id if parent else None,
            span_data={
                "type": SpanType.GENERATION.value,
                "input": conversation_input,
                "output": [m.to_dict() for m in messages],
                "model": settings.model_name if settings else None,
                "model_config": {"temperature": settings.temperature if settings else 0.7},
                "usage": {key: value or 0 for key, value in last_message.usage().items()},
            },
        )

    @staticmethod
    def create_handoff_span(from_agent: "Agent", to_agent: "Agent", trace: Trace, parent: Optional[Span] = None) -> Span:
        return Span(
            trace_id=trace.id,
            parent_id=parent.id if parent else None,
            span_data={
                "type": SpanType.HANDOFF.value,
                "from_agent": from_agent.name(),
                "to_agent": to_agent.name(),
            },
        )
