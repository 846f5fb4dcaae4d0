"""
Tool execution engine.

Runs one built tool, notifies observers around it and appends the tool call
and its output to the conversation. Every appended tool call is followed by
exactly one output carrying the same call id, whether the tool succeeded or
raised :class:`HandleToolError`.
"""

import json
import logging
from typing import Any, TYPE_CHECKING

from ..core.exceptions import HandleToolError
from ..core.interfaces import ToolExecutorInterface
from ..core.models import ToolCall, ToolOutput
from .base import Tool

if TYPE_CHECKING:
    from ..agent import Agent

logger = logging.getLogger(__name__)


def stringify_tool_result(result: Any) -> str:
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    return json.dumps(result, default=str, ensure_ascii=False)


class ToolExecutor(ToolExecutorInterface):
    """Sequential tool executor."""

    async def execute_tool(self, tool: Tool, tool_call: ToolCall, agent: "Agent") -> bool:
        context = agent.context
        observers = context.observer_invoker

        observers.agent_on_tool_call(context, agent, tool, tool_call)
        observers.tool_on_tool_call(context, tool, tool_call)

        context.add_message(tool_call, agent)

        success = False
        try:
            result = stringify_tool_result(await tool())
            success = True
            observers.tool_on_success(context, tool, tool_call, result)
            logger.debug(f"Tool {tool_call.tool} ({tool_call.id}) succeeded")
        except HandleToolError as e:
            result = e.to_payload()
            observers.tool_on_failure(context, tool, tool_call, result)
            logger.warning(f"Tool {tool_call.tool} ({tool_call.id}) failed: {e.message}")

        observers.agent_after_tool_call(context, agent, tool, tool_call, result, success)

        context.add_message(ToolOutput(content=result, tool_call_id=tool_call.id), agent)
        return success
