"""Binding model supplied arguments onto fresh tool instances."""

import logging
from typing import Mapping

from ..core.exceptions import BuildToolError
from ..core.models import ToolCall
from .base import Tool

logger = logging.getLogger(__name__)


def build_tool(tools: Mapping[str, Tool], tool_call: ToolCall) -> Tool:
    """Clone the prototype named by ``tool_call`` and bind its arguments.

    Args:
        tools: Executable tools keyed by name
        tool_call: Tool call requested by the model

    Returns:
        A fresh tool instance, the prototype is never mutated

    Raises:
        BuildToolError: If the tool is unknown or an argument cannot be bound
    """
    prototype = tools.get(tool_call.tool)
    if prototype is None:
        raise BuildToolError.for_tool_call(tool_call, f"Tool {tool_call.tool} does not exist")

    tool = prototype.clone()
    for argument, value in tool_call.arguments.items():
        try:
            tool.bind(argument, value)
        except (TypeError, ValueError, AttributeError) as e:
            raise BuildToolError.for_tool_call(tool_call, f"Invalid value for argument {argument}: {e}") from e

    logger.debug(f"Built tool {tool_call.tool} for call {tool_call.id}")
    return tool
