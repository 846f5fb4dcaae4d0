"""
Tools for the agents SDK.

This package provides the tool abstraction, the JSON-Schema compiler, argument
binding, the tool execution engine, handoffs and MCP integration.
"""

from .base import Tool, ToolParameter, DynamicTool, DynamicProperty
from .schema import ToolSchemaCompiler, compile_tool
from .binding import build_tool
from .executor import ToolExecutor
from .handoff import Handoff
from .mcp_tool import McpTool, McpToolFactory
from .mcp_connection import McpConnection

__all__ = [
    "Tool",
    "ToolParameter",
    "DynamicTool",
    "DynamicProperty",
    "ToolSchemaCompiler",
    "compile_tool",
    "build_tool",
    "ToolExecutor",
    "Handoff",
    "McpTool",
    "McpToolFactory",
    "McpConnection",
]
