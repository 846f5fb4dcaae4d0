"""
MCP tool proxy.

Exposes a tool advertised by an MCP server as a :class:`DynamicTool` whose
parameters mirror the server's input schema.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

from pydantic import Field

from ..core.enums import ParameterType
from .base import DynamicTool

if TYPE_CHECKING:
    from .mcp_connection import McpConnection

logger = logging.getLogger(__name__)


def _json_type(details: Mapping[str, Any]) -> str:
    declared = details.get("type")
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    return declared or ParameterType.STRING.value


class McpTool(DynamicTool):
    """A tool executed by an MCP server."""

    connection: Any = Field(..., description="Connection the tool is called through", exclude=True)
    mcp_name: str = Field(..., description="Tool name on the MCP server")

    def register_input_schema(self, input_schema: Optional[Mapping[str, Any]]) -> "McpTool":
        """Register one property per entry of the server input schema."""
        input_schema = input_schema or {}
        required = set(input_schema.get("required") or [])

        for name, details in (input_schema.get("properties") or {}).items():
            details = dict(details or {})
            items = details.get("items")
            self.add_property(
                name,
                type=_json_type(details),
                description=details.get("description", f"Parameter: {name}"),
                required=name in required,
                enum=details.get("enum"),
                items_type=_json_type(items) if isinstance(items, Mapping) else None,
                schema=details,
            )
        return self

    async def run(self) -> str:
        return await self.connection.call_tool(self)


class McpToolFactory:
    """Builds :class:`McpTool` instances from MCP tool definitions."""

    @staticmethod
    def create_tool(
        connection: "McpConnection",
        definition: Mapping[str, Any],
        tool_name: Optional[str] = None,
        tool_description: Optional[str] = None,
    ) -> McpTool:
        tool = McpTool(connection=connection, mcp_name=definition["name"])
        tool.with_name(tool_name or definition["name"])
        tool.with_description(tool_description if tool_description is not None else definition.get("description"))
        return tool.register_input_schema(definition.get("inputSchema"))

    @classmethod
    def create_tools(
        cls,
        connection: "McpConnection",
        definitions: List[Mapping[str, Any]],
        alternate_names: Optional[Mapping[str, str]] = None,
        alternate_descriptions: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, McpTool]:
        alternate_names = alternate_names or {}
        alternate_descriptions = alternate_descriptions or {}
        tools: Dict[str, McpTool] = {}
        for definition in definitions:
            mcp_name = definition["name"]
            tool = cls.create_tool(
                connection,
                definition,
                alternate_names.get(mcp_name),
                alternate_descriptions.get(mcp_name),
            )
            tools[tool.name()] = tool
        return tools
