"""
MCP connection management.

This module wraps a FastMCP client for one MCP server: connection lifecycle,
tool discovery with optional caching, allow-listing and renaming of tools,
and tool execution.

Usage:
    connection = McpConnection.for_streamable_http("https://example.com/mcp")
    connection.with_tools("search", "fetch").with_cache(InMemoryToolCache())

    agent = Agent(name="Search Agent", mcp_connections=[connection])
"""

import hashlib
import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Mapping, Optional, Sequence

from fastmcp import Client
from fastmcp.client.transports import SSETransport, StdioTransport, StreamableHttpTransport
from mcp.types import TextContent

from ..core.exceptions import HandleToolError
from ..core.interfaces import McpConnectionInterface, ToolCache
from .mcp_tool import McpTool, McpToolFactory

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 3600


def default_cache_key(seed: str) -> str:
    return "mcp_tools_" + hashlib.md5(seed.encode("utf-8")).hexdigest()


class McpConnection(McpConnectionInterface):
    """Connection to a single MCP server."""

    def __init__(self, client: Client, name: str = "MCP server", cache: Optional[ToolCache] = None):
        self._client = client
        self._name = name
        self._cache = cache
        self._cache_key = default_cache_key(name)
        self._cache_ttl: float = DEFAULT_CACHE_TTL

        self._allowed_tool_names: List[str] = []
        self._alternate_names: Dict[str, str] = {}
        self._alternate_descriptions: Dict[str, str] = {}

        self._tools: Optional[Dict[str, McpTool]] = None
        self._exit_stack: Optional[AsyncExitStack] = None

    @classmethod
    def for_streamable_http(cls, url: str, headers: Optional[Dict[str, str]] = None) -> "McpConnection":
        connection = cls(Client(StreamableHttpTransport(url, headers=headers or {})))
        return connection.with_cache_key(default_cache_key(url))

    @classmethod
    def for_sse(cls, url: str, headers: Optional[Dict[str, str]] = None) -> "McpConnection":
        connection = cls(Client(SSETransport(url, headers=headers or {})))
        return connection.with_cache_key(default_cache_key(url))

    @classmethod
    def for_process(
        cls,
        command: str,
        args: Sequence[str] = (),
        env: Optional[Dict[str, str]] = None,
    ) -> "McpConnection":
        connection = cls(Client(StdioTransport(command, list(args), env=env)))
        return connection.with_cache_key(default_cache_key(" ".join([command, *args])))

    def name(self) -> str:
        return self._name

    @property
    def client(self) -> Client:
        return self._client

    def with_tools(self, *tool_names: str) -> "McpConnection":
        """Only expose the named tools. Without a call every tool is exposed."""
        self._allowed_tool_names.extend(tool_names)
        self._tools = None
        return self

    def with_alternate_tool_names(self, names: Mapping[str, str]) -> "McpConnection":
        self._alternate_names.update(names)
        self._tools = None
        return self

    def with_alternate_tool_descriptions(self, descriptions: Mapping[str, str]) -> "McpConnection":
        self._alternate_descriptions.update(descriptions)
        self._tools = None
        return self

    def with_cache(self, cache: ToolCache, ttl: Optional[float] = None, key: Optional[str] = None) -> "McpConnection":
        self._cache = cache
        if ttl is not None:
            self._cache_ttl = ttl
        if key is not None:
            self._cache_key = key
        return self

    def with_cache_key(self, key: str) -> "McpConnection":
        self._cache_key = key
        return self

    def with_cache_ttl(self, ttl: float) -> "McpConnection":
        self._cache_ttl = ttl
        return self

    @property
    def cache_key(self) -> str:
        return self._cache_key

    def is_connected(self) -> bool:
        return self._client.is_connected()

    async def connect(self) -> None:
        if self.is_connected():
            return
        stack = AsyncExitStack()
        await stack.enter_async_context(self._client)
        self._exit_stack = stack
        logger.info(f"Connected to MCP server {self._name}")

    async def disconnect(self) -> None:
        if self._exit_stack is None:
            return
        stack, self._exit_stack = self._exit_stack, None
        await stack.aclose()
        logger.info(f"Disconnected from MCP server {self._name}")

    async def list_tools(self, refresh: bool = False) -> Dict[str, McpTool]:
        """Tools exposed by the server, keyed by their (possibly alternate) name.

        Lookup order is the in-memory list, then the persistent cache, then
        the server. ``refresh`` skips both caches and replaces them.
        """
        if not refresh and self._tools is not None:
            return dict(self._tools)

        definitions = None
        if not refresh and self._cache is not None:
            cached = self._cache.get(self._cache_key)
            if isinstance(cached, list):
                definitions = cached
                logger.debug(f"Loaded {len(cached)} MCP tool definitions from cache {self._cache_key}")

        if definitions is None:
            definitions = await self._fetch_definitions()
            if self._cache is not None:
                self._cache.set(self._cache_key, definitions, self._cache_ttl)

        self._tools = McpToolFactory.create_tools(
            self,
            self._filter_allowed(definitions),
            self._alternate_names,
            self._alternate_descriptions,
        )
        return dict(self._tools)

    async def _fetch_definitions(self) -> List[Dict[str, Any]]:
        tools = await self._client.list_tools()
        logger.info(f"MCP server {self._name} advertised {len(tools)} tools")
        return [
            {"name": tool.name, "description": tool.description, "inputSchema": tool.inputSchema}
            for tool in tools
        ]

    def _filter_allowed(self, definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not self._allowed_tool_names:
            return definitions
        return [d for d in definitions if d["name"] in self._allowed_tool_names]

    async def call_tool(self, tool: McpTool) -> str:
        """Execute ``tool`` on the server and return its text content.

        Raises:
            HandleToolError: If the server reports an error or the call fails
        """
        try:
            result = await self._client.call_tool_mcp(tool.mcp_name, tool.values())
        except Exception as e:
            logger.error(f"MCP tool call failed: {tool.mcp_name} - {e}")
            raise HandleToolError(f"Failed to call MCP tool: {e}") from e

        text = "".join(item.text for item in result.content if isinstance(item, TextContent))
        if result.isError:
            raise HandleToolError(f"Failed to call MCP tool: {text or 'unknown error'}")
        return text
