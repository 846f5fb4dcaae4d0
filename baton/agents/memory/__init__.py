"""In-memory storage backends."""

from .in_memory_tool_cache import InMemoryToolCache

__all__ = ["InMemoryToolCache"]
