"""
In-memory tool cache implementation.

This module provides an in-memory implementation of the ToolCache
capability for development and testing purposes.
"""

import logging
import time
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.interfaces import ToolCache

logger = logging.getLogger(__name__)


class InMemoryToolCache(ToolCache):
    """TTL key/value cache held in process memory.

    Entries expire ``ttl`` seconds after they are written; ``None`` means they
    never expire. It is not shared between processes.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"Tool cache entry expired: {key}")
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            expires_at = self._clock() + ttl if ttl is not None else None
            self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
