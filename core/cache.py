# core/cache.py

"""
In-memory TTL cache for reference data.

Only the zoning law list is cached: it is read on every public
screen and changes only when an admin edits it. Writers call
`cache_delete_prefix("zoning:")` so a stale list never outlives
an admin edit on this process.
"""

import time
from threading import Lock
from typing import Any, Dict, Optional, Tuple

from core.logging_config import logger


class SimpleCache:
    """Thread-safe key → (expires_at, value) store on the monotonic clock."""

    def __init__(self):
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            hit = self._entries.get(key)
            if hit is None:
                return None
            expires_at, value = hit
            if time.monotonic() >= expires_at:
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int = 300):
        with self._lock:
            self._entries[key] = (time.monotonic() + ttl_seconds, value)

    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with prefix. Returns how many were removed."""
        with self._lock:
            stale = [k for k in self._entries if k.startswith(prefix)]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


_cache = SimpleCache()


def cache_get(key: str) -> Optional[Any]:
    return _cache.get(key)


def cache_set(key: str, value: Any, ttl_seconds: int = 300):
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str):
    _cache.delete(key)


def cache_delete_prefix(prefix: str):
    removed = _cache.delete_prefix(prefix)
    if removed:
        logger.debug(f"Cache invalidated {removed} key(s) under '{prefix}'")


def cache_clear():
    _cache.clear()
