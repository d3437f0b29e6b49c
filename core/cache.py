# core/cache.py

"""
In-memory view cache for listing screens.

Entries are keyed by (path, principal id) and expire after a TTL.
Write accessors call `revalidate_path(path)` so the next read of that
screen goes back to Supabase.
"""

from typing import Optional, Any, Callable, Dict, Tuple
from datetime import datetime, timedelta
from threading import Lock
from core.logging_config import logger


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        return datetime.now() >= self.expires_at


class ViewCache:
    """
    Path-scoped cache with TTL support.

    Thread-safe; get_venue_dashboard fans out over a thread pool.
    """

    def __init__(self):
        self._cache: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = Lock()

    def get(self, path: str, principal_id: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get((path, principal_id))
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[(path, principal_id)]
                return None

            return entry.value

    def set(self, path: str, principal_id: str, value: Any, ttl_seconds: int = 60):
        with self._lock:
            self._cache[(path, principal_id)] = CacheEntry(value, ttl_seconds)

    def revalidate_path(self, path: str) -> int:
        """
        Drop every principal's entry for `path` (any query string included).

        Returns the number of entries removed.
        """
        with self._lock:
            keys = [
                key for key in self._cache
                if key[0] == path or key[0].startswith(path + "?")
            ]
            for key in keys:
                del self._cache[key]

        if keys:
            logger.debug(f"Revalidated {path} ({len(keys)} entries)")
        return len(keys)

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self):
        with self._lock:
            expired_keys = [
                key for key, entry in self._cache.items()
                if entry.is_expired()
            ]
            for key in expired_keys:
                del self._cache[key]

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


# Global cache instance
_cache = ViewCache()


def get_cache() -> ViewCache:
    """Get the global cache instance."""
    return _cache


def revalidate_path(*paths: str):
    """Invalidate cached views for each path."""
    for path in paths:
        _cache.revalidate_path(path)


def cached_view(path: str, principal_id: str, ttl_seconds: int, build: Callable):
    """
    Return the cached ActionResult for (path, principal) or build it.
    Only successful results are stored.
    """
    hit = _cache.get(path, principal_id)
    if hit is not None:
        logger.debug(f"Cache hit: {path}")
        return hit

    result = build()
    if result.success:
        _cache.set(path, principal_id, result, ttl_seconds)
    return result
