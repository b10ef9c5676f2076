"""TTL cache for Kubernetes objects read by handlers."""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Optional

# Cache with TTL support, shared by all handler threads
_cache: dict[str, tuple[Any, float]] = {}
_cache_lock = threading.Lock()
_cache_ttl: float = float(os.getenv("K8S_CACHE_TTL_SECONDS", "30.0"))


def get_cached_object(key: str) -> Optional[Any]:
    """Get an object from cache if it hasn't expired.

    Args:
        key: Cache key (typically "kind:namespace:name")

    Returns:
        Cached object or None if not found or expired
    """
    with _cache_lock:
        entry = _cache.get(key)
        if entry is None:
            return None

        obj, timestamp = entry
        if time.time() - timestamp > _cache_ttl:
            del _cache[key]
            return None

        return obj


def set_cached_object(key: str, obj: Any) -> None:
    """Store an object in cache with current timestamp."""
    with _cache_lock:
        _cache[key] = (obj, time.time())


def invalidate_cache(pattern: Optional[str] = None) -> None:
    """Invalidate cache entries.

    Args:
        pattern: Optional substring of keys to drop (if None, clears all)
    """
    with _cache_lock:
        if pattern is None:
            _cache.clear()
            return
        for key in [key for key in _cache if pattern in key]:
            del _cache[key]


def make_cache_key(kind: str, namespace: str, name: str) -> str:
    """Create a cache key for a Kubernetes resource."""
    return f"{kind}:{namespace}:{name}"
