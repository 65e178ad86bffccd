"""Thread-safe in-memory view cache with prefix invalidation.

Views store query results under hierarchical keys ("tours",
"jobs:<tour id>", ...). Invalidating a key drops it together with every
key nested beneath it, so a writer only has to name the top-level
collections it touched.

Key features:
- Thread-safe with RLock
- Optional TTL (time-to-live)
- Prefix invalidation
- Statistics tracking
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")

KEY_SEPARATOR = ":"


def _is_under(key: str, prefix: str) -> bool:
    return key == prefix or key.startswith(prefix + KEY_SEPARATOR)


@dataclass
class QueryCache(Generic[T]):
    """In-memory implementation of CachePort.

    Attributes:
        default_ttl_seconds: Default time-to-live for entries (None = no expiry)
        name: Cache name for logging

    Example:
        cache = QueryCache[list](name="views")
        tours = cache.get_or_compute("tours", lambda: store.select("tours"))
        cache.invalidate("tours")
    """

    default_ttl_seconds: Optional[float] = None
    name: str = "views"

    _store: Dict[str, Tuple[Any, float]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    # Invalidation generations: prefix -> generation of its last invalidate
    _generation: int = field(default=0, repr=False)
    _invalidated_at: Dict[str, int] = field(default_factory=dict, repr=False)
    _cleared_at: int = field(default=0, repr=False)

    # Statistics
    _hits: int = field(default=0, repr=False)
    _misses: int = field(default=0, repr=False)
    _invalidations: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"cache.{self.name}")

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None

            value, expiry = entry
            if time.time() > expiry:
                del self._store[key]
                self._logger.debug("Cache entry expired", extra={"key": key})
                self._misses += 1
                return None

            self._hits += 1
            return value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        """Set a value in the cache.

        Args:
            key: The cache key.
            value: The value to cache.
            ttl: Optional TTL override for this entry.
        """
        with self._lock:
            effective_ttl = ttl if ttl is not None else self.default_ttl_seconds
            expiry = (
                time.time() + effective_ttl
                if effective_ttl is not None
                else float("inf")
            )
            self._store[key] = (value, expiry)

    def _invalidated_since(self, key: str, generation: int) -> bool:
        if self._cleared_at > generation:
            return True
        return any(
            at > generation and _is_under(key, prefix)
            for prefix, at in self._invalidated_at.items()
        )

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Return the cached value, computing and caching it on a miss.

        The value is computed outside the lock. If the key is
        invalidated while it is being computed, the result is returned
        but not cached, so the next read computes it again.
        """
        with self._lock:
            value = self.get(key)
            if value is not None:
                return value
            generation = self._generation

        self._logger.debug("Cache miss, computing", extra={"key": key})
        computed = compute_fn()

        with self._lock:
            if self._invalidated_since(key, generation):
                self._logger.debug(
                    "Key invalidated while computing, not cached",
                    extra={"key": key},
                )
            else:
                self.set(key, computed)
        return computed

    def invalidate(self, key: str) -> int:
        with self._lock:
            stale = [k for k in self._store if _is_under(k, key)]
            for k in stale:
                del self._store[k]
            self._generation += 1
            self._invalidated_at[key] = self._generation
            self._invalidations += 1
            self._logger.debug(
                "Cache invalidated",
                extra={"key": key, "entries_removed": len(stale)},
            )
            return len(stale)

    def clear(self) -> int:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._generation += 1
            self._cleared_at = self._generation
            self._invalidated_at.clear()
            self._hits = 0
            self._misses = 0
            self._invalidations = 0
            self._logger.info("Cache cleared", extra={"entries_cleared": count})
            return count

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store.keys())

    def stats(self) -> Dict[str, Any]:
        """Return hit/miss/invalidation counts and size."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "invalidations": self._invalidations,
                "hit_rate_percent": round(hit_rate, 1),
            }
