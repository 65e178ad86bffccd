"""Cache port - Keyed cache of the views that read the store.

Views cache their query results under hierarchical string keys such as
"tours", "jobs" or "jobs:<tour id>". Writers invalidate by key prefix
after they change the store so that every dependent view refetches.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, TypeVar

T = TypeVar("T")


class CachePort(Protocol[T]):
    """Port for the view cache.

    Implementations:
    - adapters/cache/query_cache.py (QueryCache) - Production
    - adapters/cache/null_cache.py (NullQueryCache) - Testing
    """

    def get(self, key: str) -> Optional[T]:
        """Get a value from the cache.

        Args:
            key: The cache key.

        Returns:
            The cached value, or None if not found or expired.
        """
        ...

    def set(self, key: str, value: T) -> None:
        """Set a value in the cache."""
        ...

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        """Get from cache or compute and cache the value.

        Args:
            key: The cache key.
            compute_fn: Function to compute the value if not cached.

        Returns:
            The cached or computed value.
        """
        ...

    def invalidate(self, key: str) -> int:
        """Drop the entry for key and every entry nested under it.

        Invalidating "jobs" drops "jobs" as well as "jobs:<anything>".

        Args:
            key: The cache key (prefix) to invalidate.

        Returns:
            Number of entries removed.
        """
        ...

    def clear(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries that were cleared.
        """
        ...
