"""Cache adapters - Implementations of the CachePort.

Available implementations:
- QueryCache: Thread-safe view cache with optional TTL and prefix invalidation
- NullQueryCache: No-op cache for testing (always misses)
"""

from .null_cache import NullQueryCache
from .query_cache import QueryCache

__all__ = ["QueryCache", "NullQueryCache"]
