"""Null view cache for testing.

This cache always misses, so every view read goes straight to the
store, while still recording which keys were invalidated. Tests use it
to assert that a writer invalidated the right views.

Example:
    @pytest.fixture
    def service(store, null_cache, notifier):
        return TourProvisioningService(store, null_cache, notifier)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class NullQueryCache(Generic[T]):
    """No-op cache - always misses, remembers invalidated keys."""

    name: str = "null"
    invalidated: List[str] = field(default_factory=list)

    def get(self, key: str) -> Optional[T]:
        return None

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        pass

    def get_or_compute(self, key: str, compute_fn: Callable[[], T]) -> T:
        return compute_fn()

    def invalidate(self, key: str) -> int:
        """Record the key; nothing is ever cached so nothing is removed."""
        self.invalidated.append(key)
        return 0

    def clear(self) -> int:
        return 0
