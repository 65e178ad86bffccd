"""Store adapters - Implementations of the StorePort.

Available implementations:
- InMemoryStore: Thread-safe in-process tables, for tests and local runs
- SupabaseStore: The hosted Supabase/PostgREST store

SupabaseStore is imported lazily by the container so the supabase
client is only needed when that backend is selected.
"""

from .memory_store import InMemoryStore

__all__ = ["InMemoryStore"]
