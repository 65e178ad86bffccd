"""Store port - Abstraction over the hosted relational store.

The store is transactionally weak: every call commits on its own and
there is no way to group several writes. Records are plain dicts keyed
by column name; every created record carries a generated "id" except
link tables, which are keyed by their columns.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

Record = Dict[str, Any]


class StorePort(Protocol):
    """Port for the persistent store.

    Implementations:
    - adapters/store/memory_store.py (InMemoryStore) - Testing, local runs
    - adapters/store/supabase_store.py (SupabaseStore) - Production

    Every method raises StoreError on failure.
    """

    def create(self, entity: str, fields: Mapping[str, Any]) -> Record:
        """Insert one record and return it as stored (with its id).

        Args:
            entity: Table name, e.g. "tours".
            fields: Column values to insert.

        Returns:
            The inserted record.
        """
        ...

    def create_many(
        self, entity: str, rows: Sequence[Mapping[str, Any]]
    ) -> List[Record]:
        """Insert several records in a single write.

        Args:
            entity: Table name.
            rows: Column values, one mapping per record.

        Returns:
            The inserted records, in input order.
        """
        ...

    def find(self, entity: str, filters: Mapping[str, Any]) -> Optional[Record]:
        """Return the first record whose columns equal all filters.

        Args:
            entity: Table name.
            filters: Column name -> required value.

        Returns:
            The matching record, or None if there is none.
        """
        ...

    def select(
        self, entity: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        """Return every record matching the filters (all when None)."""
        ...

    def delete(self, entity: str, filters: Mapping[str, Any]) -> int:
        """Delete the records matching the filters.

        Returns:
            Number of records deleted.
        """
        ...
