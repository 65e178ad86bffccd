"""Thread-safe in-memory store.

Implements StorePort with one dict of records per table. Used for local
runs and tests; it keeps an ordered log of every write so a test can
assert exactly which records a provisioning run produced, and in which
order.

Like the hosted store, it offers no transactions. Unique constraints
can be declared per table and are checked before a write commits.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ...domain.errors import StoreError
from ...ports.store import Record

# Tables whose rows have no surrogate id
_LINK_TABLES = frozenset({"job_departments"})

_DEFAULT_UNIQUE: Dict[str, Tuple[str, ...]] = {
    "job_departments": ("job_id", "department"),
}


def _matches(record: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(record.get(key) == value for key, value in filters.items())


@dataclass
class InMemoryStore:
    """In-memory implementation of StorePort.

    Attributes:
        unique_keys: Table name -> columns that must be unique together
        name: Store name for logging

    Example:
        store = InMemoryStore()
        tour = store.create("tours", {"name": "Summer Run"})
        store.find("tours", {"id": tour["id"]})
    """

    unique_keys: Dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(_DEFAULT_UNIQUE)
    )
    name: str = "memory"

    _tables: Dict[str, List[Record]] = field(default_factory=dict, repr=False)
    _writes: List[Tuple[str, str, Record]] = field(default_factory=list, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(f"store.{self.name}")

    def _prepare(self, entity: str, fields: Mapping[str, Any]) -> Record:
        record = dict(fields)
        if entity not in _LINK_TABLES:
            record.setdefault("id", str(uuid.uuid4()))
        record.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return record

    def _check_unique(
        self, entity: str, record: Mapping[str, Any], pending: Sequence[Record]
    ) -> None:
        columns = self.unique_keys.get(entity)
        if not columns:
            return
        key = {column: record.get(column) for column in columns}
        existing = self._tables.get(entity, [])
        if any(_matches(row, key) for row in [*existing, *pending]):
            raise StoreError(
                f"duplicate key value violates unique constraint on {entity} {key}",
                entity=entity,
                operation="create",
            )

    def create(self, entity: str, fields: Mapping[str, Any]) -> Record:
        return self.create_many(entity, [fields])[0]

    def create_many(
        self, entity: str, rows: Sequence[Mapping[str, Any]]
    ) -> List[Record]:
        """Insert all rows or none of them."""
        with self._lock:
            prepared: List[Record] = []
            for row in rows:
                record = self._prepare(entity, row)
                self._check_unique(entity, record, prepared)
                prepared.append(record)

            table = self._tables.setdefault(entity, [])
            for record in prepared:
                table.append(record)
                self._writes.append(("create", entity, dict(record)))

            self._logger.debug(
                "Records created",
                extra={"entity": entity, "count": len(prepared)},
            )
            return [dict(record) for record in prepared]

    def find(self, entity: str, filters: Mapping[str, Any]) -> Optional[Record]:
        with self._lock:
            for record in self._tables.get(entity, []):
                if _matches(record, filters):
                    return dict(record)
            return None

    def select(
        self, entity: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        with self._lock:
            return [
                dict(record)
                for record in self._tables.get(entity, [])
                if _matches(record, filters or {})
            ]

    def delete(self, entity: str, filters: Mapping[str, Any]) -> int:
        with self._lock:
            table = self._tables.get(entity, [])
            removed = [record for record in table if _matches(record, filters)]
            self._tables[entity] = [
                record for record in table if not _matches(record, filters)
            ]
            for record in removed:
                self._writes.append(("delete", entity, dict(record)))
            return len(removed)

    def count(self, entity: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Return the number of records in a table matching the filters."""
        return len(self.select(entity, filters))

    @property
    def writes(self) -> List[Tuple[str, str, Record]]:
        """Ordered log of (operation, entity, record) for every write."""
        with self._lock:
            return list(self._writes)
