"""Supabase store adapter.

Talks to the hosted Postgres through the supabase-py query builder. Each
call is a single PostgREST request that commits on its own; failures
of any kind (network, constraint violation, row-level security) are
wrapped in StoreError with the table and operation that failed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from supabase import Client, create_client

from ...config import StoreConfig
from ...domain.errors import ConfigurationError, StoreError
from ...ports.store import Record


@dataclass
class SupabaseStore:
    """StorePort implementation backed by a Supabase project.

    Attributes:
        client: Configured supabase client
    """

    client: Client

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: StoreConfig) -> SupabaseStore:
        """Create a store from the project URL and key in config.

        Raises:
            ConfigurationError: If the URL or key is missing.
        """
        if not config.supabase_url:
            raise ConfigurationError(
                "Supabase URL is not configured",
                setting_name="TP_STORE_SUPABASE_URL",
                expected_type="https URL",
            )
        if not config.supabase_key:
            raise ConfigurationError(
                "Supabase key is not configured",
                setting_name="TP_STORE_SUPABASE_KEY",
                expected_type="API key",
            )
        return cls(client=create_client(config.supabase_url, config.supabase_key))

    def _fail(self, entity: str, operation: str, error: Exception) -> StoreError:
        self._logger.error(
            "Store request failed",
            extra={"entity": entity, "operation": operation, "error": str(error)},
        )
        message = getattr(error, "message", None) or str(error)
        return StoreError(message, entity=entity, operation=operation, cause=error)

    def create(self, entity: str, fields: Mapping[str, Any]) -> Record:
        records = self.create_many(entity, [fields])
        if not records:
            raise StoreError(
                f"Insert into {entity} returned no record",
                entity=entity,
                operation="create",
            )
        return records[0]

    def create_many(
        self, entity: str, rows: Sequence[Mapping[str, Any]]
    ) -> List[Record]:
        payload = [dict(row) for row in rows]
        try:
            response = self.client.table(entity).insert(payload).execute()
        except Exception as e:
            raise self._fail(entity, "create", e)
        self._logger.debug(
            "Records created", extra={"entity": entity, "count": len(payload)}
        )
        return list(response.data or [])

    def find(self, entity: str, filters: Mapping[str, Any]) -> Optional[Record]:
        try:
            query = self.client.table(entity).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.limit(1).execute()
        except Exception as e:
            raise self._fail(entity, "find", e)
        rows = response.data or []
        return rows[0] if rows else None

    def select(
        self, entity: str, filters: Optional[Mapping[str, Any]] = None
    ) -> List[Record]:
        try:
            query = self.client.table(entity).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            response = query.execute()
        except Exception as e:
            raise self._fail(entity, "select", e)
        return list(response.data or [])

    def delete(self, entity: str, filters: Mapping[str, Any]) -> int:
        if not filters:
            # PostgREST refuses unfiltered deletes; never send one
            raise StoreError(
                f"Refusing to delete every row of {entity}",
                entity=entity,
                operation="delete",
            )
        try:
            query = self.client.table(entity).delete()
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.execute()
        except Exception as e:
            raise self._fail(entity, "delete", e)
        return len(response.data or [])
