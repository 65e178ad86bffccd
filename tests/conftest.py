"""Shared fixtures for the provisioning tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence

import pytest

from tour_provisioning.adapters.cache import NullQueryCache
from tour_provisioning.adapters.notify import LoggingNotifier
from tour_provisioning.adapters.store import InMemoryStore
from tour_provisioning.config import ProvisioningConfig
from tour_provisioning.domain.errors import StoreError
from tour_provisioning.services import TourProvisioningService


@dataclass
class FailingStore(InMemoryStore):
    """In-memory store whose Nth write to one table fails."""

    fail_entity: str = ""
    fail_on_call: int = 1
    calls: int = 0

    def create_many(
        self, entity: str, rows: Sequence[Mapping[str, Any]]
    ) -> List[dict]:
        if entity == self.fail_entity:
            self.calls += 1
            if self.calls == self.fail_on_call:
                raise StoreError(
                    "connection reset by peer", entity=entity, operation="create"
                )
        return super().create_many(entity, rows)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def null_cache():
    return NullQueryCache()


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
def config():
    return ProvisioningConfig()


@pytest.fixture
def service(store, null_cache, notifier, config):
    return TourProvisioningService(
        store=store, cache=null_cache, notifier=notifier, config=config
    )


def created(store: InMemoryStore, entity: str) -> List[dict]:
    """Records created in a table, in write order."""
    return [
        record
        for operation, name, record in store.writes
        if operation == "create" and name == entity
    ]
