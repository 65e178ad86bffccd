"""Creation journal for compensating a failed provisioning run.

Every record a run writes is appended to the journal together with the
filter that identifies it. If the run fails and compensation is
enabled, the journal deletes those records newest-first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..domain.errors import StoreError
from ..ports.store import StorePort

logger = logging.getLogger(__name__)


@dataclass
class CreationJournal:
    """Ordered record of (entity, identifying filter) for each write."""

    entries: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def record(self, entity: str, key: Dict[str, Any]) -> None:
        self.entries.append((entity, dict(key)))

    def count(self, entity: str) -> int:
        return sum(1 for name, _ in self.entries if name == entity)

    def compensate(self, store: StorePort) -> int:
        """Delete every journaled record in reverse creation order.

        A delete that fails is logged and skipped so the remaining
        records are still removed.

        Returns:
            Number of records deleted.
        """
        deleted = 0
        for entity, key in reversed(self.entries):
            try:
                deleted += store.delete(entity, key)
            except StoreError as e:
                logger.error(
                    "Compensation delete failed",
                    extra={"entity": entity, "key": key, "error": str(e)},
                )
        logger.info(
            "Compensation finished",
            extra={"journaled": len(self.entries), "deleted": deleted},
        )
        self.entries.clear()
        return deleted
