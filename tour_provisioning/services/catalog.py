"""Cached read views over provisioned tours.

These are the views that depend on the "tours" and "jobs" cache keys:
after a tour is provisioned they are invalidated and the next read
goes back to the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..domain.models import Department, Job, Tour, TourDate
from ..ports.cache import CachePort
from ..ports.store import StorePort
from .graph_builder import JOB_DEPARTMENTS, JOBS, TOUR_DATES, TOURS


@dataclass
class TourCatalog:
    """Read side for tours, their dates and jobs."""

    store: StorePort
    cache: CachePort

    def list_tours(self) -> List[Tour]:
        return self.cache.get_or_compute(
            "tours",
            lambda: [Tour.from_record(r) for r in self.store.select(TOURS)],
        )

    def tour_dates(self, tour_id: str) -> List[TourDate]:
        """Dates of a tour in calendar order."""
        return self.cache.get_or_compute(
            f"tours:{tour_id}:dates",
            lambda: sorted(
                (
                    TourDate.from_record(r)
                    for r in self.store.select(TOUR_DATES, {"tour_id": tour_id})
                ),
                key=lambda td: td.date,
            ),
        )

    def list_jobs(self, tour_id: Optional[str] = None) -> List[Job]:
        """All jobs, or only those of one tour, ordered by start time."""
        key = "jobs" if tour_id is None else f"jobs:{tour_id}"
        filters = None if tour_id is None else {"tour_id": tour_id}
        return self.cache.get_or_compute(
            key,
            lambda: sorted(
                (Job.from_record(r) for r in self.store.select(JOBS, filters)),
                key=lambda job: job.start_time,
            ),
        )

    def job_departments(self, job_id: str) -> List[Department]:
        return self.cache.get_or_compute(
            f"jobs:{job_id}:departments",
            lambda: [
                Department.parse(r["department"])
                for r in self.store.select(JOB_DEPARTMENTS, {"job_id": job_id})
            ],
        )
