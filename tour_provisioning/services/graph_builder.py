"""Entity graph builder - persists the record hierarchy of a tour.

Writes, strictly in this order and one store call at a time:

1. the tour,
2. the umbrella job spanning the whole tour,
3. the umbrella job's department links,
4. for each date, oldest first: its location (resolved or created),
   its tour date, its per-date job and that job's department links.

The first failing write aborts the run. Nothing written before it is
undone unless rollback_on_failure is set, so a failure at date k leaves
dates before k fully written and nothing for k or later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..config import ProvisioningConfig, get_config
from ..domain.errors import StoreError
from ..domain.models import Department, Job, Tour, TourDate, TourPlan, ValidatedDate
from ..ports.geocoding import GeocoderPort
from ..ports.store import StorePort
from .journal import CreationJournal
from .location_resolver import LocationResolver

TOURS = "tours"
JOBS = "jobs"
TOUR_DATES = "tour_dates"
JOB_DEPARTMENTS = "job_departments"


@dataclass
class EntityGraphBuilder:
    """Builds and persists the tour/job/tour-date hierarchy.

    Attributes:
        store: Store receiving the writes
        config: Provisioning conventions (titles, discriminators, day span)
        geocoder: Optional geocoder passed on to the location resolver
    """

    store: StorePort
    config: ProvisioningConfig = field(
        default_factory=lambda: get_config().provisioning
    )
    geocoder: Optional[GeocoderPort] = None

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _day_start(self, day: date) -> str:
        return f"{day.isoformat()}T{self.config.day_start}"

    def _day_end(self, day: date) -> str:
        return f"{day.isoformat()}T{self.config.day_end}"

    def _create(
        self, journal: CreationJournal, entity: str, fields: Dict[str, Any]
    ) -> Dict[str, Any]:
        record = self.store.create(entity, fields)
        journal.record(entity, {"id": record["id"]})
        return record

    def _link_departments(
        self,
        journal: CreationJournal,
        job_id: str,
        departments: Sequence[Department],
    ) -> None:
        if not departments:
            return
        rows = [
            {"job_id": job_id, "department": department.value}
            for department in departments
        ]
        self.store.create_many(JOB_DEPARTMENTS, rows)
        for row in rows:
            journal.record(JOB_DEPARTMENTS, row)

    def build(self, plan: TourPlan) -> Tour:
        """Persist the full hierarchy for a validated plan.

        Args:
            plan: Title, description, color, departments and validated
                dates in chronological order.

        Returns:
            The created tour.

        Raises:
            StoreError: On the first failing write.
        """
        journal = CreationJournal()
        try:
            return self._build(plan, journal)
        except StoreError as e:
            self._logger.error(
                "Tour provisioning aborted",
                extra={
                    "title": plan.title,
                    "error": str(e),
                    "tours_written": journal.count(TOURS),
                    "tour_dates_written": journal.count(TOUR_DATES),
                    "jobs_written": journal.count(JOBS),
                },
            )
            if self.config.rollback_on_failure:
                journal.compensate(self.store)
            raise

    def _build(self, plan: TourPlan, journal: CreationJournal) -> Tour:
        self._logger.info(
            "Starting tour provisioning",
            extra={
                "title": plan.title,
                "dates": len(plan.dates),
                "departments": [d.value for d in plan.departments],
            },
        )

        # Step 1: Tour
        tour_record = self._create(
            journal,
            TOURS,
            {
                "name": plan.title,
                "description": plan.description,
                "color": plan.color,
                "start_date": plan.first_date.isoformat(),
                "end_date": plan.last_date.isoformat(),
            },
        )
        tour = Tour.from_record(tour_record)

        # Step 2: Umbrella job over the whole tour
        umbrella = Job.from_record(
            self._create(
                journal,
                JOBS,
                {
                    "title": plan.title,
                    "description": plan.description,
                    "start_time": self._day_start(plan.first_date),
                    "end_time": self._day_end(plan.last_date),
                    "job_type": self.config.umbrella_job_type,
                    "color": plan.color,
                    "tour_id": tour.id,
                },
            )
        )

        # Step 3: Umbrella job departments
        self._link_departments(journal, umbrella.id, plan.departments)
        self._logger.debug(
            "Umbrella job created",
            extra={"tour_id": tour.id, "job_id": umbrella.id},
        )

        # Step 4: One tour date and job per date, oldest first
        resolver = LocationResolver(self.store, self.geocoder, journal=journal)
        for entry in plan.dates:
            self._build_date(plan, tour, entry, resolver, journal)

        self._logger.info(
            "Tour provisioned",
            extra={
                "tour_id": tour.id,
                "jobs": journal.count(JOBS),
                "tour_dates": journal.count(TOUR_DATES),
                "department_links": journal.count(JOB_DEPARTMENTS),
            },
        )
        return tour

    def _build_date(
        self,
        plan: TourPlan,
        tour: Tour,
        entry: ValidatedDate,
        resolver: LocationResolver,
        journal: CreationJournal,
    ) -> Job:
        location_id = resolver.resolve(entry.location)

        tour_date = TourDate.from_record(
            self._create(
                journal,
                TOUR_DATES,
                {
                    "tour_id": tour.id,
                    "date": entry.date.isoformat(),
                    "location_id": location_id,
                },
            )
        )

        job = Job.from_record(
            self._create(
                journal,
                JOBS,
                {
                    "title": self.config.date_job_title_template.format(
                        title=plan.title
                    ),
                    "description": plan.description,
                    "start_time": self._day_start(entry.date),
                    "end_time": self._day_end(entry.date),
                    "job_type": self.config.date_job_type,
                    "location_id": location_id,
                    "tour_date_id": tour_date.id,
                    "tour_id": tour.id,
                    "color": plan.color,
                },
            )
        )

        self._link_departments(journal, job.id, plan.departments)
        self._logger.debug(
            "Tour date created",
            extra={
                "date": entry.date.isoformat(),
                "tour_date_id": tour_date.id,
                "job_id": job.id,
                "location_id": location_id,
            },
        )
        return job
