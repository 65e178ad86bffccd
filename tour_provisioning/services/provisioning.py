"""Tour provisioning service - Main orchestrator.

This service is the public entry point for creating a tour. It runs
the whole flow for one submission:

1. Input validation (title, one date per row)
2. Date normalization
3. Entity graph construction
4. View invalidation and user notification
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence

from ..config import ProvisioningConfig, get_config
from ..domain.errors import ProvisioningError, ValidationError
from ..domain.forms import TourForm
from ..domain.models import Department, Tour, TourPlan
from ..ports.cache import CachePort
from ..ports.geocoding import GeocoderPort
from ..ports.notifier import NotificationKind, NotifierPort
from ..ports.store import StorePort
from .date_normalizer import DateNormalizer, RowInput
from .graph_builder import EntityGraphBuilder

INVALIDATED_VIEWS = ("jobs", "tours")
SUCCESS_MESSAGE = "Tour created successfully"
FALLBACK_ERROR_MESSAGE = "Failed to create tour"


def _unique_departments(departments: Iterable[object]) -> tuple[Department, ...]:
    seen: list[Department] = []
    for value in departments:
        department = Department.parse(value)
        if department not in seen:
            seen.append(department)
    return tuple(seen)


@dataclass
class TourProvisioningService:
    """Orchestrates tour provisioning.

    Attributes:
        store: Store the hierarchy is written to
        cache: View cache invalidated after a successful run
        notifier: Reports the outcome to the user
        config: Provisioning conventions
        geocoder: Optional geocoder for newly created locations
    """

    store: StorePort
    cache: CachePort
    notifier: NotifierPort
    config: ProvisioningConfig = field(
        default_factory=lambda: get_config().provisioning
    )
    geocoder: Optional[GeocoderPort] = None

    _normalizer: DateNormalizer = field(init=False, repr=False)
    _builder: EntityGraphBuilder = field(init=False, repr=False)
    _completed: Dict[str, Tour] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._normalizer = DateNormalizer(self.config)
        self._builder = EntityGraphBuilder(self.store, self.config, self.geocoder)

    def plan(
        self,
        title: str,
        description: str,
        color: Optional[str],
        departments: Iterable[object],
        date_entries: Sequence[RowInput],
    ) -> TourPlan:
        """Validate raw form input into a TourPlan without writing anything.

        Raises:
            ValidationError: If the input cannot be provisioned.
        """
        if not title or not title.strip():
            raise ValidationError(
                "Please enter a title for the tour",
                field_name="title",
            )
        dates = self._normalizer.normalize(date_entries)
        return TourPlan(
            title=title.strip(),
            description=description or "",
            color=color or self.config.default_color,
            departments=_unique_departments(departments),
            dates=dates,
        )

    def provision_tour(
        self,
        title: str,
        description: str,
        color: Optional[str],
        departments: Iterable[object],
        date_entries: Sequence[RowInput],
        idempotency_key: Optional[str] = None,
    ) -> Tour:
        """Create a tour with its umbrella job, dates and per-date jobs.

        Args:
            title: Tour name; also the title of the umbrella job.
            description: Free text copied to the tour and every job.
            color: Display color; the configured default when empty.
            departments: Departments linked to every job.
            date_entries: (date, location) rows as entered.
            idempotency_key: When given, a second call with the key of a
                run that already succeeded returns that run's tour
                without writing anything.

        Returns:
            The created tour.

        Raises:
            ValidationError: Before any write, for bad input.
            StoreError: When a write fails; earlier writes stay committed
                unless rollback_on_failure is set.
        """
        if idempotency_key is not None:
            with self._lock:
                previous = self._completed.get(idempotency_key)
            if previous is not None:
                self._logger.info(
                    "Tour already provisioned for key",
                    extra={"idempotency_key": idempotency_key, "tour_id": previous.id},
                )
                return previous

        try:
            plan = self.plan(title, description, color, departments, date_entries)
            tour = self._builder.build(plan)
        except ProvisioningError as e:
            self._logger.warning(
                "Tour creation failed",
                extra={"title": title, "error": str(e)},
            )
            self.notifier.notify(
                NotificationKind.ERROR, str(e) or FALLBACK_ERROR_MESSAGE
            )
            raise
        except Exception as e:
            self._logger.exception(
                "Unexpected error during tour creation",
                extra={"title": title, "error": str(e)},
            )
            self.notifier.notify(NotificationKind.ERROR, FALLBACK_ERROR_MESSAGE)
            raise

        for key in INVALIDATED_VIEWS:
            self.cache.invalidate(key)
        self.notifier.notify(NotificationKind.SUCCESS, SUCCESS_MESSAGE)

        if idempotency_key is not None:
            with self._lock:
                self._completed[idempotency_key] = tour
        return tour

    def submit(self, form: TourForm, idempotency_key: Optional[str] = None) -> Tour:
        """Provision a tour from form state.

        The form is reset on success and left as-is on failure so the
        user can correct it or retry.
        """
        tour = self.provision_tour(
            title=form.title,
            description=form.description,
            color=form.color,
            departments=form.departments,
            date_entries=form.dates,
            idempotency_key=idempotency_key,
        )
        form.reset()
        return tour

    def submit_safe(
        self, form: TourForm, idempotency_key: Optional[str] = None
    ) -> tuple[Optional[Tour], Optional[str]]:
        """Submit a form, returning an error message instead of raising.

        Returns:
            Tuple of (Tour or None, error message or None).
        """
        try:
            return self.submit(form, idempotency_key), None
        except ProvisioningError as e:
            return None, str(e)
