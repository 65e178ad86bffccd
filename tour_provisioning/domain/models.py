"""Immutable domain models for tour provisioning.

Records read back from the store are turned into frozen dataclasses
here; the store itself only ever sees plain dicts keyed by column name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import ValidationError

DEFAULT_TOUR_COLOR = "#7E69AB"


class Department(str, Enum):
    """Crew discipline a job can be staffed by."""

    SOUND = "sound"
    LIGHTS = "lights"
    VIDEO = "video"
    LOGISTICS = "logistics"
    PRODUCTION = "production"
    ADMINISTRATIVE = "administrative"

    @classmethod
    def parse(cls, value: Any) -> Department:
        """Coerce a department name (any case) or member to a Department.

        Raises:
            ValidationError: If the value names no known department.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown department: {value!r}",
                field_name="departments",
            ) from None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _optional_date(value: Any) -> Optional[date]:
    return None if value in (None, "") else _parse_date(value)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Coordinates and display address returned by a geocoder."""

    latitude: float
    longitude: float
    formatted_address: str = ""

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class Tour:
    """A multi-date touring production.

    Attributes:
        id: Store identifier
        name: Tour title as entered by the user
        description: Free-text description
        color: Display color shared by all of the tour's jobs
        start_date: First validated tour date
        end_date: Last validated tour date
    """

    id: str
    name: str
    description: str = ""
    color: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Tour:
        return cls(
            id=str(record["id"]),
            name=record["name"],
            description=record.get("description") or "",
            color=record.get("color"),
            start_date=_optional_date(record.get("start_date")),
            end_date=_optional_date(record.get("end_date")),
        )


@dataclass(frozen=True, slots=True)
class Job:
    """A schedulable job: either a tour umbrella or a single tour date.

    Attributes:
        id: Store identifier
        title: Display title
        start_time: Start of the job's span
        end_time: End of the job's span
        job_type: Discriminator ("tour" for the umbrella, "single" per date)
        description: Free-text description
        color: Display color
        location_id: Venue of the job, if any
        tour_date_id: Tour date this job was created for (per-date jobs only)
        tour_id: Tour this job belongs to
    """

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    job_type: str
    description: str = ""
    color: Optional[str] = None
    location_id: Optional[str] = None
    tour_date_id: Optional[str] = None
    tour_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Job:
        return cls(
            id=str(record["id"]),
            title=record["title"],
            start_time=_parse_timestamp(record["start_time"]),
            end_time=_parse_timestamp(record["end_time"]),
            job_type=record["job_type"],
            description=record.get("description") or "",
            color=record.get("color"),
            location_id=record.get("location_id"),
            tour_date_id=record.get("tour_date_id"),
            tour_id=record.get("tour_id"),
        )


@dataclass(frozen=True, slots=True)
class TourDate:
    """One calendar date of a tour, optionally at a location."""

    id: str
    tour_id: str
    date: date
    location_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> TourDate:
        return cls(
            id=str(record["id"]),
            tour_id=str(record["tour_id"]),
            date=_parse_date(record["date"]),
            location_id=record.get("location_id"),
        )


@dataclass(frozen=True, slots=True)
class Location:
    """A venue, deduplicated by display name."""

    id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Location:
        return cls(
            id=str(record["id"]),
            name=record["name"],
            latitude=record.get("latitude"),
            longitude=record.get("longitude"),
            formatted_address=record.get("formatted_address"),
        )


@dataclass(frozen=True, slots=True)
class JobDepartmentLink:
    """Association of a job with one department."""

    job_id: str
    department: Department

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> JobDepartmentLink:
        return cls(
            job_id=str(record["job_id"]),
            department=Department.parse(record["department"]),
        )


@dataclass(frozen=True, slots=True)
class DateEntry:
    """One row of the tour form as typed by the user.

    Both fields are raw strings; either may be missing.
    """

    date: Optional[str] = None
    location: Optional[str] = None

    @property
    def has_date(self) -> bool:
        return bool(self.date and str(self.date).strip())

    @property
    def has_location(self) -> bool:
        return bool(self.location and self.location.strip())

    @property
    def is_blank(self) -> bool:
        """Check if the row has neither a date nor a location."""
        return not self.has_date and not self.has_location


@dataclass(frozen=True, slots=True)
class ValidatedDate:
    """A date row that passed validation.

    Attributes:
        date: Parsed calendar date
        location: Trimmed location name, "" when none was given
        position: Index of the row in the submitted form
    """

    date: date
    location: str = ""
    position: int = 0


@dataclass(frozen=True, slots=True)
class TourPlan:
    """Everything the graph builder needs for one provisioning run."""

    title: str
    description: str
    color: str
    departments: tuple[Department, ...]
    dates: tuple[ValidatedDate, ...] = field(default_factory=tuple)

    @property
    def first_date(self) -> date:
        return self.dates[0].date

    @property
    def last_date(self) -> date:
        return self.dates[-1].date
