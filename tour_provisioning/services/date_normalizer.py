"""Date normalization and validation for tour date rows.

Turns the raw rows of the tour form into an ordered sequence of
validated dates: blank rows are dropped, rows are checked for a date,
date strings are parsed and the result is sorted chronologically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Sequence, Union

import dateparser

from ..config import ProvisioningConfig, get_config
from ..domain.errors import ValidationError
from ..domain.models import DateEntry, ValidatedDate

RowInput = Union[DateEntry, Mapping[str, Optional[str]], Sequence[Optional[str]]]


def as_entry(row: RowInput) -> DateEntry:
    """Accept a DateEntry, a {"date", "location"} mapping or a pair."""
    if isinstance(row, DateEntry):
        return row
    if isinstance(row, Mapping):
        return DateEntry(date=row.get("date"), location=row.get("location"))
    date_value, location = (list(row) + [None, None])[:2]
    return DateEntry(date=date_value, location=location)


@dataclass
class DateNormalizer:
    """Filters, validates and orders the date rows of a tour.

    Attributes:
        config: Provisioning conventions (date order, row policy)
    """

    config: ProvisioningConfig = field(
        default_factory=lambda: get_config().provisioning
    )

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def parse_date(self, value: Union[str, date], row: int) -> date:
        """Parse one date cell.

        Raises:
            ValidationError: If the value is not a recognizable date.
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass

        parsed = dateparser.parse(
            text,
            settings={
                "DATE_ORDER": self.config.date_order,
                "STRICT_PARSING": True,
            },
        )
        if parsed is None:
            raise ValidationError(
                f"Invalid date {value!r} on row {row + 1}",
                field_name="dates",
                row=row,
            )
        return parsed.date()

    def check_complete(self, rows: Iterable[RowInput]) -> None:
        """Reject rows that name a location but carry no date.

        Raises:
            ValidationError: On the first such row.
        """
        for index, row in enumerate(rows):
            entry = as_entry(row)
            if entry.has_location and not entry.has_date:
                raise ValidationError(
                    "Please select a date for all tour dates "
                    f"(missing date on an entry, row {index + 1})",
                    field_name="dates",
                    row=index,
                )

    def normalize(self, rows: Sequence[RowInput]) -> tuple[ValidatedDate, ...]:
        """Validate and order the date rows.

        Args:
            rows: Form rows, in the order the user entered them.

        Returns:
            Validated dates sorted ascending; rows sharing a date keep
            their input order.

        Raises:
            ValidationError: If a dated row is invalid, a row is missing
                its date, or no dated row remains.
        """
        entries = [as_entry(row) for row in rows]
        if self.config.require_date_per_row:
            self.check_complete(entries)

        validated = [
            ValidatedDate(
                date=self.parse_date(entry.date, index),  # type: ignore[arg-type]
                location=(entry.location or "").strip(),
                position=index,
            )
            for index, entry in enumerate(entries)
            if entry.has_date
        ]

        if not validated:
            raise ValidationError(
                "At least one valid date is required (no valid dates)",
                field_name="dates",
            )

        validated.sort(key=lambda item: item.date)
        self._logger.debug(
            "Dates normalized",
            extra={
                "rows": len(entries),
                "valid": len(validated),
                "first": validated[0].date.isoformat(),
                "last": validated[-1].date.isoformat(),
            },
        )
        return tuple(validated)
