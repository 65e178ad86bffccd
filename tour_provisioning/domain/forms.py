"""Mutable state of the "create tour" form.

The form is the only mutable object in the domain layer: rows and
departments are edited in place until the form is submitted, and a
successful submission resets it back to its defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Literal

from .models import DEFAULT_TOUR_COLOR, DateEntry, Department


def _blank_rows() -> List[DateEntry]:
    return [DateEntry(date="", location="")]


@dataclass
class TourForm:
    """Form state for creating a tour.

    Attributes:
        current_department: Department of the user opening the form;
            preselected, and restored on reset
        default_color: Color the form starts with and resets to
    """

    current_department: Department = Department.SOUND
    default_color: str = DEFAULT_TOUR_COLOR

    title: str = ""
    description: str = ""
    dates: List[DateEntry] = field(default_factory=_blank_rows)
    color: str = ""
    departments: List[Department] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.color:
            self.color = self.default_color
        if not self.departments:
            self.departments = [self.current_department]

    def add_date(self) -> None:
        self.dates.append(DateEntry(date="", location=""))

    def remove_date(self, index: int) -> None:
        """Remove a date row; the last remaining row is kept."""
        if len(self.dates) > 1:
            del self.dates[index]

    def change_date(
        self, index: int, field_name: Literal["date", "location"], value: str
    ) -> None:
        self.dates[index] = replace(self.dates[index], **{field_name: value})

    def toggle_department(self, department: Department, checked: bool) -> None:
        if checked and department not in self.departments:
            self.departments.append(department)
        elif not checked and department in self.departments:
            self.departments.remove(department)

    def reset(self) -> None:
        """Restore every field to its initial state."""
        self.title = ""
        self.description = ""
        self.dates = _blank_rows()
        self.color = self.default_color
        self.departments = [self.current_department]
