from datetime import date, datetime

import pytest

from tour_provisioning.domain.errors import ProvisioningError, StoreError, ValidationError
from tour_provisioning.domain.forms import TourForm
from tour_provisioning.domain.models import (
    DateEntry,
    Department,
    GeoPoint,
    JobDepartmentLink,
    Location,
    Tour,
    TourDate,
)


class TestDepartment:
    @pytest.mark.parametrize("value", ["sound", "SOUND", " Sound ", Department.SOUND])
    def test_parse(self, value):
        assert Department.parse(value) is Department.SOUND

    def test_parse_unknown(self):
        with pytest.raises(ValidationError) as exc_info:
            Department.parse("catering")

        assert exc_info.value.field_name == "departments"


def test_geo_point_ranges():
    with pytest.raises(ValueError, match="Latitude"):
        GeoPoint(91, 0)
    with pytest.raises(ValueError, match="Longitude"):
        GeoPoint(0, 181)


def test_date_entry_flags():
    assert DateEntry().is_blank
    assert DateEntry(date="", location="  ").is_blank
    assert DateEntry(date="2024-07-08").has_date
    assert not DateEntry(location="Venue").has_date


def test_records_parse():
    tour = Tour.from_record(
        {"id": 1, "name": "Summer Run", "start_date": "2024-07-08", "end_date": None}
    )
    tour_date = TourDate.from_record(
        {"id": "d1", "tour_id": "t1", "date": "2024-07-08T00:00:00+00:00"}
    )
    location = Location.from_record({"id": "l1", "name": "Venue A"})
    link = JobDepartmentLink.from_record({"job_id": "j1", "department": "lights"})

    assert tour.id == "1"
    assert tour.start_date == date(2024, 7, 8)
    assert tour.end_date is None
    assert tour_date.date == date(2024, 7, 8)
    assert location.latitude is None
    assert link.department is Department.LIGHTS


def test_errors_carry_cause():
    cause = ConnectionError("reset")
    error = StoreError("insert failed", cause=cause, entity="tours", operation="create")

    assert isinstance(error, ProvisioningError)
    assert str(error) == "insert failed: reset"
    assert error.entity == "tours"


class TestTourForm:
    def test_defaults(self):
        form = TourForm(current_department=Department.LIGHTS)

        assert form.dates == [DateEntry(date="", location="")]
        assert form.departments == [Department.LIGHTS]
        assert form.color == "#7E69AB"

    def test_remove_keeps_last_row(self):
        form = TourForm()
        form.add_date()

        form.remove_date(0)
        form.remove_date(0)

        assert len(form.dates) == 1

    def test_change_date(self):
        form = TourForm()

        form.change_date(0, "location", "Venue A")

        assert form.dates[0] == DateEntry(date="", location="Venue A")

    def test_toggle_department(self):
        form = TourForm()

        form.toggle_department(Department.VIDEO, True)
        form.toggle_department(Department.VIDEO, True)
        form.toggle_department(Department.SOUND, False)

        assert form.departments == [Department.VIDEO]

    def test_reset(self):
        form = TourForm(default_color="#000000")
        form.title = "Summer Run"
        form.color = "#ffffff"
        form.add_date()
        form.toggle_department(Department.VIDEO, True)

        form.reset()

        assert form.title == ""
        assert form.color == "#000000"
        assert len(form.dates) == 1
        assert form.departments == [Department.SOUND]


def test_job_timestamps_keep_datetime_values():
    from tour_provisioning.domain.models import Job

    start = datetime(2024, 7, 8)
    job = Job.from_record(
        {
            "id": "j1",
            "title": "Summer Run",
            "start_time": start,
            "end_time": "2024-07-08T23:59:59",
            "job_type": "tour",
        }
    )

    assert job.start_time is start
    assert job.end_time == datetime(2024, 7, 8, 23, 59, 59)
