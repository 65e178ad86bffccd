from datetime import date
from unittest.mock import MagicMock

import pytest

from tour_provisioning.adapters.cache import NullQueryCache
from tour_provisioning.adapters.notify import LoggingNotifier
from tour_provisioning.config import ProvisioningConfig
from tour_provisioning.domain.errors import StoreError, ValidationError
from tour_provisioning.domain.forms import TourForm
from tour_provisioning.domain.models import Department
from tour_provisioning.ports.notifier import NotificationKind
from tour_provisioning.services import TourProvisioningService

from .conftest import FailingStore, created

SUMMER_RUN_DATES = [
    {"date": "2024-07-10", "location": "Venue A"},
    {"date": "2024-07-08", "location": "Venue B"},
]


def provision(service, **overrides):
    arguments = dict(
        title="Summer Run",
        description="",
        color=None,
        departments=[Department.SOUND, Department.LIGHTS],
        date_entries=SUMMER_RUN_DATES,
    )
    arguments.update(overrides)
    return service.provision_tour(**arguments)


def failing_service(entity, call, **config):
    store = FailingStore(fail_entity=entity, fail_on_call=call)
    service = TourProvisioningService(
        store=store,
        cache=NullQueryCache(),
        notifier=LoggingNotifier(),
        config=ProvisioningConfig(**config),
    )
    return store, service


class TestSummerRun:
    def test_record_counts(self, service, store):
        provision(service)

        assert store.count("tours") == 1
        assert store.count("jobs") == 3
        assert store.count("tour_dates") == 2
        assert store.count("locations") == 2
        assert store.count("job_departments") == 6

    def test_tour(self, service):
        tour = provision(service)

        assert tour.name == "Summer Run"
        assert tour.color == "#7E69AB"
        assert tour.start_date == date(2024, 7, 8)
        assert tour.end_date == date(2024, 7, 10)

    def test_umbrella_job(self, service, store):
        provision(service)

        umbrella = created(store, "jobs")[0]
        assert umbrella["title"] == "Summer Run"
        assert umbrella["start_time"] == "2024-07-08T00:00:00"
        assert umbrella["end_time"] == "2024-07-10T23:59:59"

    def test_dates_are_written_oldest_first(self, service, store):
        provision(service)

        locations = {r["id"]: r["name"] for r in store.select("locations")}
        tour_dates = created(store, "tour_dates")
        assert [td["date"] for td in tour_dates] == ["2024-07-08", "2024-07-10"]
        assert [locations[td["location_id"]] for td in tour_dates] == [
            "Venue B",
            "Venue A",
        ]
        assert [l["name"] for l in created(store, "locations")] == [
            "Venue B",
            "Venue A",
        ]

    def test_every_job_gets_every_department(self, service, store):
        provision(service)

        for job in store.select("jobs"):
            departments = {
                l["department"]
                for l in store.select("job_departments", {"job_id": job["id"]})
            }
            assert departments == {"sound", "lights"}


@pytest.mark.parametrize("n", [1, 2, 5])
def test_counts_for_n_dates(service, store, n):
    rows = [(f"2024-08-{day:02d}", "") for day in range(1, n + 1)]

    provision(service, date_entries=rows, departments=["video"])

    assert store.count("tours") == 1
    assert store.count("jobs") == n + 1
    assert store.count("tour_dates") == n
    assert store.count("job_departments") == n + 1


def test_existing_location_is_reused(service, store):
    store.create("locations", {"name": "Venue A"})

    provision(service)

    assert store.count("locations") == 2


def test_repeated_location_created_once(service, store):
    provision(
        service,
        date_entries=[("2024-07-08", "Venue A"), ("2024-07-09", "Venue A")],
    )

    assert store.count("locations") == 1
    location_ids = {td["location_id"] for td in store.select("tour_dates")}
    assert len(location_ids) == 1


def test_duplicate_departments_are_linked_once(service, store):
    provision(service, departments=["sound", "Sound", Department.SOUND])

    assert store.count("job_departments") == 3


class TestValidation:
    @pytest.mark.parametrize("title", ["", "   "])
    def test_empty_title(self, service, store, notifier, title):
        with pytest.raises(ValidationError) as exc_info:
            provision(service, title=title)

        assert exc_info.value.field_name == "title"
        assert store.writes == []
        assert notifier.last.kind is NotificationKind.ERROR
        assert notifier.last.message == "Please enter a title for the tour"

    def test_location_without_date(self, service, store, notifier):
        with pytest.raises(ValidationError):
            provision(
                service,
                date_entries=[("2024-07-08", "Venue A"), ("", "Venue B")],
            )

        assert store.writes == []
        assert notifier.last.message.startswith(
            "Please select a date for all tour dates"
        )

    def test_no_dates(self, service, store):
        with pytest.raises(ValidationError, match="no valid dates"):
            provision(service, date_entries=[("", "")])

        assert store.writes == []

    def test_unknown_department(self, service, store):
        with pytest.raises(ValidationError, match="Unknown department"):
            provision(service, departments=["catering"])

        assert store.writes == []

    def test_validation_does_not_invalidate_views(self, service, null_cache):
        with pytest.raises(ValidationError):
            provision(service, title="")

        assert null_cache.invalidated == []


class TestPartialFailure:
    def test_failure_at_tour_date_k(self):
        store, service = failing_service("tour_dates", 3)
        rows = [(f"2024-07-0{day}", "") for day in range(1, 6)]

        with pytest.raises(StoreError):
            provision(service, date_entries=rows, departments=["sound"])

        assert store.count("tours") == 1
        assert store.count("tour_dates") == 2
        # umbrella plus one job per fully written date
        assert store.count("jobs") == 3
        assert store.count("job_departments") == 3

    def test_failure_on_per_date_job_leaves_its_tour_date(self):
        store, service = failing_service("jobs", 3)
        rows = [("2024-07-01", ""), ("2024-07-02", ""), ("2024-07-03", "")]

        with pytest.raises(StoreError):
            provision(service, date_entries=rows)

        assert store.count("jobs") == 2
        assert store.count("tour_dates") == 2

    def test_failure_creating_location_at_date_k(self):
        store, service = failing_service("locations", 2)
        rows = [("2024-07-01", "A"), ("2024-07-02", "B"), ("2024-07-03", "C")]

        with pytest.raises(StoreError):
            provision(service, date_entries=rows, departments=["sound"])

        assert [l["name"] for l in store.select("locations")] == ["A"]
        assert [td["date"] for td in store.select("tour_dates")] == ["2024-07-01"]
        assert store.count("jobs") == 2
        assert store.count("job_departments") == 2

    def test_failure_on_tour(self):
        store, service = failing_service("tours", 1)

        with pytest.raises(StoreError):
            provision(service)

        assert store.writes == []

    def test_failure_is_reported_and_views_kept(self):
        store, service = failing_service("tour_dates", 1)

        with pytest.raises(StoreError):
            provision(service)

        assert service.notifier.last.kind is NotificationKind.ERROR
        assert "connection reset by peer" in service.notifier.last.message
        assert service.cache.invalidated == []

    def test_rollback_removes_partial_hierarchy(self):
        store, service = failing_service("tour_dates", 2, rollback_on_failure=True)
        store.create("locations", {"name": "Venue A"})

        with pytest.raises(StoreError):
            provision(service)

        for entity in ("tours", "jobs", "tour_dates", "job_departments"):
            assert store.count(entity) == 0
        assert [l["name"] for l in store.select("locations")] == ["Venue A"]


def test_success_invalidates_views_and_notifies(service, null_cache, notifier):
    provision(service)

    assert null_cache.invalidated == ["jobs", "tours"]
    assert notifier.last.kind is NotificationKind.SUCCESS
    assert notifier.last.message == "Tour created successfully"
    assert len(notifier.history) == 1


class TestIdempotency:
    def test_same_key_returns_first_tour(self, service, store):
        first = provision(service, idempotency_key="form-1")
        writes = len(store.writes)

        second = provision(service, idempotency_key="form-1")

        assert second == first
        assert len(store.writes) == writes
        assert store.count("tours") == 1

    def test_different_keys_create_two_tours(self, service, store):
        provision(service, idempotency_key="form-1")
        provision(service, idempotency_key="form-2")

        assert store.count("tours") == 2

    def test_failed_run_does_not_claim_key(self):
        store, service = failing_service("tours", 1)

        with pytest.raises(StoreError):
            provision(service, idempotency_key="form-1")
        tour = provision(service, idempotency_key="form-1")

        assert store.find("tours", {"id": tour.id}) is not None


class TestSubmit:
    def fill(self, form):
        form.title = "Summer Run"
        form.change_date(0, "date", "2024-07-10")
        form.change_date(0, "location", "Venue A")
        form.add_date()
        form.change_date(1, "date", "2024-07-08")
        form.toggle_department(Department.LIGHTS, True)

    def test_success_resets_form(self, service, store):
        form = TourForm(current_department=Department.VIDEO)
        self.fill(form)

        tour = service.submit(form)

        assert tour.start_date == date(2024, 7, 8)
        assert store.count("job_departments") == 3 * 2
        assert form.title == ""
        assert len(form.dates) == 1
        assert form.departments == [Department.VIDEO]
        assert form.color == "#7E69AB"

    def test_failure_keeps_form(self, service):
        form = TourForm()
        self.fill(form)
        form.title = ""

        tour, error = service.submit_safe(form)

        assert tour is None
        assert error == "Please enter a title for the tour"
        assert len(form.dates) == 2
        assert form.departments == [Department.SOUND, Department.LIGHTS]

    def test_submit_safe_success(self, service):
        form = TourForm()
        self.fill(form)

        tour, error = service.submit_safe(form)

        assert error is None
        assert tour.name == "Summer Run"


def test_plan_writes_nothing(service, store):
    plan = service.plan(
        "  Summer Run ", "desc", "", ["sound"], SUMMER_RUN_DATES
    )

    assert plan.title == "Summer Run"
    assert plan.color == "#7E69AB"
    assert plan.departments == (Department.SOUND,)
    assert [d.date for d in plan.dates] == [date(2024, 7, 8), date(2024, 7, 10)]
    assert store.writes == []


def test_unexpected_error_is_reported(notifier, null_cache):
    store = MagicMock()
    store.create.return_value = {"name": "Summer Run"}
    service = TourProvisioningService(
        store=store, cache=null_cache, notifier=notifier, config=ProvisioningConfig()
    )

    with pytest.raises(KeyError):
        provision(service)

    assert notifier.last.kind is NotificationKind.ERROR
    assert notifier.last.message == "Failed to create tour"
    assert null_cache.invalidated == []
