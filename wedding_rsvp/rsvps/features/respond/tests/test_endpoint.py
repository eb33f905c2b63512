"""Tests for the submit RSVP endpoint."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from wedding_rsvp.dependencies import (
    get_event_catalog,
    get_notifier,
    get_profile_read_model,
    get_profile_write_model,
    get_rsvp_read_model,
    get_rsvp_write_model,
)
from wedding_rsvp.guests.dtos import ProfileDTO
from wedding_rsvp.notifications import log_notifier
from wedding_rsvp.rsvps.dtos import MAYBE_FOLLOW_UP_MESSAGE
from wedding_rsvp.rsvps.features.respond.router import SUBMIT_RSVP_URL
from wedding_rsvp.rsvps.tests.inmemory_models import (
    InMemoryEventCatalog,
    InMemoryProfileReadModel,
    InMemoryProfileWriteModel,
    InMemoryRSVPReadModel,
    InMemoryRSVPWriteModel,
    make_event,
)

ALL_ACKNOWLEDGED = ["adults_only", "coaches", "timing"]


class Backend:
    def __init__(self, events=None, rsvp_fail: bool = False, profile_fail: bool = False):
        self.event = make_event(capacity=100)
        self.catalog = InMemoryEventCatalog(events if events is not None else [self.event])
        self.rsvps = {}
        self.profiles = {}
        self.rsvp_writer = InMemoryRSVPWriteModel(self.rsvps, fail=rsvp_fail)
        self.profile_writer = InMemoryProfileWriteModel(self.profiles, fail=profile_fail)

    @property
    def overrides(self) -> dict:
        return {
            get_event_catalog: lambda: self.catalog,
            get_rsvp_write_model: lambda: self.rsvp_writer,
            get_rsvp_read_model: lambda: InMemoryRSVPReadModel(self.rsvps),
            get_profile_read_model: lambda: InMemoryProfileReadModel(self.profiles),
            get_profile_write_model: lambda: self.profile_writer,
            get_notifier: lambda: log_notifier,
        }

    def url(self, guest_id, event_id=None) -> str:
        return SUBMIT_RSVP_URL.format(event_id=event_id or self.event.id, guest_id=guest_id)


@pytest.fixture
def backend():
    return Backend()


def attending_body(**values) -> dict:
    body = {
        "attendance": "attending",
        "first_name": "Alex",
        "last_name": "Smith",
        "email": "alex@example.com",
        "acknowledged": ALL_ACKNOWLEDGED,
    }
    body.update(values)
    return body


async def test_submit_attending(client_factory, backend):
    guest_id = uuid4()

    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(guest_id), json=attending_body())

    assert response.status_code == 200
    data = response.json()
    assert data["rsvp"]["status"] == "attending"
    assert data["rsvp"]["guest_count"] == 1
    assert data["rsvp"]["version"] == 1
    assert data["profile"]["ok"] is True
    assert data["needs_profile_retry"] is False
    assert backend.profiles[guest_id].first_name == "Alex"


async def test_quick_decline_needs_no_details(client_factory, backend):
    guest_id = uuid4()

    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(guest_id), json={"attendance": "no"})

    assert response.status_code == 200
    assert response.json()["rsvp"]["status"] == "declined"
    assert response.json()["rsvp"]["guest_count"] == 0


async def test_quick_answer_uses_saved_profile(client_factory, backend):
    guest_id = uuid4()
    backend.profiles[guest_id] = ProfileDTO(
        guest_id=guest_id, first_name="Alex", last_name="Smith", mobile="0400 000 000"
    )

    async with client_factory(backend.overrides) as client:
        response = await client.post(
            backend.url(guest_id),
            json={"attendance": "yes", "acknowledged": ALL_ACKNOWLEDGED},
        )

    assert response.status_code == 200
    assert response.json()["rsvp"]["status"] == "attending"


async def test_maybe_is_flagged_for_follow_up(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(
            backend.url(uuid4()), json=attending_body(attendance="maybe", message="Flights?")
        )

    assert response.status_code == 200
    message = response.json()["rsvp"]["message"]
    assert message.startswith(MAYBE_FOLLOW_UP_MESSAGE)
    assert message.endswith("Flights?")


async def test_missing_acknowledgements_is_422(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body(acknowledged=[]))

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error_kind"] == "validation"
    assert set(detail["fields"]) == set(ALL_ACKNOWLEDGED)
    assert backend.rsvps == {}


async def test_missing_details_is_422(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(
            backend.url(uuid4()),
            json={"attendance": "attending", "acknowledged": ALL_ACKNOWLEDGED},
        )

    assert response.status_code == 422
    assert response.json()["detail"]["fields"] == ["first_name", "last_name", "contact"]


async def test_unknown_attendance_is_422(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body(attendance="perhaps"))

    assert response.status_code == 422
    assert response.json()["detail"]["fields"] == ["status"]


async def test_unknown_event_is_404(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4(), event_id=uuid4()), json=attending_body())

    assert response.status_code == 404


async def test_after_deadline_is_422(client_factory):
    event = make_event(deadline=datetime.now(UTC) - timedelta(hours=1))
    backend = Backend(events=[event])
    backend.event = event

    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body())

    assert response.status_code == 422
    assert response.json()["detail"]["fields"] == ["deadline"]


async def test_stale_version_is_409(client_factory, backend):
    guest_id = uuid4()

    async with client_factory(backend.overrides) as client:
        await client.post(backend.url(guest_id), json=attending_body())
        await client.post(backend.url(guest_id), json=attending_body(dietary_notes="vegan"))
        response = await client.post(
            backend.url(guest_id), json=attending_body(attendance="no", expected_version=1)
        )

    assert response.status_code == 409
    assert response.json()["detail"]["error_kind"] == "conflict"


async def test_storage_failure_is_503(client_factory):
    backend = Backend(rsvp_fail=True)

    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body())

    assert response.status_code == 503
    assert response.json()["detail"]["error_kind"] == "persistence"
    assert backend.profile_writer.calls == 0


async def test_profile_failure_still_returns_200(client_factory):
    backend = Backend(profile_fail=True)

    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body())

    assert response.status_code == 200
    data = response.json()
    assert data["profile"]["ok"] is False
    assert data["profile"]["error_kind"] == "persistence"
    assert data["needs_profile_retry"] is True


async def test_plus_one_resubmission_keeps_one_record(client_factory, backend):
    guest_id = uuid4()

    async with client_factory(backend.overrides) as client:
        first = await client.post(
            backend.url(guest_id), json=attending_body(has_plus_one=True, plus_one_name="Sam")
        )
        second = await client.post(backend.url(guest_id), json=attending_body(has_plus_one=False))

    assert first.json()["rsvp"]["guest_count"] == 2
    assert second.json()["rsvp"]["guest_count"] == 1
    assert second.json()["rsvp"]["plus_one"] is None
    assert second.json()["rsvp"]["version"] == 2
    assert len(backend.rsvps) == 1


async def test_identical_resubmission_keeps_version(client_factory, backend):
    guest_id = uuid4()

    async with client_factory(backend.overrides) as client:
        await client.post(backend.url(guest_id), json=attending_body())
        response = await client.post(backend.url(guest_id), json=attending_body())

    assert response.json()["rsvp"]["version"] == 1


async def test_invalid_email_is_rejected(client_factory, backend):
    async with client_factory(backend.overrides) as client:
        response = await client.post(backend.url(uuid4()), json=attending_body(email="not-an-email"))

    assert response.status_code == 422
    assert backend.rsvps == {}
