from datetime import UTC, datetime
from uuid import uuid4

from wedding_rsvp.dependencies import (
    get_event_catalog,
    get_profile_read_model,
    get_profile_write_model,
    get_rsvp_read_model,
)
from wedding_rsvp.guests.dtos import ProfileDTO
from wedding_rsvp.guests.features.resolve_draft.router import GET_DRAFT_URL
from wedding_rsvp.rsvps.dtos import RSVPRecordDTO, RSVPStatus
from wedding_rsvp.rsvps.tests.inmemory_models import (
    InMemoryEventCatalog,
    InMemoryProfileReadModel,
    InMemoryProfileWriteModel,
    InMemoryRSVPReadModel,
    make_event,
)


def overrides(event, profiles=None, rsvps=None) -> dict:
    profiles = profiles if profiles is not None else {}
    rsvps = rsvps if rsvps is not None else {}
    return {
        get_event_catalog: lambda: InMemoryEventCatalog([event]),
        get_profile_read_model: lambda: InMemoryProfileReadModel(profiles),
        get_profile_write_model: lambda: InMemoryProfileWriteModel(profiles),
        get_rsvp_read_model: lambda: InMemoryRSVPReadModel(rsvps),
    }


async def test_draft_for_new_guest(client_factory):
    event = make_event()

    async with client_factory(overrides(event)) as client:
        response = await client.get(GET_DRAFT_URL.format(event_id=event.id, guest_id=uuid4()))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] is None
    assert data["first_name"] == ""
    assert data["expected_version"] is None
    assert [item["key"] for item in data["acknowledgements"]] == ["adults_only", "coaches", "timing"]


async def test_returning_guest_sees_stored_answer(client_factory):
    event = make_event()
    guest_id = uuid4()
    profiles = {guest_id: ProfileDTO(guest_id=guest_id, first_name="Alex", last_name="Smith")}
    rsvps = {
        (guest_id, event.id): RSVPRecordDTO(
            guest_id=guest_id,
            event_id=event.id,
            status=RSVPStatus.ATTENDING,
            guest_count=1,
            updated_at=datetime.now(UTC),
            version=4,
            dietary_notes="nut allergy",
        )
    }

    async with client_factory(overrides(event, profiles, rsvps)) as client:
        response = await client.get(GET_DRAFT_URL.format(event_id=event.id, guest_id=guest_id))

    data = response.json()
    assert data["first_name"] == "Alex"
    assert data["status"] == "attending"
    assert data["dietary_notes"] == "nut allergy"
    assert data["expected_version"] == 4
    assert data["warnings"] == ["allergy_severity_unspecified"]


async def test_unknown_event_is_404(client_factory):
    event = make_event()

    async with client_factory(overrides(event)) as client:
        response = await client.get(GET_DRAFT_URL.format(event_id=uuid4(), guest_id=uuid4()))

    assert response.status_code == 404
