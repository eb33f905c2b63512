"""Tests for RSVPReconciler against in-memory stores."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from wedding_rsvp.rsvps.drafts import FinalizedResponse
from wedding_rsvp.rsvps.dtos import MAYBE_FOLLOW_UP_MESSAGE, RSVPStatus
from wedding_rsvp.rsvps.features.reconcile.reconciler import RSVPReconciler, derive_guest_count
from wedding_rsvp.rsvps.results import ErrorKind, WriteTarget
from wedding_rsvp.rsvps.tests.inmemory_models import (
    InMemoryEventCatalog,
    InMemoryRSVPWriteModel,
    make_event,
)


@pytest.fixture
def event():
    return make_event(capacity=100)


@pytest.fixture
def memory():
    return {}


@pytest.fixture
def write_model(memory):
    return InMemoryRSVPWriteModel(memory)


@pytest.fixture
def reconciler(event, write_model):
    return RSVPReconciler(InMemoryEventCatalog([event]), write_model)


def response_for(event, **values) -> FinalizedResponse:
    values.setdefault("guest_id", uuid4())
    values.setdefault("status", RSVPStatus.ATTENDING)
    return FinalizedResponse(event_id=event.id, first_name="Alex", last_name="Smith", **values)


async def test_first_submission_creates_record(reconciler, event, memory):
    response = response_for(event)

    result = await reconciler.reconcile(response)

    assert result.ok
    assert result.target == WriteTarget.RSVP
    assert result.record.version == 1
    assert result.record.guest_count == 1
    assert len(memory) == 1


async def test_identical_resubmission_is_a_no_op(reconciler, event, memory):
    response = response_for(event, dietary_notes="vegetarian")

    first = await reconciler.reconcile(response)
    second = await reconciler.reconcile(response)

    assert first.ok and second.ok
    assert second.record.version == first.record.version
    assert len(memory) == 1


async def test_changed_resubmission_bumps_version_once(reconciler, event, memory):
    guest_id = uuid4()
    await reconciler.reconcile(response_for(event, guest_id=guest_id))

    result = await reconciler.reconcile(
        response_for(event, guest_id=guest_id, status=RSVPStatus.DECLINED)
    )

    assert result.record.version == 2
    assert result.record.status == RSVPStatus.DECLINED
    assert len(memory) == 1


@pytest.mark.parametrize(
    "status, has_plus_one, expected",
    [
        (RSVPStatus.ATTENDING, False, 1),
        (RSVPStatus.ATTENDING, True, 2),
        (RSVPStatus.DECLINED, True, 0),
        (RSVPStatus.MAYBE, True, 0),
    ],
)
async def test_guest_count_follows_status(reconciler, event, status, has_plus_one, expected):
    response = response_for(
        event, status=status, has_plus_one=has_plus_one, plus_one_name="Sam" if has_plus_one else ""
    )

    result = await reconciler.reconcile(response)

    assert result.ok
    assert result.record.guest_count == expected
    assert (result.record.status == RSVPStatus.ATTENDING) == (result.record.guest_count > 0)


async def test_removing_plus_one_drops_guest_count(reconciler, event, memory):
    guest_id = uuid4()
    with_plus_one = response_for(event, guest_id=guest_id, has_plus_one=True, plus_one_name="Sam")
    await reconciler.reconcile(with_plus_one)

    result = await reconciler.reconcile(response_for(event, guest_id=guest_id, has_plus_one=False))

    assert result.record.guest_count == 1
    assert result.record.plus_one is None
    assert len(memory) == 1


async def test_explicit_guest_count_is_validated(reconciler, event, memory):
    too_many = response_for(event, guest_count=9)

    result = await reconciler.reconcile(too_many)

    assert not result.ok
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.fields == ("guest_count",)
    assert memory == {}


def test_explicit_guest_count_is_kept():
    event = make_event(max_party_size=6)
    response = response_for(event, guest_count=5)

    assert derive_guest_count(response, max_party_size=6) == 5


async def test_maybe_gets_follow_up_message(reconciler, event):
    response = response_for(event, status=RSVPStatus.MAYBE, message="Waiting on flights")

    result = await reconciler.reconcile(response)

    assert result.record.message.startswith(MAYBE_FOLLOW_UP_MESSAGE)
    assert result.record.message.endswith("Waiting on flights")


async def test_declined_clears_attendance_details(reconciler, event):
    response = response_for(
        event,
        status=RSVPStatus.DECLINED,
        dietary_notes="nut allergy",
        has_plus_one=True,
        plus_one_name="Sam",
        meal_preference="fish",
        accommodation_needed=True,
        transportation_needed=True,
        message="Sorry to miss it",
    )

    result = await reconciler.reconcile(response)

    record = result.record
    assert record.guest_count == 0
    assert record.dietary_notes is None
    assert record.plus_one is None
    assert record.meal_preference is None
    assert record.accommodation_needed is False
    assert record.transportation_needed is False
    assert record.message == "Sorry to miss it"


async def test_unknown_event_is_a_reference_error(write_model):
    reconciler = RSVPReconciler(InMemoryEventCatalog([]), write_model)

    result = await reconciler.reconcile(response_for(make_event()))

    assert not result.ok
    assert result.error_kind == ErrorKind.REFERENCE
    assert write_model.calls == 0


async def test_deadline_passed_is_rejected(write_model):
    event = make_event(deadline=datetime.now(UTC) - timedelta(days=1))
    reconciler = RSVPReconciler(InMemoryEventCatalog([event]), write_model, enforce_deadline=True)

    result = await reconciler.reconcile(response_for(event))

    assert result.error_kind == ErrorKind.VALIDATION
    assert result.fields == ("deadline",)
    assert write_model.calls == 0


async def test_deadline_not_enforced_when_disabled(write_model):
    event = make_event(deadline=datetime.now(UTC) - timedelta(days=1))
    reconciler = RSVPReconciler(InMemoryEventCatalog([event]), write_model, enforce_deadline=False)

    result = await reconciler.reconcile(response_for(event))

    assert result.ok


async def test_stale_version_is_a_conflict(reconciler, event):
    guest_id = uuid4()
    await reconciler.reconcile(response_for(event, guest_id=guest_id))
    await reconciler.reconcile(response_for(event, guest_id=guest_id, status=RSVPStatus.MAYBE))

    result = await reconciler.reconcile(
        response_for(event, guest_id=guest_id, status=RSVPStatus.DECLINED), expected_version=1
    )

    assert result.error_kind == ErrorKind.CONFLICT


async def test_matching_version_applies(reconciler, event):
    guest_id = uuid4()
    first = await reconciler.reconcile(response_for(event, guest_id=guest_id))

    result = await reconciler.reconcile(
        response_for(event, guest_id=guest_id, status=RSVPStatus.DECLINED),
        expected_version=first.record.version,
    )

    assert result.ok
    assert result.record.version == 2


async def test_storage_failure_is_reported(event, memory):
    write_model = InMemoryRSVPWriteModel(memory, fail=True)
    reconciler = RSVPReconciler(InMemoryEventCatalog([event]), write_model)

    result = await reconciler.reconcile(response_for(event))

    assert not result.ok
    assert result.error_kind == ErrorKind.PERSISTENCE
    assert memory == {}


async def test_pending_is_not_an_answer(reconciler, event):
    result = await reconciler.reconcile(response_for(event, status=RSVPStatus.PENDING))

    assert result.error_kind == ErrorKind.VALIDATION
    assert result.fields == ("status",)


@pytest.mark.parametrize("status", [RSVPStatus.MAYBE, RSVPStatus.DECLINED])
async def test_zero_guest_count_is_accepted_when_not_attending(reconciler, event, status):
    response = response_for(event, status=status, guest_count=0)

    result = await reconciler.reconcile(response)

    assert result.ok
    assert result.record.guest_count == 0
