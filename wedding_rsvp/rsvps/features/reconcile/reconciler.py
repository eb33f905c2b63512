"""Turns a finalized response into exactly one stored RSVP per guest and event."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from wedding_rsvp.config.settings import settings
from wedding_rsvp.events.dtos import EventNotFoundError
from wedding_rsvp.events.repository.read_models import EventCatalog
from wedding_rsvp.rsvps.drafts import FinalizedResponse
from wedding_rsvp.rsvps.dtos import (
    MAYBE_FOLLOW_UP_MESSAGE,
    PlusOneDTO,
    RSVPPersistenceError,
    RSVPStatus,
    RSVPUpsertDTO,
    StaleVersionError,
)
from wedding_rsvp.rsvps.repository.write_models import RSVPWriteModel
from wedding_rsvp.rsvps.results import ErrorKind, WriteResult, WriteTarget

logger = logging.getLogger(__name__)


class GuestCountError(ValueError):
    def __init__(self, guest_count: int, max_party_size: int) -> None:
        self.guest_count = guest_count
        self.max_party_size = max_party_size
        super().__init__(f"Guest count {guest_count} is outside 1..{max_party_size}")


def derive_guest_count(response: FinalizedResponse, max_party_size: int) -> int:
    if response.status != RSVPStatus.ATTENDING:
        return 0
    if response.guest_count is None:
        return 2 if response.has_plus_one else 1
    if not 1 <= response.guest_count <= max_party_size:
        raise GuestCountError(response.guest_count, max_party_size)
    return response.guest_count


def _clean(value: str) -> str | None:
    value = (value or "").strip()
    return value or None


def build_upsert(response: FinalizedResponse, max_party_size: int) -> RSVPUpsertDTO:
    """Normalise a response into the values stored for it. Raises GuestCountError."""
    guest_count = derive_guest_count(response, max_party_size)
    message = _clean(response.message)

    if response.status == RSVPStatus.DECLINED:
        return RSVPUpsertDTO(status=response.status, guest_count=0, message=message)

    if response.status == RSVPStatus.MAYBE:
        message = f"{MAYBE_FOLLOW_UP_MESSAGE}\n{message}" if message else MAYBE_FOLLOW_UP_MESSAGE

    plus_one = None
    if response.has_plus_one and _clean(response.plus_one_name):
        plus_one = PlusOneDTO(
            name=_clean(response.plus_one_name),
            email=_clean(response.plus_one_email),
        )

    return RSVPUpsertDTO(
        status=response.status,
        guest_count=guest_count,
        dietary_notes=_clean(response.dietary_notes),
        plus_one=plus_one,
        message=message,
        meal_preference=_clean(response.meal_preference),
        accommodation_needed=response.accommodation_needed,
        transportation_needed=response.transportation_needed,
    )


class RSVPReconciler:
    """The one write path for RSVPs. Expected failures come back as WriteResult, never raise."""

    def __init__(
        self,
        event_catalog: EventCatalog,
        rsvp_write_model: RSVPWriteModel,
        enforce_deadline: bool | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._events = event_catalog
        self._rsvps = rsvp_write_model
        self._enforce_deadline = (
            settings.enforce_rsvp_deadline if enforce_deadline is None else enforce_deadline
        )
        self._clock = clock or (lambda: datetime.now(UTC))

    async def reconcile(
        self, response: FinalizedResponse, expected_version: int | None = None
    ) -> WriteResult:
        event = await self._events.get_event(response.event_id)
        if event is None:
            return self._failure(
                response.guest_id, response.event_id, ErrorKind.REFERENCE, "Event not found"
            )

        if self._enforce_deadline and not event.accepts_responses(self._clock()):
            return self._failure(
                response.guest_id,
                response.event_id,
                ErrorKind.VALIDATION,
                "RSVP deadline has passed",
                fields=("deadline",),
            )

        if response.status == RSVPStatus.PENDING:
            return self._failure(
                response.guest_id,
                response.event_id,
                ErrorKind.VALIDATION,
                "Attendance was not answered",
                fields=("status",),
            )

        max_party_size = event.max_party_size or settings.max_guests_per_rsvp
        try:
            upsert = build_upsert(response, max_party_size)
        except GuestCountError as e:
            return self._failure(
                response.guest_id,
                response.event_id,
                ErrorKind.VALIDATION,
                str(e),
                fields=("guest_count",),
            )

        try:
            record = await self._rsvps.upsert_rsvp(
                guest_id=response.guest_id,
                event_id=response.event_id,
                upsert=upsert,
                expected_version=expected_version,
            )
        except StaleVersionError as e:
            return self._failure(response.guest_id, response.event_id, ErrorKind.CONFLICT, str(e))
        except EventNotFoundError as e:
            return self._failure(response.guest_id, response.event_id, ErrorKind.REFERENCE, str(e))
        except RSVPPersistenceError as e:
            return self._failure(
                response.guest_id, response.event_id, ErrorKind.PERSISTENCE, e.reason
            )

        logger.info(
            "Reconciled RSVP for guest %s at event %s: %s x%s (version %s)",
            record.guest_id,
            record.event_id,
            record.status.value,
            record.guest_count,
            record.version,
        )
        return WriteResult.success(WriteTarget.RSVP, record=record)

    @staticmethod
    def _failure(
        guest_id: UUID,
        event_id: UUID,
        error_kind: ErrorKind,
        detail: str,
        fields: tuple[str, ...] = (),
    ) -> WriteResult:
        logger.warning(
            "RSVP for guest %s at event %s rejected (%s): %s",
            guest_id,
            event_id,
            error_kind.value,
            detail,
        )
        return WriteResult.failure(WriteTarget.RSVP, error_kind, detail=detail, fields=fields)
