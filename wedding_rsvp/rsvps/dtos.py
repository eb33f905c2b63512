from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from wedding_rsvp.rsvps.repository.orm_models import RSVP

MAYBE_FOLLOW_UP_MESSAGE = "Guest responded maybe - follow up needed"


class RSVPPersistenceError(Exception):
    """Raised when the RSVP store fails to apply an upsert."""

    def __init__(self, guest_id: UUID, event_id: UUID, reason: str) -> None:
        self.guest_id = guest_id
        self.event_id = event_id
        self.reason = reason
        super().__init__(f"Could not save RSVP for guest '{guest_id}' to event '{event_id}': {reason}")


class StaleVersionError(Exception):
    """Raised when an optimistic version check no longer matches the stored record."""

    def __init__(self, expected_version: int, current_version: int | None) -> None:
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"Expected RSVP version {expected_version}, stored version is {current_version}"
        )


class RSVPStatus(str, Enum):
    ATTENDING = "attending"
    DECLINED = "declined"
    MAYBE = "maybe"
    PENDING = "pending"


_STATUS_ALIASES = {
    "yes": RSVPStatus.ATTENDING,
    "attending": RSVPStatus.ATTENDING,
    "no": RSVPStatus.DECLINED,
    "not_attending": RSVPStatus.DECLINED,
    "declined": RSVPStatus.DECLINED,
    "maybe": RSVPStatus.MAYBE,
    "tentative": RSVPStatus.MAYBE,
}


def normalize_status(value: str | None) -> RSVPStatus:
    """Map the answers older forms sent (yes/no/tentative...) onto RSVPStatus."""
    if not value:
        return RSVPStatus.PENDING
    return _STATUS_ALIASES.get(value.strip().lower(), RSVPStatus.PENDING)


@dataclass(frozen=True)
class PlusOneDTO:
    """Plus one details stored on an RSVP."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class RSVPUpsertDTO:
    """Field values for one upsert, already derived and normalised by the reconciler."""

    status: RSVPStatus
    guest_count: int
    dietary_notes: str | None = None
    plus_one: PlusOneDTO | None = None
    message: str | None = None
    meal_preference: str | None = None
    accommodation_needed: bool = False
    transportation_needed: bool = False


@dataclass(frozen=True)
class RSVPRecordDTO:
    """The durable answer of one guest for one event."""

    guest_id: UUID
    event_id: UUID
    status: RSVPStatus
    guest_count: int
    updated_at: datetime
    version: int
    dietary_notes: str | None = None
    plus_one: PlusOneDTO | None = None
    message: str | None = None
    meal_preference: str | None = None
    accommodation_needed: bool = False
    transportation_needed: bool = False

    @property
    def has_plus_one(self) -> bool:
        return self.plus_one is not None and bool(self.plus_one.name)

    @classmethod
    def from_orm(cls, rsvp: "RSVP") -> "RSVPRecordDTO":
        plus_one = None
        if rsvp.plus_one_name or rsvp.plus_one_email:
            plus_one = PlusOneDTO(name=rsvp.plus_one_name, email=rsvp.plus_one_email)

        return cls(
            guest_id=rsvp.guest_id,
            event_id=rsvp.event_id,
            status=RSVPStatus(rsvp.status),
            guest_count=rsvp.guest_count,
            updated_at=rsvp.updated_at,
            version=rsvp.version,
            dietary_notes=rsvp.dietary_restrictions,
            plus_one=plus_one,
            message=rsvp.message,
            meal_preference=rsvp.meal_preference,
            accommodation_needed=bool(rsvp.accommodation_needed),
            transportation_needed=bool(rsvp.transportation_needed),
        )


@dataclass(frozen=True)
class AggregateSnapshotDTO:
    """Summary of every RSVP for one event, as of the records it was built from."""

    event_id: UUID
    total_invited: int
    total_responses: int
    attending_count: int
    declined_count: int
    maybe_count: int
    pending_count: int
    total_guests: int
    dietary_count: int
    plus_one_count: int
    accommodation_count: int
    transportation_count: int
    # None when the event has no capacity, distinct from 0.0
    capacity_used_pct: float | None = None
    response_rate: float | None = None
