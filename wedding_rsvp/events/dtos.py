from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from wedding_rsvp.events.repository.orm_models import WeddingEvent


class EventNotFoundError(Exception):
    """Raised when an RSVP targets an event that does not exist."""

    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' does not exist")


@dataclass(frozen=True)
class EventDTO:
    """DTO for a wedding event. Read-only reference data."""

    id: UUID
    title: str
    date: datetime
    is_main_event: bool = False
    capacity: int | None = None
    deadline: datetime | None = None
    max_party_size: int | None = None

    def accepts_responses(self, at: datetime) -> bool:
        if self.deadline is None:
            return True
        deadline = self.deadline
        # SQLite hands back naive datetimes; treat them as UTC.
        if deadline.tzinfo is None and at.tzinfo is not None:
            at = at.replace(tzinfo=None)
        elif deadline.tzinfo is not None and at.tzinfo is None:
            deadline = deadline.replace(tzinfo=None)
        return at <= deadline

    @classmethod
    def from_orm(cls, event: "WeddingEvent") -> "EventDTO":
        return cls(
            id=event.uuid,
            title=event.title,
            date=event.event_date,
            is_main_event=bool(event.is_main_event),
            capacity=event.max_guests,
            deadline=event.rsvp_deadline,
            max_party_size=event.max_party_size,
        )
