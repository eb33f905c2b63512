from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_rsvp.dependencies import get_event_catalog
from wedding_rsvp.events.dtos import EventDTO
from wedding_rsvp.events.repository.read_models import EventCatalog

router = APIRouter()

LIST_EVENTS_URL = "/events"
MAIN_EVENT_URL = "/events/main"


class EventResponse(BaseModel):
    id: UUID
    title: str
    date: datetime
    is_main_event: bool
    capacity: int | None = None
    deadline: datetime | None = None
    max_party_size: int | None = None

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            date=event.date,
            is_main_event=event.is_main_event,
            capacity=event.capacity,
            deadline=event.deadline,
            max_party_size=event.max_party_size,
        )


@router.get(LIST_EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    catalog: EventCatalog = Depends(get_event_catalog),
) -> list[EventResponse]:
    """All events guests can respond to, ordered by date."""
    return [EventResponse.from_dto(event) for event in await catalog.list_events()]


@router.get(MAIN_EVENT_URL, response_model=EventResponse)
async def get_main_event(
    catalog: EventCatalog = Depends(get_event_catalog),
) -> EventResponse:
    event = await catalog.get_main_event()
    if event is None:
        raise HTTPException(status_code=404, detail="No main event configured")
    return EventResponse.from_dto(event)
