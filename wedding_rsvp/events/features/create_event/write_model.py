"""Write model for creating wedding events.

Organizers create events from the CLI; guests only ever read them.
Returns DTOs instead of ORM models.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager
from wedding_rsvp.events.dtos import EventDTO
from wedding_rsvp.events.repository.orm_models import WeddingEvent


class EventCreateWriteModel(ABC):
    """Abstract base class for event creation write operations."""

    @abstractmethod
    async def create_event(
        self,
        title: str,
        event_date: datetime,
        is_main_event: bool = False,
        capacity: int | None = None,
        deadline: datetime | None = None,
        max_party_size: int | None = None,
        location: str | None = None,
    ) -> EventDTO:
        raise NotImplementedError


class SqlEventCreateWriteModel(EventCreateWriteModel):
    """SQL implementation of event creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_event(
        self,
        title: str,
        event_date: datetime,
        is_main_event: bool = False,
        capacity: int | None = None,
        deadline: datetime | None = None,
        max_party_size: int | None = None,
        location: str | None = None,
    ) -> EventDTO:
        if capacity is not None and capacity <= 0:
            raise ValueError("Capacity must be a positive number of guests")
        if max_party_size is not None and max_party_size <= 0:
            raise ValueError("Max party size must be at least 1")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = WeddingEvent(
                title=title,
                event_date=event_date,
                is_main_event=is_main_event,
                max_guests=capacity,
                rsvp_deadline=deadline,
                max_party_size=max_party_size,
                location=location,
            )
            session.add(event)
            await session.flush()

            return EventDTO.from_orm(event)
