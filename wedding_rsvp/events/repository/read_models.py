import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager
from wedding_rsvp.events.dtos import EventDTO
from wedding_rsvp.events.repository.orm_models import WeddingEvent


class EventCatalog(abc.ABC):
    """Read-only access to the wedding events guests can respond to."""

    @abc.abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_main_event(self) -> EventDTO | None:
        """The earliest event flagged as the main event."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_events(self) -> list[EventDTO]:
        """All events ordered by date."""
        raise NotImplementedError


class SqlEventCatalog(EventCatalog):
    """SQL implementation of the event catalog."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            event = await session.get(WeddingEvent, event_id)
            return EventDTO.from_orm(event) if event else None

    async def get_main_event(self) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = (
                select(WeddingEvent)
                .where(WeddingEvent.is_main_event.is_(True))
                .order_by(WeddingEvent.event_date.asc())
                .limit(1)
            )
            result = await session.execute(stmt)
            event = result.scalar_one_or_none()
            return EventDTO.from_orm(event) if event else None

    async def list_events(self) -> list[EventDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(WeddingEvent).order_by(WeddingEvent.event_date.asc())
            )
            return [EventDTO.from_orm(event) for event in result.scalars().all()]
