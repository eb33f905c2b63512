import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager
from wedding_rsvp.rsvps.dtos import RSVPRecordDTO, RSVPStatus
from wedding_rsvp.rsvps.repository.orm_models import RSVP


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_rsvp(self, guest_id: UUID, event_id: UUID) -> RSVPRecordDTO | None:
        """Get the stored answer of a guest for an event, None if they never answered."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_rsvps(self, event_id: UUID, status: RSVPStatus | None = None) -> list[RSVPRecordDTO]:
        """Every RSVP for an event, or only those with the given status, read in one statement."""
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_rsvp(self, guest_id: UUID, event_id: UUID) -> RSVPRecordDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = select(RSVP).where(RSVP.guest_id == guest_id, RSVP.event_id == event_id)
            result = await session.execute(stmt.execution_options(populate_existing=True))
            rsvp = result.scalar_one_or_none()
            return RSVPRecordDTO.from_orm(rsvp) if rsvp else None

    async def list_rsvps(self, event_id: UUID, status: RSVPStatus | None = None) -> list[RSVPRecordDTO]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            stmt = select(RSVP).where(RSVP.event_id == event_id)
            if status is not None:
                stmt = stmt.where(RSVP.status == status)
            stmt = stmt.order_by(RSVP.updated_at.asc()).execution_options(populate_existing=True)
            result = await session.execute(stmt)
            return [RSVPRecordDTO.from_orm(rsvp) for rsvp in result.scalars().all()]
