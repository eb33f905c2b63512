import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager
from wedding_rsvp.guests.dtos import ProfileDTO
from wedding_rsvp.guests.repository.orm_models import Profile


class ProfileReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_profile(self, guest_id: UUID) -> ProfileDTO | None:
        """Get the stored profile for a guest, None if they never saved one."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_guest_ids(self) -> set[UUID]:
        """Every guest with a profile, i.e. everyone invited."""
        raise NotImplementedError


class SqlProfileReadModel(ProfileReadModel):
    """SQL implementation of profile read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def get_profile(self, guest_id: UUID) -> ProfileDTO | None:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(Profile).where(Profile.guest_id == guest_id))
            profile = result.scalar_one_or_none()
            return ProfileDTO.from_orm(profile) if profile else None

    async def list_guest_ids(self) -> set[UUID]:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(select(Profile.guest_id))
            return set(result.scalars().all())
