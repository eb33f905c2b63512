"""Profile write model - guest-level fields shared across events."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager, dialect_insert
from wedding_rsvp.guests.dtos import ProfileDTO, ProfilePersistenceError, ProfileUpdateDTO
from wedding_rsvp.guests.repository.orm_models import Profile

logger = logging.getLogger(__name__)


class ProfileWriteModel(ABC):
    @abstractmethod
    async def update_profile(self, guest_id: UUID, update: ProfileUpdateDTO) -> ProfileDTO:
        """
        Save profile fields for a guest, creating the profile if it is missing.
        Raises ProfilePersistenceError when the store rejects the write.
        """
        raise NotImplementedError


class SqlProfileWriteModel(ProfileWriteModel):
    """Write operations for profiles. Returns DTOs, never ORM models."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def update_profile(self, guest_id: UUID, update: ProfileUpdateDTO) -> ProfileDTO:
        fields = {
            "has_plus_one": update.has_plus_one,
            "plus_one_name": update.plus_one_name if update.has_plus_one else None,
            "plus_one_email": update.plus_one_email if update.has_plus_one else None,
            "rsvp_completed": update.rsvp_completed,
            "updated_at": datetime.now(UTC),
        }
        # Blank contact details never erase what the guest saved before
        for name in ("first_name", "last_name", "email", "mobile", "address"):
            value = getattr(update, name)
            if value:
                fields[name] = value

        try:
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                insert = dialect_insert(session)
                stmt = insert(Profile).values(guest_id=guest_id, **fields)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[Profile.guest_id],
                    set_=fields,
                )
                result = await session.scalars(
                    stmt.returning(Profile),
                    execution_options={"populate_existing": True},
                )
                profile = result.one()
                return ProfileDTO.from_orm(profile)
        except SQLAlchemyError as e:
            logger.exception("Profile write failed for guest %s", guest_id)
            raise ProfilePersistenceError(guest_id, str(e)) from e
