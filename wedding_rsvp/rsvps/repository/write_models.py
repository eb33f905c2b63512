"""RSVP write model - the atomic upsert every RSVP goes through."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_rsvp.config.database import async_session_manager, dialect_insert
from wedding_rsvp.events.dtos import EventNotFoundError
from wedding_rsvp.rsvps.dtos import (
    RSVPPersistenceError,
    RSVPRecordDTO,
    RSVPUpsertDTO,
    StaleVersionError,
)
from wedding_rsvp.rsvps.repository.orm_models import RSVP

logger = logging.getLogger(__name__)

# Columns an upsert may change; version and updated_at only move when one of them does
UPSERT_COLUMNS = (
    "status",
    "guest_count",
    "dietary_restrictions",
    "plus_one_name",
    "plus_one_email",
    "message",
    "meal_preference",
    "accommodation_needed",
    "transportation_needed",
)


def upsert_values(upsert: RSVPUpsertDTO) -> dict:
    plus_one = upsert.plus_one
    return {
        "status": upsert.status,
        "guest_count": upsert.guest_count,
        "dietary_restrictions": upsert.dietary_notes,
        "plus_one_name": plus_one.name if plus_one else None,
        "plus_one_email": plus_one.email if plus_one else None,
        "message": upsert.message,
        "meal_preference": upsert.meal_preference,
        "accommodation_needed": upsert.accommodation_needed,
        "transportation_needed": upsert.transportation_needed,
    }


class RSVPWriteModel(ABC):
    @abstractmethod
    async def upsert_rsvp(
        self,
        guest_id: UUID,
        event_id: UUID,
        upsert: RSVPUpsertDTO,
        expected_version: int | None = None,
    ) -> RSVPRecordDTO:
        """
        Insert the RSVP for (guest_id, event_id), or update the existing one, atomically.

        Version and updated_at change in the same statement as the fields, and only
        when a field actually changed. When expected_version is given the update
        only applies if the stored version still matches.

        Raises StaleVersionError, EventNotFoundError or RSVPPersistenceError.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """INSERT ... ON CONFLICT DO UPDATE against uq_rsvps_guest_event. Returns DTOs, never ORM models."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self._session_overwrite = session_overwrite

    async def upsert_rsvp(
        self,
        guest_id: UUID,
        event_id: UUID,
        upsert: RSVPUpsertDTO,
        expected_version: int | None = None,
    ) -> RSVPRecordDTO:
        now = datetime.now(UTC)
        values = upsert_values(upsert)

        try:
            async with async_session_manager(session_overwrite=self._session_overwrite) as session:
                insert = dialect_insert(session)
                stmt = insert(RSVP).values(
                    guest_id=guest_id,
                    event_id=event_id,
                    created_at=now,
                    updated_at=now,
                    version=1,
                    **values,
                )

                changed = or_(
                    *(getattr(RSVP, column).is_distinct_from(stmt.excluded[column]) for column in UPSERT_COLUMNS)
                )
                condition = changed
                if expected_version is not None:
                    condition = and_(RSVP.version == expected_version, changed)

                stmt = stmt.on_conflict_do_update(
                    index_elements=[RSVP.guest_id, RSVP.event_id],
                    set_={
                        **{column: stmt.excluded[column] for column in UPSERT_COLUMNS},
                        "updated_at": now,
                        "version": RSVP.version + 1,
                    },
                    where=condition,
                )
                result = await session.scalars(
                    stmt.returning(RSVP),
                    execution_options={"populate_existing": True},
                )
                rsvp = result.one_or_none()

                if rsvp is None:
                    # The conflict update was skipped: nothing changed, or the version check failed
                    rsvp = await self._get_rsvp(session, guest_id, event_id)
                    if expected_version is not None and (
                        rsvp is None or rsvp.version != expected_version
                    ):
                        raise StaleVersionError(expected_version, rsvp.version if rsvp else None)
                    logger.debug("RSVP %s/%s unchanged at version %s", guest_id, event_id, rsvp.version)
                else:
                    logger.info(
                        "RSVP %s/%s saved as %s (version %s)",
                        guest_id,
                        event_id,
                        rsvp.status,
                        rsvp.version,
                    )

                return RSVPRecordDTO.from_orm(rsvp)
        except IntegrityError as e:
            # The unique key is handled by the upsert, so this is the event foreign key
            logger.warning("RSVP for guest %s rejected, event %s missing", guest_id, event_id)
            raise EventNotFoundError(event_id) from e
        except SQLAlchemyError as e:
            logger.exception("RSVP upsert failed for guest %s and event %s", guest_id, event_id)
            raise RSVPPersistenceError(guest_id, event_id, str(e)) from e

    async def _get_rsvp(self, session, guest_id: UUID, event_id: UUID) -> RSVP | None:
        stmt = select(RSVP).where(RSVP.guest_id == guest_id, RSVP.event_id == event_id)
        result = await session.execute(stmt.execution_options(populate_existing=True))
        return result.scalar_one_or_none()
