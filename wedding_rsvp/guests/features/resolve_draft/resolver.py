"""Prefill a guest's draft from what is already known about them.

Precedence, highest first: fields the guest edited in this draft, the stored
RSVP for the event, the guest profile, then empty defaults.
"""

import logging
from uuid import UUID

from wedding_rsvp.guests.dtos import ProfileDTO, ProfilePersistenceError, ProfileUpdateDTO
from wedding_rsvp.guests.repository.read_models import ProfileReadModel
from wedding_rsvp.guests.repository.write_models import ProfileWriteModel
from wedding_rsvp.rsvps.drafts import FinalizedResponse, ResponseDraft
from wedding_rsvp.rsvps.dtos import MAYBE_FOLLOW_UP_MESSAGE, RSVPRecordDTO
from wedding_rsvp.rsvps.repository.read_models import RSVPReadModel
from wedding_rsvp.rsvps.results import ErrorKind, WriteResult, WriteTarget

logger = logging.getLogger(__name__)


def _profile_values(profile: ProfileDTO | None) -> dict:
    if profile is None:
        return {}
    return {
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "email": profile.email,
        "mobile": profile.mobile or profile.phone,
        "address": profile.address,
        "has_plus_one": profile.has_plus_one,
        "plus_one_name": profile.plus_one_name,
        "plus_one_email": profile.plus_one_email,
    }


def guest_message(message: str | None) -> str | None:
    """The part of a stored message the guest wrote, without the follow-up marker."""
    if not message or not message.startswith(MAYBE_FOLLOW_UP_MESSAGE):
        return message
    return message[len(MAYBE_FOLLOW_UP_MESSAGE):].strip() or None


def _record_values(record: RSVPRecordDTO | None) -> dict:
    if record is None:
        return {}
    values = {
        "status": record.status,
        "dietary_notes": record.dietary_notes,
        "message": guest_message(record.message),
        "meal_preference": record.meal_preference,
        "accommodation_needed": record.accommodation_needed,
        "transportation_needed": record.transportation_needed,
        "has_plus_one": record.has_plus_one,
    }
    if record.plus_one is not None:
        values["plus_one_name"] = record.plus_one.name
        values["plus_one_email"] = record.plus_one.email
    return values


def merge_draft(
    guest_id: UUID,
    event_id: UUID,
    profile: ProfileDTO | None = None,
    record: RSVPRecordDTO | None = None,
    draft: ResponseDraft | None = None,
) -> ResponseDraft:
    merged = ResponseDraft(guest_id=guest_id, event_id=event_id)
    # Later layers win; None never overrides a lower layer
    for values in (_profile_values(profile), _record_values(record)):
        for name, value in values.items():
            if value is not None:
                setattr(merged, name, value)

    if draft is not None:
        for name in draft.touched:
            setattr(merged, name, getattr(draft, name))
        merged.touched = set(draft.touched)
        merged.current_step = draft.current_step

    merged.expected_version = record.version if record else None
    return merged


class GuestProfileResolver:
    def __init__(
        self,
        profile_read_model: ProfileReadModel,
        profile_write_model: ProfileWriteModel,
        rsvp_read_model: RSVPReadModel,
    ) -> None:
        self._profiles = profile_read_model
        self._profile_writer = profile_write_model
        self._rsvps = rsvp_read_model

    async def resolve(
        self, guest_id: UUID, event_id: UUID, draft: ResponseDraft | None = None
    ) -> ResponseDraft:
        """Build the prefilled draft. Passing the current draft keeps every field the guest touched."""
        profile = await self._profiles.get_profile(guest_id)
        record = await self._rsvps.get_rsvp(guest_id, event_id)
        return merge_draft(guest_id, event_id, profile=profile, record=record, draft=draft)

    async def write_back(self, response: FinalizedResponse) -> WriteResult:
        update = ProfileUpdateDTO(
            first_name=response.first_name.strip() or None,
            last_name=response.last_name.strip() or None,
            email=response.email.strip() or None,
            mobile=response.mobile.strip() or None,
            address=response.address.strip() or None,
            has_plus_one=response.has_plus_one,
            plus_one_name=response.plus_one_name.strip() or None,
            plus_one_email=response.plus_one_email.strip() or None,
            rsvp_completed=True,
        )
        try:
            await self._profile_writer.update_profile(response.guest_id, update)
        except ProfilePersistenceError as e:
            logger.warning("Profile write-back failed for guest %s: %s", response.guest_id, e.reason)
            return WriteResult.failure(WriteTarget.PROFILE, ErrorKind.PERSISTENCE, detail=e.reason)

        logger.info("Profile updated for guest %s", response.guest_id)
        return WriteResult.success(WriteTarget.PROFILE)
