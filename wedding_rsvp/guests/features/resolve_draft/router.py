from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_rsvp.dependencies import get_event_catalog, get_resolver
from wedding_rsvp.events.repository.read_models import EventCatalog
from wedding_rsvp.guests.features.resolve_draft.resolver import GuestProfileResolver
from wedding_rsvp.rsvps.drafts import ResponseDraft, draft_warnings
from wedding_rsvp.rsvps.dtos import RSVPStatus
from wedding_rsvp.rsvps.features.respond.flow import DEFAULT_ACKNOWLEDGEMENTS

router = APIRouter()

GET_DRAFT_URL = "/events/{event_id}/rsvps/{guest_id}/draft"


class AcknowledgementResponse(BaseModel):
    key: str
    title: str
    description: str


class DraftResponse(BaseModel):
    """Prefilled form values for a guest, built from their profile and previous answer."""

    guest_id: UUID
    event_id: UUID
    status: RSVPStatus | None = None
    first_name: str
    last_name: str
    email: str
    mobile: str
    address: str
    has_plus_one: bool
    plus_one_name: str
    plus_one_email: str
    dietary_notes: str
    message: str
    meal_preference: str
    accommodation_needed: bool
    transportation_needed: bool
    expected_version: int | None = None
    acknowledgements: list[AcknowledgementResponse]
    warnings: list[str] = []

    @classmethod
    def from_draft(cls, draft: ResponseDraft) -> "DraftResponse":
        return cls(
            guest_id=draft.guest_id,
            event_id=draft.event_id,
            status=draft.status,
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=draft.email,
            mobile=draft.mobile,
            address=draft.address,
            has_plus_one=draft.has_plus_one,
            plus_one_name=draft.plus_one_name,
            plus_one_email=draft.plus_one_email,
            dietary_notes=draft.dietary_notes,
            message=draft.message,
            meal_preference=draft.meal_preference,
            accommodation_needed=draft.accommodation_needed,
            transportation_needed=draft.transportation_needed,
            expected_version=draft.expected_version,
            acknowledgements=[
                AcknowledgementResponse(key=item.key, title=item.title, description=item.description)
                for item in DEFAULT_ACKNOWLEDGEMENTS
            ],
            warnings=list(draft_warnings(draft)),
        )


@router.get(GET_DRAFT_URL, response_model=DraftResponse)
async def get_draft(
    event_id: UUID,
    guest_id: UUID,
    catalog: EventCatalog = Depends(get_event_catalog),
    resolver: GuestProfileResolver = Depends(get_resolver),
) -> DraftResponse:
    """
    Prefill the RSVP form. A guest coming back on another device sees their
    stored answer; fields they never answered fall back to their profile.
    """
    if await catalog.get_event(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    draft = await resolver.resolve(guest_id, event_id)
    return DraftResponse.from_draft(draft)
