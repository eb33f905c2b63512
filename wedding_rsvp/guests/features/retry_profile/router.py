from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from wedding_rsvp.dependencies import get_rsvp_read_model, get_submission_service
from wedding_rsvp.rsvps.drafts import FinalizedResponse
from wedding_rsvp.rsvps.features.respond.schemas import WriteResultResponse, error_for
from wedding_rsvp.rsvps.features.respond.service import SubmissionService
from wedding_rsvp.rsvps.repository.read_models import RSVPReadModel

router = APIRouter()

RETRY_PROFILE_URL = "/guests/{guest_id}/profile"


class ProfileRetrySubmit(BaseModel):
    """The details sent with the original submission, for the event it was saved against."""

    event_id: UUID
    first_name: str = ""
    last_name: str = ""
    email: EmailStr | None = None
    mobile: str = ""
    address: str = ""
    has_plus_one: bool = False
    plus_one_name: str = ""
    plus_one_email: EmailStr | None = None


@router.post(RETRY_PROFILE_URL, response_model=WriteResultResponse)
async def retry_profile(
    guest_id: UUID,
    profile_data: ProfileRetrySubmit,
    rsvp_read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    service: SubmissionService = Depends(get_submission_service),
) -> WriteResultResponse:
    """
    Retry the profile update after an RSVP was saved but the profile was not.
    The RSVP itself is not written again.
    """
    record = await rsvp_read_model.get_rsvp(guest_id, profile_data.event_id)
    if record is None:
        raise HTTPException(status_code=404, detail="No RSVP saved for this event")

    response = FinalizedResponse(
        guest_id=guest_id,
        event_id=profile_data.event_id,
        status=record.status,
        first_name=profile_data.first_name,
        last_name=profile_data.last_name,
        email=profile_data.email or "",
        mobile=profile_data.mobile,
        address=profile_data.address,
        has_plus_one=profile_data.has_plus_one,
        plus_one_name=profile_data.plus_one_name,
        plus_one_email=profile_data.plus_one_email or "",
    )
    result = await service.retry_profile(response)
    if not result.ok:
        raise error_for(result)
    return WriteResultResponse.from_result(result)
