import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from wedding_rsvp.dependencies import get_event_catalog, get_resolver, get_submission_service
from wedding_rsvp.events.repository.read_models import EventCatalog
from wedding_rsvp.guests.features.resolve_draft.resolver import GuestProfileResolver
from wedding_rsvp.rsvps.drafts import Step
from wedding_rsvp.rsvps.features.respond.flow import (
    InvalidTransitionError,
    StepFlowController,
    TransitionResult,
)
from wedding_rsvp.rsvps.features.respond.schemas import (
    RSVPSubmit,
    SubmissionResponse,
    error_for,
)
from wedding_rsvp.rsvps.features.respond.service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()

SUBMIT_RSVP_URL = "/events/{event_id}/rsvps/{guest_id}"


def _rejected(step: TransitionResult) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "target": "rsvp",
            "error_kind": step.error_kind.value,
            "fields": list(step.missing),
        },
    )


@router.post(SUBMIT_RSVP_URL, response_model=SubmissionResponse)
async def submit_rsvp(
    event_id: UUID,
    guest_id: UUID,
    rsvp_data: RSVPSubmit,
    catalog: EventCatalog = Depends(get_event_catalog),
    resolver: GuestProfileResolver = Depends(get_resolver),
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    """
    Submit a guest's response for an event.

    The quick yes/no/maybe popup and the full form both land here and walk the
    same steps as the interactive flow. Returns 200 once the RSVP is saved, even
    if the profile update failed; ``needs_profile_retry`` says so.
    """
    event = await catalog.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    draft = await resolver.resolve(guest_id, event_id)
    draft.expected_version = rsvp_data.expected_version
    flow = StepFlowController(draft, max_party_size=event.max_party_size)

    try:
        flow.start()
        flow.edit(**rsvp_data.draft_edits())
        step = flow.answer_attendance(rsvp_data.attendance)
        if not step.ok:
            raise _rejected(step)

        if flow.current_step == Step.ACKNOWLEDGEMENT:
            for key in rsvp_data.acknowledged:
                flow.acknowledge(key)
            while flow.current_step != Step.COMPLETE:
                step = flow.advance()
                if not step.ok:
                    raise _rejected(step)
    except InvalidTransitionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = await flow.submit(service)
    if not result.rsvp.ok:
        raise error_for(result.rsvp)

    return SubmissionResponse.from_result(result)
