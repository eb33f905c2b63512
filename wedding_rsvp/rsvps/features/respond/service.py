"""Final commit of a response: the RSVP first, then the guest profile."""

import logging

from wedding_rsvp.guests.features.resolve_draft.resolver import GuestProfileResolver
from wedding_rsvp.notifications import Notifier, SubmissionOutcomeEvent, notify
from wedding_rsvp.rsvps.drafts import FinalizedResponse, draft_warnings
from wedding_rsvp.rsvps.features.reconcile.reconciler import RSVPReconciler
from wedding_rsvp.rsvps.results import SubmissionResult, WriteResult, WriteTarget

logger = logging.getLogger(__name__)


class SubmissionService:
    def __init__(
        self,
        reconciler: RSVPReconciler,
        resolver: GuestProfileResolver,
        notifier: Notifier | None = None,
    ) -> None:
        self._reconciler = reconciler
        self._resolver = resolver
        self._notifier = notifier

    async def submit(self, response: FinalizedResponse) -> SubmissionResult:
        """
        Reconcile the RSVP, then write the profile back.

        The profile is only written once the RSVP is saved; if the RSVP fails the
        profile result is reported as not attempted.
        """
        rsvp = await self._reconciler.reconcile(response, expected_version=response.expected_version)
        if rsvp.ok:
            profile = await self._resolver.write_back(response)
        else:
            profile = WriteResult.skipped(WriteTarget.PROFILE)

        result = SubmissionResult(rsvp=rsvp, profile=profile, warnings=draft_warnings(response))
        if result.needs_profile_retry:
            logger.warning(
                "RSVP saved for guest %s but profile write failed: %s",
                response.guest_id,
                profile.detail,
            )
        await notify(
            self._notifier,
            SubmissionOutcomeEvent.from_result(response.guest_id, response.event_id, result),
        )
        return result

    async def retry_profile(self, response: FinalizedResponse) -> WriteResult:
        """Retry only the profile write-back; the RSVP is never written again."""
        profile = await self._resolver.write_back(response)
        await notify(
            self._notifier,
            SubmissionOutcomeEvent(
                guest_id=response.guest_id,
                event_id=response.event_id,
                rsvp_ok=True,
                profile_ok=profile.ok,
                profile_error_kind=profile.error_kind,
            ),
        )
        return profile
