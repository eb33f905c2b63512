"""Multi-step response flow.

Steps and the moves between them are plain data: ``TRANSITIONS`` maps
``(source, target)`` to a guard returning the names of whatever is still
missing. A move that is not in the table is a programming error and raises
``InvalidTransitionError``; a guard that fails only reports back.

    entry -> attendance -> acknowledgement -> details -> complete
                      \\-> complete (declined)
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Protocol

from wedding_rsvp.config.settings import settings
from wedding_rsvp.rsvps.drafts import (
    EDITABLE_FIELDS,
    FinalizedResponse,
    ResponseDraft,
    Step,
    draft_warnings,
)
from wedding_rsvp.rsvps.dtos import RSVPStatus, normalize_status
from wedding_rsvp.rsvps.results import ErrorKind, SubmissionResult, WriteResult

logger = logging.getLogger(__name__)


class InvalidTransitionError(Exception):
    """Raised when the caller asks for a move the flow does not have."""

    def __init__(self, source: Step, action: str) -> None:
        self.source = source
        self.action = action
        super().__init__(f"Cannot {action} from step '{source.value}'")


@dataclass(frozen=True)
class AcknowledgementItem:
    key: str
    title: str
    description: str = ""


DEFAULT_ACKNOWLEDGEMENTS = (
    AcknowledgementItem(
        key="adults_only",
        title="Adults Only Celebration",
        description="Babes in arms excepted.",
    ),
    AcknowledgementItem(
        key="coaches",
        title="Coaches Available",
        description="Coaches run to and from Newcastle. Details will be sent closer to the date.",
    ),
    AcknowledgementItem(
        key="timing",
        title="Timing is Important",
        description="Please arrive 15 minutes early for the 3:00 PM ceremony.",
    ),
)


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    step: Step
    error_kind: ErrorKind | None = None
    missing: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class ResponseSubmitter(Protocol):
    async def submit(self, response: FinalizedResponse) -> SubmissionResult: ...

    async def retry_profile(self, response: FinalizedResponse) -> WriteResult: ...


Guard = Callable[["StepFlowController"], tuple[str, ...]]


def _always(flow: "StepFlowController") -> tuple[str, ...]:
    return ()


def _will_attend(flow: "StepFlowController") -> tuple[str, ...]:
    if flow.draft.status in (RSVPStatus.ATTENDING, RSVPStatus.MAYBE):
        return ()
    return ("status",)


def _declined(flow: "StepFlowController") -> tuple[str, ...]:
    return () if flow.draft.status == RSVPStatus.DECLINED else ("status",)


def _all_acknowledged(flow: "StepFlowController") -> tuple[str, ...]:
    return tuple(key for key, done in flow.acknowledged.items() if not done)


def _details_complete(flow: "StepFlowController") -> tuple[str, ...]:
    draft = flow.draft
    missing = []
    if not draft.first_name.strip():
        missing.append("first_name")
    if not draft.last_name.strip():
        missing.append("last_name")
    if not (draft.email.strip() or draft.mobile.strip()):
        missing.append("contact")
    if draft.has_plus_one and not draft.plus_one_name.strip():
        missing.append("plus_one_name")
    # Only an attending head count is bounded; any other answer is stored as 0
    if (
        draft.status == RSVPStatus.ATTENDING
        and draft.guest_count is not None
        and not 1 <= draft.guest_count <= flow.max_party_size
    ):
        missing.append("guest_count")
    return tuple(missing)


TRANSITIONS: dict[tuple[Step, Step], Guard] = {
    (Step.ENTRY, Step.ATTENDANCE): _always,
    (Step.ATTENDANCE, Step.ACKNOWLEDGEMENT): _will_attend,
    (Step.ATTENDANCE, Step.COMPLETE): _declined,
    (Step.ACKNOWLEDGEMENT, Step.DETAILS): _all_acknowledged,
    (Step.DETAILS, Step.COMPLETE): _details_complete,
    # Going back keeps whatever was entered
    (Step.ACKNOWLEDGEMENT, Step.ATTENDANCE): _always,
    (Step.DETAILS, Step.ACKNOWLEDGEMENT): _always,
    (Step.COMPLETE, Step.DETAILS): _always,
    (Step.COMPLETE, Step.ATTENDANCE): _always,
}

_FORWARD = {
    Step.ACKNOWLEDGEMENT: Step.DETAILS,
    Step.DETAILS: Step.COMPLETE,
}

_BACKWARD = {
    Step.ACKNOWLEDGEMENT: Step.ATTENDANCE,
    Step.DETAILS: Step.ACKNOWLEDGEMENT,
}

_STEP_ORDER = (Step.ENTRY, Step.ATTENDANCE, Step.ACKNOWLEDGEMENT, Step.DETAILS, Step.COMPLETE)

_ATTEND_PATH = (
    (Step.ATTENDANCE, Step.ACKNOWLEDGEMENT),
    (Step.ACKNOWLEDGEMENT, Step.DETAILS),
    (Step.DETAILS, Step.COMPLETE),
)
_DECLINE_PATH = ((Step.ATTENDANCE, Step.COMPLETE),)


class StepFlowController:
    """Drives one guest's draft through the steps; nothing is written before ``submit``."""

    def __init__(
        self,
        draft: ResponseDraft,
        acknowledgements: Iterable[AcknowledgementItem] = DEFAULT_ACKNOWLEDGEMENTS,
        max_party_size: int | None = None,
    ) -> None:
        self.draft = draft
        self.acknowledgements = tuple(acknowledgements)
        self.max_party_size = max_party_size or settings.max_guests_per_rsvp
        # A draft resumed past the acknowledgement step has already accepted them
        resumed = draft.current_step in (Step.DETAILS, Step.COMPLETE)
        self.acknowledged = {item.key: resumed for item in self.acknowledgements}
        requested = draft.current_step
        draft.current_step = self._resumable_step(requested)
        if draft.current_step != requested:
            logger.info(
                "Guest %s resumed at %s, not %s: earlier steps are incomplete",
                draft.guest_id,
                draft.current_step.value,
                requested.value,
            )
        self.visited: list[Step] = [draft.current_step]
        self.finalized: FinalizedResponse | None = None
        if draft.current_step == Step.COMPLETE:
            self.finalized = draft.freeze()
        self.result: SubmissionResult | None = None
        self._submitting = False

    def _resumable_step(self, requested: Step) -> Step:
        """The furthest step up to ``requested`` whose path guards all pass."""
        if requested == Step.ENTRY:
            return requested
        if self.draft.status == RSVPStatus.DECLINED:
            path = _DECLINE_PATH
        elif self.draft.status in (RSVPStatus.ATTENDING, RSVPStatus.MAYBE):
            path = _ATTEND_PATH
        else:
            path = ()

        step = Step.ATTENDANCE
        for source, target in path:
            if _STEP_ORDER.index(target) > _STEP_ORDER.index(requested):
                break
            if TRANSITIONS[(source, target)](self):
                break
            step = target
        return step

    @property
    def current_step(self) -> Step:
        return self.draft.current_step

    @property
    def submitted(self) -> bool:
        return self.result is not None and self.result.rsvp.ok

    def start(self) -> TransitionResult:
        return self._move(Step.ATTENDANCE, "start")

    def answer_attendance(self, status: RSVPStatus | str) -> TransitionResult:
        if self.current_step != Step.ATTENDANCE:
            raise InvalidTransitionError(self.current_step, "answer attendance")
        if not isinstance(status, RSVPStatus):
            status = normalize_status(status)
        if status == RSVPStatus.PENDING:
            return TransitionResult(
                ok=False,
                step=self.current_step,
                error_kind=ErrorKind.VALIDATION,
                missing=("status",),
            )

        self.draft.status = status
        self.draft.touched.add("status")
        if status == RSVPStatus.DECLINED:
            return self._move(Step.COMPLETE, "answer attendance")
        return self._move(Step.ACKNOWLEDGEMENT, "answer attendance")

    def acknowledge(self, key: str, acknowledged: bool = True) -> None:
        if self.current_step != Step.ACKNOWLEDGEMENT:
            raise InvalidTransitionError(self.current_step, "acknowledge")
        if key not in self.acknowledged:
            raise InvalidTransitionError(self.current_step, f"acknowledge unknown item '{key}'")
        self.acknowledged[key] = acknowledged

    def acknowledge_all(self) -> None:
        for key in self.acknowledged:
            self.acknowledge(key)

    def edit(self, **values) -> None:
        if self.current_step == Step.COMPLETE:
            raise InvalidTransitionError(self.current_step, "edit")
        # Attendance only changes through answer_attendance, the branch depends on it
        allowed = EDITABLE_FIELDS - {"status"}
        unknown = set(values) - allowed
        if unknown:
            raise InvalidTransitionError(
                self.current_step, f"edit unknown fields {', '.join(sorted(unknown))}"
            )
        self.draft.edit(**values)

    def advance(self) -> TransitionResult:
        target = _FORWARD.get(self.current_step)
        if target is None:
            raise InvalidTransitionError(self.current_step, "advance")
        return self._move(target, "advance")

    def go_back(self) -> TransitionResult:
        if self.current_step == Step.COMPLETE:
            if self.submitted:
                raise InvalidTransitionError(self.current_step, "go back after submitting")
            target = Step.ATTENDANCE if self.draft.status == RSVPStatus.DECLINED else Step.DETAILS
        else:
            target = _BACKWARD.get(self.current_step)
            if target is None:
                raise InvalidTransitionError(self.current_step, "go back")
        result = self._move(target, "go back")
        self.finalized = None
        return result

    async def submit(self, submitter: ResponseSubmitter) -> SubmissionResult:
        """
        Hand the finalized response to the submitter.

        A call made while another is in flight is rejected as a duplicate; once the
        RSVP has been saved later calls return the stored result without writing.
        """
        if self.current_step != Step.COMPLETE or self.finalized is None:
            raise InvalidTransitionError(self.current_step, "submit")
        if self.submitted:
            return self.result
        if self._submitting:
            logger.info("Ignoring duplicate submit for guest %s", self.draft.guest_id)
            return SubmissionResult.in_progress()

        self._submitting = True
        try:
            self.result = await submitter.submit(self.finalized)
        finally:
            self._submitting = False
        return self.result

    async def retry_profile(self, submitter: ResponseSubmitter) -> SubmissionResult:
        if self.result is None or not self.result.needs_profile_retry:
            raise InvalidTransitionError(self.current_step, "retry the profile")
        profile = await submitter.retry_profile(self.finalized)
        self.result = replace(self.result, profile=profile)
        return self.result

    def _move(self, target: Step, action: str) -> TransitionResult:
        source = self.current_step
        guard = TRANSITIONS.get((source, target))
        if guard is None:
            raise InvalidTransitionError(source, action)

        missing = guard(self)
        if missing:
            return TransitionResult(
                ok=False,
                step=source,
                error_kind=ErrorKind.VALIDATION,
                missing=missing,
                warnings=draft_warnings(self.draft),
            )

        self.draft.current_step = target
        self.visited.append(target)
        if target == Step.COMPLETE:
            self.finalized = self.draft.freeze()
        logger.debug("Guest %s moved %s -> %s", self.draft.guest_id, source.value, target.value)
        return TransitionResult(ok=True, step=target, warnings=draft_warnings(self.draft))
