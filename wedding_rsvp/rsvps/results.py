"""Typed outcomes of the reconciliation engine.

Nothing in the engine raises to its caller for an expected failure. Each write
target reports its own ``WriteResult`` and the presentation layer decides what
to tell the guest.
"""

from dataclasses import dataclass, field
from enum import Enum

from wedding_rsvp.rsvps.dtos import RSVPRecordDTO


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    REFERENCE = "reference"
    PERSISTENCE = "persistence"
    CONFLICT = "conflict"


class WriteTarget(str, Enum):
    RSVP = "rsvp"
    PROFILE = "profile"


@dataclass(frozen=True)
class WriteResult:
    target: WriteTarget
    ok: bool
    attempted: bool = True
    error_kind: ErrorKind | None = None
    # Diagnostic only, never shown to guests
    detail: str | None = None
    # Field names behind a validation failure
    fields: tuple[str, ...] = ()
    record: RSVPRecordDTO | None = None

    @classmethod
    def success(cls, target: WriteTarget, record: RSVPRecordDTO | None = None) -> "WriteResult":
        return cls(target=target, ok=True, record=record)

    @classmethod
    def failure(
        cls,
        target: WriteTarget,
        error_kind: ErrorKind,
        detail: str | None = None,
        fields: tuple[str, ...] = (),
    ) -> "WriteResult":
        return cls(target=target, ok=False, error_kind=error_kind, detail=detail, fields=fields)

    @classmethod
    def skipped(cls, target: WriteTarget) -> "WriteResult":
        """The write was not attempted because an earlier step failed."""
        return cls(target=target, ok=False, attempted=False)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a final submit: the RSVP write and the profile write-back, reported apart."""

    rsvp: WriteResult
    profile: WriteResult
    # Set when the call was rejected because another submit was already running
    duplicate: bool = False
    warnings: tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return self.rsvp.ok and self.profile.ok

    @property
    def needs_profile_retry(self) -> bool:
        """RSVP saved but contact details did not; retry the profile only."""
        return self.rsvp.ok and self.profile.attempted and not self.profile.ok

    @classmethod
    def in_progress(cls) -> "SubmissionResult":
        return cls(
            rsvp=WriteResult.skipped(WriteTarget.RSVP),
            profile=WriteResult.skipped(WriteTarget.PROFILE),
            duplicate=True,
        )
