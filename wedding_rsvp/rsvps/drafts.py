"""In-progress responses.

A ``ResponseDraft`` lives only inside one guest's flow and is never persisted.
Reaching the final step freezes it into a ``FinalizedResponse``, the only shape
the reconciler and the profile write-back accept.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from uuid import UUID

from wedding_rsvp.rsvps.dtos import RSVPStatus


class Step(str, Enum):
    ENTRY = "entry"
    ATTENDANCE = "attendance"
    ACKNOWLEDGEMENT = "acknowledgement"
    DETAILS = "details"
    COMPLETE = "complete"


@dataclass
class ResponseDraft:
    guest_id: UUID
    event_id: UUID
    status: RSVPStatus | None = None

    # Profile level
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""
    address: str = ""
    has_plus_one: bool = False
    plus_one_name: str = ""
    plus_one_email: str = ""

    # Event level
    dietary_notes: str = ""
    # Only set by multi-event flows that ask for a head count
    guest_count: int | None = None
    message: str = ""
    meal_preference: str = ""
    accommodation_needed: bool = False
    transportation_needed: bool = False

    # Version of the stored RSVP this draft was built from
    expected_version: int | None = None
    current_step: Step = Step.ENTRY
    touched: set[str] = field(default_factory=set)

    def edit(self, **values) -> None:
        """Apply user edits; edited fields win over any later prefill."""
        unknown = set(values) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            setattr(self, name, value)
            self.touched.add(name)

    def freeze(self) -> "FinalizedResponse":
        return FinalizedResponse(
            **{name: getattr(self, name) for name in FINALIZED_FIELDS},
        )


@dataclass(frozen=True)
class FinalizedResponse:
    guest_id: UUID
    event_id: UUID
    status: RSVPStatus
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile: str = ""
    address: str = ""
    has_plus_one: bool = False
    plus_one_name: str = ""
    plus_one_email: str = ""
    dietary_notes: str = ""
    guest_count: int | None = None
    message: str = ""
    meal_preference: str = ""
    accommodation_needed: bool = False
    transportation_needed: bool = False
    expected_version: int | None = None


FINALIZED_FIELDS = frozenset(f.name for f in fields(FinalizedResponse))
EDITABLE_FIELDS = FINALIZED_FIELDS - {"guest_id", "event_id", "expected_version"}

_ALLERGENS = ("nut", "shellfish", "dairy", "gluten")


def draft_warnings(draft: ResponseDraft | FinalizedResponse) -> tuple[str, ...]:
    """Advisory codes for the form; they never block a transition."""
    warnings = []
    if draft.status != RSVPStatus.ATTENDING:
        return ()

    if draft.guest_count is not None and draft.guest_count > 2:
        warnings.append("large_party")

    dietary = (draft.dietary_notes or "").lower()
    if not dietary.strip():
        warnings.append("dietary_unspecified")
    elif any(allergen in dietary for allergen in _ALLERGENS) and not (
        "severe" in dietary or "mild" in dietary
    ):
        warnings.append("allergy_severity_unspecified")

    return tuple(warnings)
