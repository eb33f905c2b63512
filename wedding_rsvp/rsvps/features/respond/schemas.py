from datetime import datetime
from uuid import UUID

from fastapi import HTTPException
from pydantic import BaseModel, EmailStr, Field

from wedding_rsvp.rsvps.dtos import RSVPRecordDTO, RSVPStatus
from wedding_rsvp.rsvps.results import ErrorKind, SubmissionResult, WriteResult

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.REFERENCE: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.PERSISTENCE: 503,
}


class RSVPSubmit(BaseModel):
    """
    A complete response in one request.

    Only ``attendance`` is required for a quick yes/no/maybe; the full form sends
    the details too. Acknowledgement keys must be sent for attending or maybe.
    """

    attendance: str = Field(description="attending/yes, declined/no, maybe/tentative")
    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    mobile: str | None = None
    address: str | None = None
    has_plus_one: bool | None = None
    plus_one_name: str | None = None
    plus_one_email: EmailStr | None = None
    dietary_notes: str | None = None
    guest_count: int | None = None
    message: str | None = None
    meal_preference: str | None = None
    accommodation_needed: bool | None = None
    transportation_needed: bool | None = None
    acknowledged: list[str] = []
    # Send the version from the draft to fail with 409 if another device saved first
    expected_version: int | None = None

    def draft_edits(self) -> dict:
        return {
            name: value
            for name, value in self.model_dump(
                exclude={"attendance", "acknowledged", "expected_version"}
            ).items()
            if value is not None
        }


class PlusOneResponse(BaseModel):
    name: str | None = None
    email: str | None = None


class RSVPRecordResponse(BaseModel):
    guest_id: UUID
    event_id: UUID
    status: RSVPStatus
    guest_count: int
    dietary_notes: str | None = None
    plus_one: PlusOneResponse | None = None
    message: str | None = None
    meal_preference: str | None = None
    accommodation_needed: bool
    transportation_needed: bool
    updated_at: datetime
    version: int

    @classmethod
    def from_dto(cls, record: RSVPRecordDTO) -> "RSVPRecordResponse":
        return cls(
            guest_id=record.guest_id,
            event_id=record.event_id,
            status=record.status,
            guest_count=record.guest_count,
            dietary_notes=record.dietary_notes,
            plus_one=(
                PlusOneResponse(name=record.plus_one.name, email=record.plus_one.email)
                if record.plus_one
                else None
            ),
            message=record.message,
            meal_preference=record.meal_preference,
            accommodation_needed=record.accommodation_needed,
            transportation_needed=record.transportation_needed,
            updated_at=record.updated_at,
            version=record.version,
        )


class WriteResultResponse(BaseModel):
    ok: bool
    attempted: bool
    error_kind: ErrorKind | None = None
    fields: list[str] = []

    @classmethod
    def from_result(cls, result: WriteResult) -> "WriteResultResponse":
        return cls(
            ok=result.ok,
            attempted=result.attempted,
            error_kind=result.error_kind,
            fields=list(result.fields),
        )


class SubmissionResponse(BaseModel):
    rsvp: RSVPRecordResponse
    profile: WriteResultResponse
    needs_profile_retry: bool
    warnings: list[str] = []

    @classmethod
    def from_result(cls, result: SubmissionResult) -> "SubmissionResponse":
        return cls(
            rsvp=RSVPRecordResponse.from_dto(result.rsvp.record),
            profile=WriteResultResponse.from_result(result.profile),
            needs_profile_retry=result.needs_profile_retry,
            warnings=list(result.warnings),
        )


def error_for(result: WriteResult) -> HTTPException:
    """Map a failed write onto its HTTP error. Diagnostics stay in the logs."""
    return HTTPException(
        status_code=ERROR_STATUS_CODES[result.error_kind],
        detail={
            "target": result.target.value,
            "error_kind": result.error_kind.value,
            "fields": list(result.fields),
        },
    )
