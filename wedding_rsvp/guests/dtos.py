from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from wedding_rsvp.guests.repository.orm_models import Profile


class ProfilePersistenceError(Exception):
    """Raised when the profile store fails to save guest details."""

    def __init__(self, guest_id: UUID, reason: str) -> None:
        self.guest_id = guest_id
        self.reason = reason
        super().__init__(f"Could not save profile for guest '{guest_id}': {reason}")


@dataclass(frozen=True)
class ProfileDTO:
    """Guest-level details shared across every event."""

    guest_id: UUID
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    mobile: str | None = None
    phone: str | None = None
    address: str | None = None
    has_plus_one: bool = False
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    rsvp_completed: bool = False

    @classmethod
    def from_orm(cls, profile: "Profile") -> "ProfileDTO":
        return cls(
            guest_id=profile.guest_id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            mobile=profile.mobile,
            phone=profile.phone,
            address=profile.address,
            has_plus_one=bool(profile.has_plus_one),
            plus_one_name=profile.plus_one_name,
            plus_one_email=profile.plus_one_email,
            rsvp_completed=bool(profile.rsvp_completed),
        )


@dataclass(frozen=True)
class ProfileUpdateDTO:
    """Profile fields written back after a final RSVP commit. None leaves the stored value alone."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    mobile: str | None = None
    address: str | None = None
    has_plus_one: bool = False
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    rsvp_completed: bool = True
