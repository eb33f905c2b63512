from uuid import UUID

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wedding_rsvp.config.table_names import TableNames
from wedding_rsvp.models.base import Base, TimeStamp


class Profile(Base, TimeStamp):
    __tablename__ = TableNames.PROFILES.value

    # Identity comes from the auth provider, one profile per guest
    guest_id: Mapped[UUID] = mapped_column(nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Legacy contact column, read as a fallback for mobile
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Plus one identity
    has_plus_one: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    plus_one_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    rsvp_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Profile {self.first_name} {self.last_name} ({self.guest_id})>"
