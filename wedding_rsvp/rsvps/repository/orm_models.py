from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from wedding_rsvp.config.table_names import TableNames
from wedding_rsvp.models.base import Base
from wedding_rsvp.rsvps.dtos import RSVPStatus


class RSVP(Base):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (
        # Exactly one live answer per guest and event; the upsert targets this key
        UniqueConstraint("guest_id", "event_id", name="uq_rsvps_guest_event"),
    )

    guest_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.WEDDING_EVENTS.value}.uuid", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    status: Mapped[RSVPStatus] = mapped_column(
        Enum(
            RSVPStatus,
            name="rsvp_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=RSVPStatus.PENDING,
        nullable=False,
    )
    guest_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    plus_one_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plus_one_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    meal_preference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    accommodation_needed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    transportation_needed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Written by the upsert itself, together with version
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<RSVP {self.guest_id} -> {self.event_id}: {self.status} v{self.version}>"
