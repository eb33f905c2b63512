from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wedding_rsvp.config.table_names import TableNames
from wedding_rsvp.models.base import Base, TimeStamp


class WeddingEvent(Base, TimeStamp):
    __tablename__ = TableNames.WEDDING_EVENTS.value

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_main_event: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Venue capacity, None when the venue has no limit
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Largest party a single RSVP may bring, None falls back to settings
    max_party_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rsvp_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<WeddingEvent {self.title} on {self.event_date}>"
