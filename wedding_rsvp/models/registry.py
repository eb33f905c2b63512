"""Imports every ORM module so ``BaseModel.metadata`` knows all tables.

Kept out of the package ``__init__``: the ORM modules import ``models.base``
themselves, so loading them from there would be circular.
"""

from wedding_rsvp.events.repository.orm_models import WeddingEvent
from wedding_rsvp.guests.repository.orm_models import Profile
from wedding_rsvp.models.base import BaseModel
from wedding_rsvp.rsvps.repository.orm_models import RSVP

metadata = BaseModel.metadata

__all__ = [
    "metadata",
    "WeddingEvent",
    "Profile",
    "RSVP",
]
