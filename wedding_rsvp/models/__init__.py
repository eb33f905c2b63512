from wedding_rsvp.models.base import BaseModel

__all__ = [
    "BaseModel",
]
