from enum import Enum


class TableNames(str, Enum):
    PROFILES = "profiles"
    WEDDING_EVENTS = "wedding_events"
    RSVPS = "rsvps"
