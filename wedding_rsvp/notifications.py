"""
Outcome events for the wedding RSVP system.

The engine hands every submission outcome to a notifier. What it does with
them (emails, toasts, audit logs) is up to the caller; the engine never
formats guest-facing text.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import httpx

from wedding_rsvp.config.settings import settings
from wedding_rsvp.rsvps.results import ErrorKind, SubmissionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcomeEvent:
    """Fired after a submit or a profile retry, successful or not."""

    guest_id: UUID
    event_id: UUID
    rsvp_ok: bool
    profile_ok: bool
    rsvp_error_kind: ErrorKind | None = None
    profile_error_kind: ErrorKind | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    event_type: str = "rsvp.submission_outcome"

    @classmethod
    def from_result(
        cls, guest_id: UUID, event_id: UUID, result: SubmissionResult
    ) -> "SubmissionOutcomeEvent":
        return cls(
            guest_id=guest_id,
            event_id=event_id,
            rsvp_ok=result.rsvp.ok,
            profile_ok=result.profile.ok,
            rsvp_error_kind=result.rsvp.error_kind,
            profile_error_kind=result.profile.error_kind,
        )


Notifier = Callable[[SubmissionOutcomeEvent], Awaitable[None]]


async def log_notifier(event: SubmissionOutcomeEvent) -> None:
    logger.info(
        "%s guest=%s event=%s rsvp_ok=%s profile_ok=%s",
        event.event_type,
        event.guest_id,
        event.event_id,
        event.rsvp_ok,
        event.profile_ok,
    )


async def notify(notifier: Notifier | None, event: SubmissionOutcomeEvent) -> None:
    """Deliver an event; a failing notifier is logged and never reaches the caller."""
    if notifier is None:
        return
    try:
        await notifier(event)
    except Exception:
        logger.exception("Notifier failed for %s (guest %s)", event.event_type, event.guest_id)


class WebhookNotifier:
    """Posts outcome events as JSON to an organizer-configured URL."""

    def __init__(
        self,
        url: str,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 5.0,
    ) -> None:
        self._url = url
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def __call__(self, event: SubmissionOutcomeEvent) -> None:
        payload = {
            "type": event.event_type,
            "timestamp": event.timestamp.isoformat(),
            "guest_id": str(event.guest_id),
            "event_id": str(event.event_id),
            "rsvp_ok": event.rsvp_ok,
            "rsvp_error_kind": event.rsvp_error_kind.value if event.rsvp_error_kind else None,
            "profile_ok": event.profile_ok,
            "profile_error_kind": (
                event.profile_error_kind.value if event.profile_error_kind else None
            ),
        }
        async with self._http_client_class(timeout=self._timeout) as client:
            response = await client.post(self._url, json=payload)
            response.raise_for_status()


def get_notifier() -> Notifier:
    if settings.NOTIFY_WEBHOOK_URL:
        return WebhookNotifier(settings.NOTIFY_WEBHOOK_URL)
    return log_notifier
