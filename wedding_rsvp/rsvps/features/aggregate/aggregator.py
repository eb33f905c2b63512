"""Per-event RSVP summaries, rebuilt from the stored records on every read."""

from collections import Counter
from collections.abc import Iterable
from uuid import UUID

from wedding_rsvp.events.dtos import EventDTO
from wedding_rsvp.events.repository.read_models import EventCatalog
from wedding_rsvp.guests.repository.read_models import ProfileReadModel
from wedding_rsvp.rsvps.dtos import AggregateSnapshotDTO, RSVPRecordDTO, RSVPStatus
from wedding_rsvp.rsvps.repository.read_models import RSVPReadModel


def compute_snapshot(
    event: EventDTO, records: Iterable[RSVPRecordDTO], total_invited: int = 0
) -> AggregateSnapshotDTO:
    records = list(records)
    by_status = Counter(record.status for record in records)
    attending = [record for record in records if record.status == RSVPStatus.ATTENDING]
    total_guests = sum(record.guest_count for record in attending)

    # Responders are always counted as invited
    total_invited = max(total_invited, len(records))
    answered = len(records) - by_status[RSVPStatus.PENDING]

    capacity_used_pct = None
    if event.capacity:
        capacity_used_pct = total_guests / event.capacity

    return AggregateSnapshotDTO(
        event_id=event.id,
        total_invited=total_invited,
        total_responses=len(records),
        attending_count=by_status[RSVPStatus.ATTENDING],
        declined_count=by_status[RSVPStatus.DECLINED],
        maybe_count=by_status[RSVPStatus.MAYBE],
        pending_count=by_status[RSVPStatus.PENDING],
        total_guests=total_guests,
        dietary_count=sum(1 for record in attending if record.dietary_notes),
        plus_one_count=sum(1 for record in attending if record.has_plus_one),
        accommodation_count=sum(1 for record in attending if record.accommodation_needed),
        transportation_count=sum(1 for record in attending if record.transportation_needed),
        capacity_used_pct=capacity_used_pct,
        response_rate=answered / total_invited if total_invited else None,
    )


class AggregationService:
    def __init__(
        self,
        event_catalog: EventCatalog,
        rsvp_read_model: RSVPReadModel,
        profile_read_model: ProfileReadModel,
    ) -> None:
        self._events = event_catalog
        self._rsvps = rsvp_read_model
        self._profiles = profile_read_model

    async def snapshot(self, event_id: UUID) -> AggregateSnapshotDTO | None:
        event = await self._events.get_event(event_id)
        if event is None:
            return None
        invited = await self._profiles.list_guest_ids()
        return await self._snapshot(event, invited)

    async def snapshots(self) -> list[AggregateSnapshotDTO]:
        invited = await self._profiles.list_guest_ids()
        return [await self._snapshot(event, invited) for event in await self._events.list_events()]

    async def _snapshot(self, event: EventDTO, invited: set[UUID]) -> AggregateSnapshotDTO:
        records = await self._rsvps.list_rsvps(event.id)
        responders = {record.guest_id for record in records}
        return compute_snapshot(event, records, total_invited=len(invited | responders))
