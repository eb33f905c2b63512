from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from wedding_rsvp.dependencies import get_aggregation_service, get_event_catalog, get_rsvp_read_model
from wedding_rsvp.events.repository.read_models import EventCatalog
from wedding_rsvp.rsvps.dtos import AggregateSnapshotDTO, RSVPStatus
from wedding_rsvp.rsvps.features.aggregate.aggregator import AggregationService
from wedding_rsvp.rsvps.features.respond.schemas import RSVPRecordResponse
from wedding_rsvp.rsvps.repository.read_models import RSVPReadModel

router = APIRouter()

LIST_RSVPS_URL = "/events/{event_id}/rsvps"
EVENT_STATS_URL = "/events/{event_id}/stats"
ALL_STATS_URL = "/stats"


class SnapshotResponse(BaseModel):
    event_id: UUID
    total_invited: int
    total_responses: int
    attending_count: int
    declined_count: int
    maybe_count: int
    pending_count: int
    total_guests: int
    dietary_count: int
    plus_one_count: int
    accommodation_count: int
    transportation_count: int
    capacity_used_pct: float | None = None
    response_rate: float | None = None

    @classmethod
    def from_dto(cls, snapshot: AggregateSnapshotDTO) -> "SnapshotResponse":
        return cls(**asdict(snapshot))


@router.get(LIST_RSVPS_URL, response_model=list[RSVPRecordResponse])
async def list_rsvps(
    event_id: UUID,
    status: RSVPStatus | None = None,
    catalog: EventCatalog = Depends(get_event_catalog),
    rsvp_read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> list[RSVPRecordResponse]:
    """Stored RSVPs for an event, oldest change first. ``status`` narrows them to one answer."""
    if await catalog.get_event(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    records = await rsvp_read_model.list_rsvps(event_id, status=status)
    return [RSVPRecordResponse.from_dto(record) for record in records]


@router.get(EVENT_STATS_URL, response_model=SnapshotResponse)
async def event_stats(
    event_id: UUID,
    service: AggregationService = Depends(get_aggregation_service),
) -> SnapshotResponse:
    """Counts for one event, computed from its stored RSVPs at request time."""
    snapshot = await service.snapshot(event_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return SnapshotResponse.from_dto(snapshot)


@router.get(ALL_STATS_URL, response_model=list[SnapshotResponse])
async def all_stats(
    service: AggregationService = Depends(get_aggregation_service),
) -> list[SnapshotResponse]:
    return [SnapshotResponse.from_dto(snapshot) for snapshot in await service.snapshots()]
