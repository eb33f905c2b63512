"""CLI commands for wedding RSVP management."""

import asyncio
from datetime import UTC, datetime
from uuid import UUID

import typer

from wedding_rsvp.events.features.create_event.write_model import SqlEventCreateWriteModel
from wedding_rsvp.events.repository.read_models import SqlEventCatalog
from wedding_rsvp.guests.repository.read_models import SqlProfileReadModel
from wedding_rsvp.rsvps.dtos import AggregateSnapshotDTO
from wedding_rsvp.rsvps.features.aggregate.aggregator import AggregationService
from wedding_rsvp.rsvps.repository.read_models import SqlRSVPReadModel

app = typer.Typer(help="CLI commands for wedding RSVP management")

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]


def _aware(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _aggregation_service() -> AggregationService:
    return AggregationService(SqlEventCatalog(), SqlRSVPReadModel(), SqlProfileReadModel())


def _print_snapshot(snapshot: AggregateSnapshotDTO) -> None:
    typer.secho(f"Event {snapshot.event_id}", fg=typer.colors.GREEN)
    typer.secho(
        f"  Responses: {snapshot.total_responses} of {snapshot.total_invited} invited",
        fg=typer.colors.BLUE,
    )
    typer.secho(
        f"  Attending: {snapshot.attending_count}  Declined: {snapshot.declined_count}  "
        f"Maybe: {snapshot.maybe_count}  Pending: {snapshot.pending_count}",
        fg=typer.colors.BLUE,
    )
    typer.secho(f"  Total guests: {snapshot.total_guests}", fg=typer.colors.BLUE)
    typer.secho(
        f"  Dietary: {snapshot.dietary_count}  Plus ones: {snapshot.plus_one_count}  "
        f"Accommodation: {snapshot.accommodation_count}  "
        f"Transport: {snapshot.transportation_count}",
        fg=typer.colors.BLUE,
    )
    if snapshot.capacity_used_pct is None:
        typer.secho("  Capacity: no limit", fg=typer.colors.MAGENTA)
    else:
        typer.secho(f"  Capacity used: {snapshot.capacity_used_pct:.0%}", fg=typer.colors.MAGENTA)
    if snapshot.response_rate is not None:
        typer.secho(f"  Response rate: {snapshot.response_rate:.0%}", fg=typer.colors.MAGENTA)


@app.command()
def create_event(
    title: str = typer.Argument(..., help="Event title"),
    event_date: datetime = typer.Argument(..., formats=DATE_FORMATS, help="Date of the event (UTC)"),
    main: bool = typer.Option(False, "--main", "-m", help="Flag this as the main event"),
    capacity: int = typer.Option(None, "--capacity", "-c", help="Venue capacity in guests"),
    deadline: datetime = typer.Option(
        None, "--deadline", "-d", formats=DATE_FORMATS, help="Last moment to respond (UTC)"
    ),
    max_party_size: int = typer.Option(
        None, "--max-party-size", "-p", help="Most guests a single RSVP may bring"
    ),
    location: str = typer.Option(None, "--location", "-l", help="Venue"),
):
    """Create a wedding event guests can respond to."""
    write_model = SqlEventCreateWriteModel()
    try:
        event = asyncio.run(
            write_model.create_event(
                title=title,
                event_date=_aware(event_date),
                is_main_event=main,
                capacity=capacity,
                deadline=_aware(deadline),
                max_party_size=max_party_size,
                location=location,
            )
        )
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Title: {event.title}", fg=typer.colors.BLUE)
    typer.secho(f"  Date: {event.date:%Y-%m-%d %H:%M}", fg=typer.colors.BLUE)
    if event.is_main_event:
        typer.secho("  Main event", fg=typer.colors.MAGENTA)


@app.command()
def list_events():
    """List every event, earliest first."""
    events = asyncio.run(SqlEventCatalog().list_events())
    if not events:
        typer.secho("No events yet", fg=typer.colors.YELLOW)
        return

    for event in events:
        marker = " (main)" if event.is_main_event else ""
        typer.secho(f"{event.date:%Y-%m-%d} {event.title}{marker}", fg=typer.colors.GREEN)
        typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
        if event.capacity is not None:
            typer.secho(f"  Capacity: {event.capacity}", fg=typer.colors.BLUE)
        if event.deadline is not None:
            typer.secho(f"  RSVP by: {event.deadline:%Y-%m-%d %H:%M}", fg=typer.colors.BLUE)


@app.command()
def stats(
    event_id: str = typer.Argument(None, help="Event UUID, all events when omitted"),
):
    """Show RSVP counts computed from the stored responses."""
    service = _aggregation_service()
    if event_id is None:
        snapshots = asyncio.run(service.snapshots())
        if not snapshots:
            typer.secho("No events yet", fg=typer.colors.YELLOW)
        for snapshot in snapshots:
            _print_snapshot(snapshot)
        return

    snapshot = asyncio.run(service.snapshot(UUID(event_id)))
    if snapshot is None:
        typer.secho(f"Event not found: {event_id}", fg=typer.colors.RED)
        raise typer.Exit(1)
    _print_snapshot(snapshot)


@app.command()
def list_rsvps(
    event_id: str = typer.Argument(..., help="Event UUID"),
):
    """List the stored RSVPs of an event."""
    records = asyncio.run(SqlRSVPReadModel().list_rsvps(UUID(event_id)))
    if not records:
        typer.secho("No responses yet", fg=typer.colors.YELLOW)
        return

    colors = {
        "attending": typer.colors.GREEN,
        "declined": typer.colors.RED,
        "maybe": typer.colors.YELLOW,
        "pending": typer.colors.WHITE,
    }
    for record in records:
        typer.secho(
            f"{record.guest_id}  {record.status.value:<9} x{record.guest_count}  v{record.version}",
            fg=colors[record.status.value],
        )
        if record.plus_one is not None:
            typer.secho(f"  Plus one: {record.plus_one.name}", fg=typer.colors.BLUE)
        if record.dietary_notes:
            typer.secho(f"  Dietary: {record.dietary_notes}", fg=typer.colors.BLUE)


if __name__ == "__main__":
    app()
