"""FastAPI dependencies. Tests override the read/write model factories with in-memory ones."""

from fastapi import Depends

from wedding_rsvp.events.repository.read_models import EventCatalog, SqlEventCatalog
from wedding_rsvp.guests.features.resolve_draft.resolver import GuestProfileResolver
from wedding_rsvp.guests.repository.read_models import ProfileReadModel, SqlProfileReadModel
from wedding_rsvp.guests.repository.write_models import ProfileWriteModel, SqlProfileWriteModel
from wedding_rsvp.notifications import Notifier, get_notifier
from wedding_rsvp.rsvps.features.aggregate.aggregator import AggregationService
from wedding_rsvp.rsvps.features.reconcile.reconciler import RSVPReconciler
from wedding_rsvp.rsvps.features.respond.service import SubmissionService
from wedding_rsvp.rsvps.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from wedding_rsvp.rsvps.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel


def get_event_catalog() -> EventCatalog:
    return SqlEventCatalog()


def get_profile_read_model() -> ProfileReadModel:
    return SqlProfileReadModel()


def get_profile_write_model() -> ProfileWriteModel:
    return SqlProfileWriteModel()


def get_rsvp_read_model() -> RSVPReadModel:
    return SqlRSVPReadModel()


def get_rsvp_write_model() -> RSVPWriteModel:
    return SqlRSVPWriteModel()


def get_resolver(
    profile_read_model: ProfileReadModel = Depends(get_profile_read_model),
    profile_write_model: ProfileWriteModel = Depends(get_profile_write_model),
    rsvp_read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> GuestProfileResolver:
    return GuestProfileResolver(profile_read_model, profile_write_model, rsvp_read_model)


def get_submission_service(
    event_catalog: EventCatalog = Depends(get_event_catalog),
    rsvp_write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    resolver: GuestProfileResolver = Depends(get_resolver),
    notifier: Notifier = Depends(get_notifier),
) -> SubmissionService:
    return SubmissionService(
        reconciler=RSVPReconciler(event_catalog, rsvp_write_model),
        resolver=resolver,
        notifier=notifier,
    )


def get_aggregation_service(
    event_catalog: EventCatalog = Depends(get_event_catalog),
    rsvp_read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    profile_read_model: ProfileReadModel = Depends(get_profile_read_model),
) -> AggregationService:
    return AggregationService(event_catalog, rsvp_read_model, profile_read_model)
