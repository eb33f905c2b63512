from fastapi import APIRouter
from pydantic import BaseModel

from wedding_rsvp import __version__
from wedding_rsvp.config.settings import settings

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = __version__
    environment: str
    deadline_enforced: bool


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    """
    return HealthCheckResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        deadline_enforced=settings.enforce_rsvp_deadline,
    )
