from fastapi import APIRouter

from .features.list_events.router import router as list_events_router

router = APIRouter()

router.include_router(list_events_router)
