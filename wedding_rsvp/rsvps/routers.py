from fastapi import APIRouter

from .features.aggregate.router import router as aggregate_router
from .features.respond.router import router as respond_router

router = APIRouter()

router.include_router(respond_router)
router.include_router(aggregate_router)
