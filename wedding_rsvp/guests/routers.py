from fastapi import APIRouter

from .features.resolve_draft.router import router as resolve_draft_router
from .features.retry_profile.router import router as retry_profile_router

router = APIRouter()

router.include_router(resolve_draft_router)
router.include_router(retry_profile_router)
