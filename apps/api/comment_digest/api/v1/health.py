from fastapi import APIRouter

from comment_digest.core.config import GEMINI_MODEL
from comment_digest.schemas.health import HealthResponse
from comment_digest.utils.ids import utc_timestamp

router = APIRouter(tags=["health"])

@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", model=GEMINI_MODEL, timestamp=utc_timestamp())
