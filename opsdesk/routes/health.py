"""
Liveness probe for the OpsDesk API.

GET /health answers without authentication and without touching the schema
registry or the user store, so a 200 only says the process is serving
requests. It still passes through the request pipeline and carries the
security headers like every other response.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from opsdesk.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


class HealthResponse(BaseModel):
    status: str = Field(default="ok", examples=["ok"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    status_code=200,
)
async def health_check() -> HealthResponse:
    """Report that the API process is up."""
    logger.debug("Liveness check")
    return HealthResponse()
