"""
Health check endpoints.

Provides liveness and readiness probes. Readiness requires a card index.
"""

import logging

from fastapi import APIRouter, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from mtgassistant.models.failure import IndexBuildError
from mtgassistant.services.card_index import get_card_index

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    cards: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(response: Response) -> HealthResponse:
    """
    Readiness probe.

    Returns ready with the number of indexed cards. Returns 503 if the
    card index cannot be built.
    """
    try:
        # The first call parses every data file
        index = await run_in_threadpool(get_card_index)
    except IndexBuildError as e:
        logger.warning("Card index unavailable: %s", e.detail)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready")
    return HealthResponse(status="ready", cards=len(index))
