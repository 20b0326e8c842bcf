# backend/portfolio/routes/v1/health.py
"""
Health check endpoints for monitoring and load balancer probes.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import os

from fastapi import APIRouter, Response

from ...core.config import settings
from ...core.constants import API_VERSION, BRAND_NAME
from ...schemas.system import HealthLiteResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _resolve_git_sha() -> str:
    for candidate in (os.getenv("VERCEL_GIT_COMMIT_SHA"), os.getenv("GIT_SHA")):
        if candidate and candidate.strip():
            return candidate.strip()
    return "unknown"


@router.get("", response_model=HealthResponse)
def health_check(response: Response) -> HealthResponse:
    """
    Health check endpoint.

    Returns basic service info without touching the database. The system
    status endpoint probes this route for its ``api`` check.
    """
    response.headers["X-Commit-Sha"] = _resolve_git_sha()
    return HealthResponse(
        status="healthy",
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/lite", response_model=HealthLiteResponse)
def health_check_lite() -> HealthLiteResponse:
    return HealthLiteResponse(status="ok")
