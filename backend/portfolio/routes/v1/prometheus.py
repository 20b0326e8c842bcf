"""
Prometheus metrics endpoint.

Public, following standard Prometheus practice. Only the portfolio registry is
exposed; default process collectors are not registered on it.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ...core.metrics import REGISTRY

router = APIRouter(tags=["monitoring"])


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
