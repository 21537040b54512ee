"""Metrics endpoint - GET /metrics in the Prometheus text format."""

from typing import Annotated

from fastapi import APIRouter, Query, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter()


@router.get("/metrics")
def metrics(
    name: Annotated[list[str] | None, Query(description="Sample names to include")] = None,
) -> Response:
    """Expose check metrics: notes_scanned_total, findings_total, check_duration_ms.

    Repeating `name` (e.g. `?name=findings_total`) restricts the output to
    those samples; without it every registered metric is returned.
    """
    registry = REGISTRY.restricted_registry(name) if name else REGISTRY
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
