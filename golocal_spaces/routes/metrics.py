"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP golocal_bookings_created_total Total number of booking requests persisted
        # TYPE golocal_bookings_created_total counter
        golocal_bookings_created_total 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose metrics in Prometheus text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
