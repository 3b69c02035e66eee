"""
Liveness and readiness probes.

/health answers as long as the process serves requests. /ready also requires
the database; payment configuration is reported but does not gate traffic.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from golocal_spaces.db.engine import check_engine_health
from golocal_spaces.dependencies import get_db_engine, get_payment_gateway
from golocal_spaces.payments.gateway import StripeGateway

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> JSONResponse:
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check(
    db: Engine = Depends(get_db_engine),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> JSONResponse:
    """
    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok", "payments": "configured"}}
    """
    database_ok = check_engine_health(db)
    checks = {
        "database": "ok" if database_ok else "failed",
        "payments": "configured" if gateway.api_key else "not_configured",
    }
    if not database_ok:
        logger.error("readiness_check_failed", checks=checks)
        return JSONResponse(status_code=503, content={"status": "not ready", "checks": checks})
    return JSONResponse(content={"status": "ready", "checks": checks})
