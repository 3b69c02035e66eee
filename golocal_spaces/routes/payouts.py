from typing import Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from golocal_spaces.dependencies import get_payout_service
from golocal_spaces.errors import MarketplaceError
from golocal_spaces.routes._helpers import success
from golocal_spaces.schemas.payouts import ConnectAccountPayload
from golocal_spaces.services.payouts import PayoutAccountService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/payouts/connect")
def start_connect_onboarding(
    payload: ConnectAccountPayload,
    service: PayoutAccountService = Depends(get_payout_service),
) -> dict[str, Any]:
    """
    Create the landlord's Stripe Connect account if needed and return an onboarding link.
    """
    try:
        return success(service.start_onboarding(payload.user_id))
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("connect_onboarding_failed", user_id=str(payload.user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create Connect account")


@router.get("/payouts/connect")
def get_connect_status(
    user_id: UUID = Query(...),
    service: PayoutAccountService = Depends(get_payout_service),
) -> dict[str, Any]:
    """Return the landlord's Connect account status, refreshed from Stripe."""
    try:
        return success(service.get_status(user_id))
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("connect_status_failed", user_id=str(user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch account status")
