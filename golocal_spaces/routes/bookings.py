from typing import Any, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from golocal_spaces.dependencies import get_booking_service
from golocal_spaces.errors import MarketplaceError
from golocal_spaces.routes._helpers import schedule_side_effects, success
from golocal_spaces.schemas.bookings import BookingCancelPayload, BookingCreatePayload, BookingRole
from golocal_spaces.services.bookings import BookingService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/bookings", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreatePayload,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
) -> dict[str, Any]:
    """
    Request a booking and open its payment authorization.

    The client completes payment with the returned client secret; the booking
    is confirmed later by the payment_intent.succeeded webhook.

    Returns:
        dict: booking, payment client secret, total price and platform fee
    """
    try:
        created = service.create_booking(
            space_id=payload.space_id,
            vendor_id=payload.vendor_id,
            start_date=payload.start_date,
            end_date=payload.end_date,
            special_requests=payload.special_requests,
        )
        schedule_side_effects(background_tasks, created.side_effects)

        return success(
            {
                "booking": created.booking,
                "client_secret": created.authorization.client_secret,
                "total_price": created.quote.total_price,
                "platform_fee": created.quote.platform_fee,
            },
            message="Booking created successfully",
        )

    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("booking_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create booking")


@router.get("/bookings")
def list_bookings(
    user_id: UUID = Query(..., description="User whose bookings to list"),
    role: Optional[BookingRole] = Query(None, description="vendor or landlord; omit for both"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: BookingService = Depends(get_booking_service),
) -> dict[str, Any]:
    """List a user's bookings, newest first."""
    try:
        return success(service.list_bookings(user_id, role=role, limit=limit, offset=offset))
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("booking_list_failed", user_id=str(user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch bookings")


@router.get("/bookings/{booking_id}")
def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
) -> dict[str, Any]:
    """Fetch a booking with its space and both party summaries."""
    try:
        return success(service.get_booking(booking_id))
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("booking_fetch_failed", booking_id=str(booking_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch booking")


@router.post("/bookings/{booking_id}/cancel")
def cancel_booking(
    booking_id: UUID,
    payload: BookingCancelPayload,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
) -> dict[str, Any]:
    """
    Cancel (vendor) or decline (landlord) a booking.

    Pending bookings are cancelled immediately. Confirmed bookings are refunded
    and move to cancelled when the refund webhook arrives.
    """
    try:
        cancelled = service.cancel_booking(booking_id, payload.actor_id, payload.reason)
        schedule_side_effects(background_tasks, cancelled.side_effects)

        message = "Refund requested" if cancelled.refund_id else "Booking cancelled"
        return success(
            {"booking": cancelled.booking, "refund_id": cancelled.refund_id}, message=message
        )

    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("booking_cancel_failed", booking_id=str(booking_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to cancel booking")
