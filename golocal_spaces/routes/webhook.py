"""Payment processor webhook receiver route."""

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from golocal_spaces.dependencies import get_payment_event_dispatcher
from golocal_spaces.errors import PaymentProviderError, SideEffectError, SignatureError
from golocal_spaces.services.payment_events import PaymentEventDispatcher

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.post("/webhooks/payment-events")
async def receive_payment_event(
    request: Request,
    dispatcher: PaymentEventDispatcher = Depends(get_payment_event_dispatcher),
) -> JSONResponse:
    """
    Handle incoming Stripe webhook events.

    Responses:
    - 200 {"received": true}: processed, duplicate, ignored or unhandled event
    - 400: signature missing or invalid (nothing processed)
    - 500: webhooks not configured, or processing failed (Stripe retries)

    Args:
        request: Raw request; the body must be read unparsed for signature checks

    Returns:
        JSONResponse: Acknowledgment response
    """
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")

    try:
        result = await run_in_threadpool(dispatcher.dispatch, payload, signature)
    except SignatureError as e:
        logger.warning("webhook_rejected", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": e.message},
        )
    except PaymentProviderError as e:
        logger.error("webhook_not_configured", error=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Stripe not configured"},
        )
    except SideEffectError as e:
        logger.error("webhook_side_effects_failed", failed=e.failed)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Webhook processing failed"},
        )
    except Exception as e:
        logger.exception("webhook_processing_failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Webhook processing failed"},
        )

    logger.info(
        "webhook_handled",
        event_type=result.event_type,
        outcome=result.outcome,
        booking_id=str(result.booking_id) if result.booking_id else None,
    )
    return JSONResponse(content={"received": True})
