"""Unit tests for the payment events webhook endpoint."""

from datetime import date
from typing import Any
from unittest.mock import patch
from uuid import UUID

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import Engine

from conftest import FakeGateway, make_event, sign_payload
from golocal_spaces.db.readers.bookings import get_booking
from golocal_spaces.db.readers.notifications import list_notifications
from golocal_spaces.errors import SideEffectError
from golocal_spaces.services.bookings import BookingService

WEBHOOK_PATH = "/api/v1/webhooks/payment-events"


async def post_event(app: FastAPI, payload: str, signature: Any = "sign") -> Any:
    headers = {"Content-Type": "application/json"}
    if signature == "sign":
        headers["Stripe-Signature"] = sign_payload(payload)
    elif signature:
        headers["Stripe-Signature"] = signature

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.post(WEBHOOK_PATH, content=payload, headers=headers)


@pytest.fixture
def intent(booking_service: BookingService, space_id: UUID, vendor_id: UUID) -> tuple[UUID, str]:
    created = booking_service.create_booking(space_id, vendor_id, date(2025, 1, 1), date(2025, 1, 11))
    return created.booking["id"], created.authorization.id


@pytest.mark.asyncio
async def test_webhook_missing_signature(app: FastAPI) -> None:
    response = await post_event(app, make_event("payment_intent.succeeded", {"id": "pi_1"}), None)

    assert response.status_code == 400
    assert response.json() == {"error": "No signature provided"}


@pytest.mark.asyncio
async def test_webhook_invalid_signature(
    app: FastAPI, db_engine: Engine, intent: tuple[UUID, str]
) -> None:
    booking_id, intent_id = intent
    payload = make_event("payment_intent.succeeded", {"id": intent_id})

    response = await post_event(app, payload, sign_payload(payload, "whsec_forged"))

    assert response.status_code == 400
    assert "verification failed" in response.json()["error"]
    with db_engine.connect() as conn:
        assert get_booking(conn, booking_id)["booking_status"] == "pending"


@pytest.mark.asyncio
async def test_webhook_not_configured(app: FastAPI, gateway: FakeGateway) -> None:
    gateway.webhook_secret = None
    payload = make_event("payment_intent.succeeded", {"id": "pi_1"})

    response = await post_event(app, payload)

    assert response.status_code == 500
    assert response.json() == {"error": "Stripe not configured"}


@pytest.mark.asyncio
async def test_webhook_confirms_booking(
    app: FastAPI, db_engine: Engine, intent: tuple[UUID, str], vendor_id: UUID
) -> None:
    booking_id, intent_id = intent

    response = await post_event(app, make_event("payment_intent.succeeded", {"id": intent_id}))

    assert response.status_code == 200
    assert response.json() == {"received": True}
    with db_engine.connect() as conn:
        assert get_booking(conn, booking_id)["booking_status"] == "confirmed"
        assert len(list_notifications(conn, vendor_id)) == 1


@pytest.mark.asyncio
async def test_webhook_redelivery_is_acknowledged(
    app: FastAPI, db_engine: Engine, intent: tuple[UUID, str], vendor_id: UUID
) -> None:
    _, intent_id = intent

    first = await post_event(app, make_event("payment_intent.succeeded", {"id": intent_id}))
    second = await post_event(app, make_event("payment_intent.succeeded", {"id": intent_id}))

    assert first.status_code == second.status_code == 200
    with db_engine.connect() as conn:
        assert len(list_notifications(conn, vendor_id)) == 1


@pytest.mark.asyncio
async def test_webhook_unknown_booking_and_event_type_are_acknowledged(app: FastAPI) -> None:
    unknown = await post_event(app, make_event("payment_intent.succeeded", {"id": "pi_nope"}))
    unhandled = await post_event(app, make_event("invoice.paid", {"id": "in_1"}))

    assert unknown.status_code == 200
    assert unhandled.status_code == 200


@pytest.mark.asyncio
async def test_webhook_side_effect_failure_requests_retry(
    app: FastAPI, intent: tuple[UUID, str]
) -> None:
    _, intent_id = intent
    with patch(
        "golocal_spaces.services.payment_events.PaymentEventDispatcher.dispatch",
        side_effect=SideEffectError("Webhook side effects failed", failed=["notify_vendor"]),
    ):
        response = await post_event(app, make_event("payment_intent.succeeded", {"id": intent_id}))

    assert response.status_code == 500
    assert response.json() == {"error": "Webhook processing failed"}


@pytest.mark.asyncio
async def test_webhook_unexpected_error_requests_retry(app: FastAPI) -> None:
    with patch(
        "golocal_spaces.services.payment_events.PaymentEventDispatcher.dispatch",
        side_effect=RuntimeError("boom"),
    ):
        response = await post_event(app, make_event("payment_intent.succeeded", {"id": "pi_1"}))

    assert response.status_code == 500
    assert response.json() == {"error": "Webhook processing failed"}
