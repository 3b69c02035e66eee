"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

from unittest.mock import Mock, patch

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from conftest import FakeGateway
from golocal_spaces.dependencies import (
    get_booking_service,
    get_db_engine,
    get_object_storage,
    get_payment_event_dispatcher,
    get_payment_gateway,
    get_upload_service,
)
from golocal_spaces.services.bookings import BookingService
from golocal_spaces.services.payment_events import PaymentEventDispatcher


@pytest.mark.unit
def test_get_db_engine_yields_process_engine() -> None:
    first = next(get_db_engine())
    second = next(get_db_engine())

    assert isinstance(first, Engine)
    assert first is second


@pytest.mark.unit
def test_gateway_is_built_from_config() -> None:
    with patch("golocal_spaces.dependencies.STRIPE_SECRET_KEY", "sk_test_cfg"), patch(
        "golocal_spaces.dependencies.STRIPE_WEBHOOK_SECRET", "whsec_cfg"
    ):
        gateway = get_payment_gateway()

    assert gateway.api_key == "sk_test_cfg"
    assert gateway.webhooks_configured is True


@pytest.mark.unit
def test_services_receive_overridden_collaborators(db_engine: Engine) -> None:
    app = FastAPI()
    fake = FakeGateway()

    @app.get("/wiring")
    def wiring(
        bookings: BookingService = Depends(get_booking_service),
        dispatcher: PaymentEventDispatcher = Depends(get_payment_event_dispatcher),
    ) -> dict[str, bool]:
        return {
            "engine": bookings.engine is db_engine and dispatcher.engine is db_engine,
            "gateway": bookings.gateway is fake and dispatcher.gateway is fake,
            "payouts": dispatcher.payouts.gateway is fake,
        }

    app.dependency_overrides[get_db_engine] = lambda: db_engine
    app.dependency_overrides[get_payment_gateway] = lambda: fake

    response = TestClient(app).get("/wiring")

    assert response.json() == {"engine": True, "gateway": True, "payouts": True}


@pytest.mark.unit
def test_upload_service_uses_overridden_storage() -> None:
    app = FastAPI()
    storage = Mock()

    @app.get("/bucket")
    def bucket(uploads=Depends(get_upload_service)) -> dict[str, bool]:  # type: ignore[no-untyped-def]
        return {"same": uploads.storage is storage}

    app.dependency_overrides[get_object_storage] = lambda: storage

    assert TestClient(app).get("/bucket").json() == {"same": True}
