"""
Unit tests for middleware components.
"""

from __future__ import annotations

import pytest
import structlog
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from golocal_spaces.middleware import RequestIDMiddleware


@pytest.fixture
def traced_app() -> FastAPI:
    """App echoing the request id from request.state and the structlog context."""
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, str]:
        bound = structlog.contextvars.get_contextvars()
        return {"state": request.state.request_id, "logged": bound.get("request_id", "")}

    return app


@pytest.fixture
def traced_client(traced_app: FastAPI) -> TestClient:
    return TestClient(traced_app)


@pytest.mark.unit
def test_request_id_is_returned_as_header(traced_client: TestClient) -> None:
    response = traced_client.get("/echo")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36  # UUID length


@pytest.mark.unit
def test_header_state_and_log_context_agree(traced_client: TestClient) -> None:
    response = traced_client.get("/echo")

    body = response.json()
    assert body["state"] == response.headers["X-Request-ID"]
    assert body["logged"] == response.headers["X-Request-ID"]


@pytest.mark.unit
def test_request_id_is_unbound_after_response(traced_client: TestClient) -> None:
    traced_client.get("/echo")

    assert "request_id" not in structlog.contextvars.get_contextvars()


@pytest.mark.unit
def test_request_ids_are_unique(traced_client: TestClient) -> None:
    first = traced_client.get("/echo").headers["X-Request-ID"]
    second = traced_client.get("/echo").headers["X-Request-ID"]

    assert first != second
