"""Integration tests for the notification routes."""

from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from golocal_spaces.services.notifications import NotificationEmitter

NOTIFICATIONS = "/api/v1/notifications"


@pytest.fixture
def notification_id(db_engine: Engine, vendor_id: UUID, client: TestClient) -> str:
    NotificationEmitter(db_engine).notify(vendor_id, "booking_confirmed", "Booking Confirmed", "Hi")
    rows = client.get(NOTIFICATIONS, params={"user_id": str(vendor_id)}).json()["data"]
    return rows[0]["id"]


@pytest.mark.integration
def test_list_and_mark_read(client: TestClient, notification_id: str, vendor_id: UUID) -> None:
    unread = client.get(NOTIFICATIONS, params={"user_id": str(vendor_id), "unread_only": True})
    assert [n["id"] for n in unread.json()["data"]] == [notification_id]

    response = client.post(
        f"{NOTIFICATIONS}/{notification_id}/read", json={"user_id": str(vendor_id)}
    )
    assert response.json() == {"success": True, "message": "Notification marked as read"}

    unread = client.get(NOTIFICATIONS, params={"user_id": str(vendor_id), "unread_only": True})
    assert unread.json()["data"] == []
    everything = client.get(NOTIFICATIONS, params={"user_id": str(vendor_id)}).json()["data"]
    assert everything[0]["is_read"] is True


@pytest.mark.integration
def test_cannot_mark_someone_elses_notification(
    client: TestClient, notification_id: str, landlord_id: UUID
) -> None:
    response = client.post(
        f"{NOTIFICATIONS}/{notification_id}/read", json={"user_id": str(landlord_id)}
    )

    assert response.status_code == 404


@pytest.mark.integration
def test_mark_missing_notification(client: TestClient, vendor_id: UUID) -> None:
    response = client.post(f"{NOTIFICATIONS}/{uuid4()}/read", json={"user_id": str(vendor_id)})

    assert response.status_code == 404
    assert response.json()["message"] == "Notification not found"
