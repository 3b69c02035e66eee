"""Integration tests for the user profile routes."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

USERS = "/api/v1/users"

PROFILE = {
    "email": "maria@example.com",
    "first_name": "Maria",
    "last_name": "Lopez",
    "user_type": "both",
    "phone": "+1 512 555 0100",
}


@pytest.mark.integration
def test_create_and_read_user(client: TestClient) -> None:
    response = client.post(USERS, json=PROFILE)

    assert response.status_code == 201
    user = response.json()["data"]
    assert user["email"] == "maria@example.com"
    assert user["user_type"] == "both"
    assert user["stripe_account_id"] is None
    assert user["stripe_onboarding_complete"] is False

    fetched = client.get(f"{USERS}/{user['id']}").json()["data"]
    assert fetched["first_name"] == "Maria"


@pytest.mark.integration
def test_duplicate_email_is_rejected(client: TestClient) -> None:
    client.post(USERS, json=PROFILE)

    response = client.post(USERS, json=PROFILE)

    assert response.status_code == 400
    assert response.json()["message"] == "A user with this email already exists"


@pytest.mark.integration
def test_invalid_email_is_rejected(client: TestClient) -> None:
    response = client.post(USERS, json={**PROFILE, "email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["message"].startswith("email")


@pytest.mark.integration
def test_missing_user(client: TestClient) -> None:
    response = client.get(f"{USERS}/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"
