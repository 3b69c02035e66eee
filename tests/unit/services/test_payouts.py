"""Unit tests for PayoutAccountService (Connect onboarding)."""

from uuid import UUID, uuid4

import pytest
from sqlalchemy.engine import Engine

from conftest import FakeGateway, create_user
from golocal_spaces.db.readers.notifications import list_notifications
from golocal_spaces.db.readers.users import get_user
from golocal_spaces.errors import NotFoundError
from golocal_spaces.payments.gateway import ConnectAccountStatus
from golocal_spaces.services.payouts import PayoutAccountService
from golocal_spaces.services.side_effects import BestEffortQueue


@pytest.mark.unit
def test_start_onboarding_creates_account_once(
    payouts: PayoutAccountService, gateway: FakeGateway, db_engine: Engine, landlord_id: UUID
) -> None:
    first = payouts.start_onboarding(landlord_id)
    second = payouts.start_onboarding(landlord_id)

    assert first["account_id"] == second["account_id"]
    assert first["url"] == f"https://connect.stripe.test/setup/{first['account_id']}"
    assert list(gateway.accounts) == [first["account_id"]]
    with db_engine.connect() as conn:
        assert get_user(conn, landlord_id)["stripe_account_id"] == first["account_id"]


@pytest.mark.unit
def test_start_onboarding_unknown_user(payouts: PayoutAccountService) -> None:
    with pytest.raises(NotFoundError):
        payouts.start_onboarding(uuid4())


@pytest.mark.unit
def test_status_without_account(payouts: PayoutAccountService, landlord_id: UUID) -> None:
    assert payouts.get_status(landlord_id) == {"connected": False, "onboarding_complete": False}


@pytest.mark.unit
def test_status_mirrors_completed_onboarding(
    payouts: PayoutAccountService, gateway: FakeGateway, db_engine: Engine, landlord_id: UUID
) -> None:
    account_id = payouts.start_onboarding(landlord_id)["account_id"]
    gateway.accounts[account_id] = ConnectAccountStatus(account_id, True, True, True)

    status = payouts.get_status(landlord_id)

    assert status["connected"] is True
    assert status["onboarding_complete"] is True
    assert status["charges_enabled"] is True
    with db_engine.connect() as conn:
        assert get_user(conn, landlord_id)["stripe_onboarding_complete"] is True
        notes = list_notifications(conn, landlord_id)
    assert [n["notification_type"] for n in notes] == ["stripe_connected"]


@pytest.mark.unit
def test_payouts_disabled_is_not_complete(
    payouts: PayoutAccountService, gateway: FakeGateway, landlord_id: UUID
) -> None:
    account_id = payouts.start_onboarding(landlord_id)["account_id"]
    gateway.accounts[account_id] = ConnectAccountStatus(account_id, True, False, True)

    assert payouts.get_status(landlord_id)["onboarding_complete"] is False


@pytest.mark.unit
def test_sync_account_reports_changes(payouts: PayoutAccountService, db_engine: Engine) -> None:
    user_id = create_user(db_engine, "landlord")
    complete = ConnectAccountStatus("acct_1", True, True, True)

    first_queue, second_queue = BestEffortQueue(), BestEffortQueue()
    assert payouts.sync_account(user_id, complete, first_queue) is True
    assert payouts.sync_account(user_id, complete, second_queue) is False

    # Both queue the notification; the dedup key keeps it to one row
    assert first_queue.names == second_queue.names == ["notify_stripe_connected"]
    first_queue.drain()
    second_queue.drain()
    with db_engine.connect() as conn:
        assert len(list_notifications(conn, user_id)) == 1


@pytest.mark.unit
def test_sync_account_can_revert_completion(payouts: PayoutAccountService, db_engine: Engine) -> None:
    user_id = create_user(db_engine, "landlord")
    payouts.sync_account(user_id, ConnectAccountStatus("acct_1", True, True, True), BestEffortQueue())

    queue = BestEffortQueue()
    changed = payouts.sync_account(user_id, ConnectAccountStatus("acct_1", False, True, True), queue)

    assert changed is True
    assert len(queue) == 0
    with db_engine.connect() as conn:
        assert get_user(conn, user_id)["stripe_onboarding_complete"] is False
