"""Landlord payout accounts (Stripe Connect Express) and their onboarding state."""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine

from golocal_spaces.db.readers.users import get_user
from golocal_spaces.db.writers.users import set_onboarding_complete, set_stripe_account_id
from golocal_spaces.errors import NotFoundError
from golocal_spaces.payments.gateway import ConnectAccountStatus, StripeGateway
from golocal_spaces.services.notifications import NotificationEmitter
from golocal_spaces.services.side_effects import BestEffortQueue

logger = structlog.get_logger(__name__)


class PayoutAccountService:
    def __init__(
        self, engine: Engine, gateway: StripeGateway, notifier: NotificationEmitter
    ) -> None:
        self.engine = engine
        self.gateway = gateway
        self.notifier = notifier

    def _get_user(self, user_id: UUID) -> dict[str, Any]:
        with self.engine.connect() as conn:
            user = get_user(conn, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def start_onboarding(self, user_id: UUID) -> dict[str, str]:
        """
        Create the user's Connect account if needed and return an onboarding link.

        Returns:
            dict: {"url": <onboarding url>, "account_id": <acct_...>}
        """
        user = self._get_user(user_id)
        account_id = user["stripe_account_id"]

        if not account_id:
            account_id = self.gateway.create_connect_account(user["email"])
            with self.engine.begin() as conn:
                set_stripe_account_id(conn, user_id, account_id)

        url = self.gateway.create_onboarding_link(account_id)
        logger.info("onboarding_link_created", user_id=str(user_id), account_id=account_id)
        return {"url": url, "account_id": account_id}

    def get_status(self, user_id: UUID) -> dict[str, Any]:
        """
        Read the user's Connect account from the processor and mirror its state.

        Returns:
            dict: connected flag plus capability flags when an account exists
        """
        user = self._get_user(user_id)
        if not user["stripe_account_id"]:
            return {"connected": False, "onboarding_complete": False}

        status = self.gateway.retrieve_account(user["stripe_account_id"])
        side_effects = BestEffortQueue()
        self.sync_account(user_id, status, side_effects)
        side_effects.drain()

        return {
            "connected": True,
            "account_id": status.account_id,
            "charges_enabled": status.charges_enabled,
            "payouts_enabled": status.payouts_enabled,
            "details_submitted": status.details_submitted,
            "onboarding_complete": status.onboarding_complete,
        }

    def sync_account(
        self, user_id: UUID, status: ConnectAccountStatus, side_effects: BestEffortQueue
    ) -> bool:
        """
        Mirror onboarding completion onto the user.

        When onboarding is complete a stripe_connected notification is queued;
        its dedup key limits it to the first completion.

        Returns:
            bool: True if the stored flag changed
        """
        with self.engine.begin() as conn:
            changed = set_onboarding_complete(conn, user_id, status.onboarding_complete)

        if changed:
            logger.info(
                "onboarding_status_changed",
                user_id=str(user_id),
                account_id=status.account_id,
                onboarding_complete=status.onboarding_complete,
            )

        if status.onboarding_complete:
            side_effects.add(
                "notify_stripe_connected",
                self.notifier.notify,
                user_id,
                "stripe_connected",
                "Payment Setup Complete",
                "Your Stripe account is now set up and ready to receive payments!",
                dedup_key=f"{user_id}:stripe_connected",
            )
        return changed
