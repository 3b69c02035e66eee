"""
Payment Intent Bridge: the Stripe side of the booking lifecycle.

StripeGateway wraps the Stripe SDK calls the marketplace makes:

- PaymentIntents hold the vendor's payment for a booking
- Connect Express accounts and account links onboard landlords for payouts
- Refunds return money for cancelled, already-paid bookings
- WebhookSignature authenticates inbound events

Every call is timed and counted, and SDK errors are mapped to
PaymentProviderError so callers never depend on stripe exception types.
The gateway is constructed with its keys; there is no module-level client.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator, Optional

import stripe
import structlog

from golocal_spaces.errors import PaymentProviderError, SignatureError
from golocal_spaces.metrics import payment_latency, payment_requests
from golocal_spaces.utils.money import to_cents

logger = structlog.get_logger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300
NOT_CONFIGURED = "Payment system not configured"


@dataclass(frozen=True)
class PaymentAuthorization:
    """Handle for an opened PaymentIntent."""

    id: str
    client_secret: str
    amount_cents: int
    currency: str


@dataclass(frozen=True)
class ConnectAccountStatus:
    """Capability flags of a landlord's Connect account."""

    account_id: str
    charges_enabled: bool
    payouts_enabled: bool
    details_submitted: bool

    @property
    def onboarding_complete(self) -> bool:
        return self.charges_enabled and self.payouts_enabled


@dataclass(frozen=True)
class PaymentEvent:
    """A verified webhook event."""

    id: Optional[str]
    type: str
    data_object: dict[str, Any] = field(default_factory=dict)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class StripeGateway:
    """
    Stripe client bound to one secret key.

    Args:
        api_key: Stripe secret key; None leaves payment calls failing with
            PaymentProviderError("Payment system not configured")
        webhook_secret: Signing secret for webhook endpoints
        app_url: Frontend base URL for onboarding refresh/return links
    """

    def __init__(
        self,
        api_key: Optional[str],
        webhook_secret: Optional[str],
        app_url: str,
    ) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.app_url = app_url.rstrip("/")

    @property
    def webhooks_configured(self) -> bool:
        return bool(self.webhook_secret)

    def _require_key(self) -> str:
        if not self.api_key:
            raise PaymentProviderError(NOT_CONFIGURED)
        return self.api_key

    @contextmanager
    def _call(self, operation: str, **context: Any) -> Iterator[None]:
        """Time and count one SDK call, mapping Stripe errors to PaymentProviderError."""
        start_time = time.time()
        try:
            yield
        except stripe.StripeError as e:
            payment_requests.labels(operation=operation, outcome="failure").inc()
            payment_latency.labels(operation=operation).observe(time.time() - start_time)
            message = getattr(e, "user_message", None) or str(e) or "Payment processor error"
            logger.error("payment_request_failed", operation=operation, error=message, **context)
            raise PaymentProviderError(message) from e

        payment_requests.labels(operation=operation, outcome="success").inc()
        payment_latency.labels(operation=operation).observe(time.time() - start_time)

    # -------------------------------------------------------------------------
    # Authorizations
    # -------------------------------------------------------------------------

    def open_authorization(
        self, amount: Decimal, currency: str, metadata: dict[str, str]
    ) -> PaymentAuthorization:
        """
        Create a PaymentIntent the client confirms with its client_secret.

        Args:
            amount: Amount in currency units (dollars)
            currency: ISO currency code
            metadata: Identifiers stored on the intent for reconciliation

        Returns:
            PaymentAuthorization: Intent id and client secret

        Raises:
            PaymentProviderError: Not configured, network failure or processor rejection
        """
        api_key = self._require_key()
        amount_cents = to_cents(amount)
        with self._call("payment_intent.create", amount_cents=amount_cents):
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                api_key=api_key,
            )

        logger.info("payment_intent_created", payment_intent_id=intent.id, amount_cents=amount_cents)
        return PaymentAuthorization(
            id=intent.id,
            client_secret=intent.client_secret,
            amount_cents=amount_cents,
            currency=currency,
        )

    def cancel_authorization(self, payment_intent_id: str) -> None:
        """Cancel an uncaptured PaymentIntent."""
        api_key = self._require_key()
        with self._call("payment_intent.cancel", payment_intent_id=payment_intent_id):
            stripe.PaymentIntent.cancel(payment_intent_id, api_key=api_key)
        logger.info("payment_intent_cancelled", payment_intent_id=payment_intent_id)

    def refund(self, payment_intent_id: str, amount: Optional[Decimal] = None) -> str:
        """
        Refund a captured PaymentIntent, fully or by amount.

        The resulting charge.refunded webhook drives the booking transition.

        Returns:
            str: Refund id
        """
        api_key = self._require_key()
        params: dict[str, Any] = {"payment_intent": payment_intent_id}
        if amount is not None:
            params["amount"] = to_cents(amount)

        with self._call("refund.create", payment_intent_id=payment_intent_id):
            refund = stripe.Refund.create(api_key=api_key, **params)

        logger.info("refund_requested", payment_intent_id=payment_intent_id, refund_id=refund.id)
        return refund.id

    # -------------------------------------------------------------------------
    # Connect accounts
    # -------------------------------------------------------------------------

    def create_connect_account(self, email: str) -> str:
        """
        Create an Express account for a landlord.

        Returns:
            str: Connect account id (acct_...)
        """
        api_key = self._require_key()
        with self._call("account.create"):
            account = stripe.Account.create(
                type="express",
                country="US",
                email=email,
                capabilities={
                    "card_payments": {"requested": True},
                    "transfers": {"requested": True},
                },
                business_type="individual",
                business_profile={"product_description": "Space rental marketplace"},
                api_key=api_key,
            )
        logger.info("connect_account_created", account_id=account.id)
        return account.id

    def retrieve_account(self, account_id: str) -> ConnectAccountStatus:
        api_key = self._require_key()
        with self._call("account.retrieve", account_id=account_id):
            account = stripe.Account.retrieve(account_id, api_key=api_key)
        return self.account_status(account)

    @staticmethod
    def account_status(account: Any) -> ConnectAccountStatus:
        """Build a ConnectAccountStatus from an Account object or event payload dict."""
        return ConnectAccountStatus(
            account_id=_field(account, "id"),
            charges_enabled=bool(_field(account, "charges_enabled", False)),
            payouts_enabled=bool(_field(account, "payouts_enabled", False)),
            details_submitted=bool(_field(account, "details_submitted", False)),
        )

    def create_onboarding_link(self, account_id: str) -> str:
        """
        Create a one-time onboarding URL for a Connect account.

        Returns:
            str: URL to redirect the landlord to
        """
        api_key = self._require_key()
        with self._call("account_link.create", account_id=account_id):
            link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=f"{self.app_url}/dashboard?stripe_refresh=true",
                return_url=f"{self.app_url}/dashboard?stripe_connected=true",
                type="account_onboarding",
                api_key=api_key,
            )
        return link.url

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    def verify_event(self, payload: bytes, signature: Optional[str]) -> PaymentEvent:
        """
        Authenticate a webhook delivery and parse it.

        Args:
            payload: Raw request body, exactly as received
            signature: Stripe-Signature header value

        Returns:
            PaymentEvent: The verified event

        Raises:
            PaymentProviderError: No webhook secret configured
            SignatureError: Missing or invalid signature, or unparseable body
        """
        if not self.webhook_secret:
            raise PaymentProviderError(NOT_CONFIGURED)
        if not signature:
            raise SignatureError("No signature provided")

        try:
            body = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                body, signature, self.webhook_secret, SIGNATURE_TOLERANCE_SECONDS
            )
            event = json.loads(body)
        except (stripe.SignatureVerificationError, UnicodeDecodeError, ValueError) as e:
            logger.warning("webhook_signature_invalid", error=str(e))
            raise SignatureError(f"Webhook signature verification failed: {e}") from e

        if not isinstance(event, dict) or not event.get("type"):
            raise SignatureError("Webhook payload is not an event")

        data_object = (event.get("data") or {}).get("object") or {}
        return PaymentEvent(id=event.get("id"), type=event["type"], data_object=data_object)
