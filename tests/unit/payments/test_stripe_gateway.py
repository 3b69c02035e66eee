"""
Unit tests for StripeGateway.

SDK calls are patched on the stripe resource classes; nothing reaches the network.
"""

import json
import time
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe

from conftest import WEBHOOK_SECRET, make_event, sign_payload
from golocal_spaces.errors import PaymentProviderError, SignatureError
from golocal_spaces.payments.gateway import NOT_CONFIGURED, StripeGateway


@pytest.fixture
def gateway() -> StripeGateway:
    return StripeGateway(
        api_key="sk_test_123", webhook_secret=WEBHOOK_SECRET, app_url="https://app.example.com/"
    )


@pytest.mark.unit
def test_open_authorization_sends_cents(gateway: StripeGateway) -> None:
    intent = SimpleNamespace(id="pi_123", client_secret="pi_123_secret_456")
    with patch.object(stripe.PaymentIntent, "create", return_value=intent) as create:
        authorization = gateway.open_authorization(Decimal("1500.00"), "usd", {"space_id": "s1"})

    assert authorization.id == "pi_123"
    assert authorization.client_secret == "pi_123_secret_456"
    assert authorization.amount_cents == 150000
    kwargs = create.call_args.kwargs
    assert kwargs["amount"] == 150000
    assert kwargs["currency"] == "usd"
    assert kwargs["metadata"] == {"space_id": "s1"}
    assert kwargs["automatic_payment_methods"] == {"enabled": True}
    assert kwargs["api_key"] == "sk_test_123"


@pytest.mark.unit
def test_sdk_errors_become_provider_errors(gateway: StripeGateway) -> None:
    with patch.object(
        stripe.PaymentIntent, "create", side_effect=stripe.APIConnectionError("Network down")
    ):
        with pytest.raises(PaymentProviderError, match="Network down"):
            gateway.open_authorization(Decimal("10.00"), "usd", {})


@pytest.mark.unit
def test_missing_key_fails_without_calling_stripe() -> None:
    gateway = StripeGateway(api_key=None, webhook_secret=None, app_url="https://app.example.com")

    with patch.object(stripe.PaymentIntent, "create") as create:
        with pytest.raises(PaymentProviderError, match=NOT_CONFIGURED):
            gateway.open_authorization(Decimal("10.00"), "usd", {})
    create.assert_not_called()


@pytest.mark.unit
def test_cancel_authorization(gateway: StripeGateway) -> None:
    with patch.object(stripe.PaymentIntent, "cancel") as cancel:
        gateway.cancel_authorization("pi_123")

    cancel.assert_called_once_with("pi_123", api_key="sk_test_123")


@pytest.mark.unit
def test_refund_full_and_partial(gateway: StripeGateway) -> None:
    with patch.object(stripe.Refund, "create", return_value=SimpleNamespace(id="re_1")) as create:
        assert gateway.refund("pi_123") == "re_1"
        gateway.refund("pi_123", Decimal("25.50"))

    full, partial = create.call_args_list
    assert full.kwargs == {"payment_intent": "pi_123", "api_key": "sk_test_123"}
    assert partial.kwargs["amount"] == 2550


@pytest.mark.unit
def test_create_connect_account(gateway: StripeGateway) -> None:
    with patch.object(stripe.Account, "create", return_value=SimpleNamespace(id="acct_1")) as create:
        assert gateway.create_connect_account("lena@example.com") == "acct_1"

    kwargs = create.call_args.kwargs
    assert kwargs["type"] == "express"
    assert kwargs["email"] == "lena@example.com"
    assert kwargs["capabilities"]["transfers"] == {"requested": True}


@pytest.mark.unit
def test_onboarding_link_uses_app_url(gateway: StripeGateway) -> None:
    link = SimpleNamespace(url="https://connect.stripe.com/setup/e/acct_1")
    with patch.object(stripe.AccountLink, "create", return_value=link) as create:
        assert gateway.create_onboarding_link("acct_1") == link.url

    kwargs = create.call_args.kwargs
    assert kwargs["refresh_url"] == "https://app.example.com/dashboard?stripe_refresh=true"
    assert kwargs["return_url"] == "https://app.example.com/dashboard?stripe_connected=true"
    assert kwargs["type"] == "account_onboarding"


@pytest.mark.unit
def test_account_status_from_object_and_dict(gateway: StripeGateway) -> None:
    account = SimpleNamespace(
        id="acct_1", charges_enabled=True, payouts_enabled=True, details_submitted=True
    )
    with patch.object(stripe.Account, "retrieve", return_value=account):
        status = gateway.retrieve_account("acct_1")
    assert status.onboarding_complete is True

    partial = StripeGateway.account_status({"id": "acct_2", "charges_enabled": True})
    assert partial.account_id == "acct_2"
    assert partial.payouts_enabled is False
    assert partial.onboarding_complete is False


# -----------------------------------------------------------------------------
# Webhook verification
# -----------------------------------------------------------------------------


@pytest.mark.unit
def test_verify_event_parses_signed_payload(gateway: StripeGateway) -> None:
    payload = make_event("payment_intent.succeeded", {"id": "pi_123"}, event_id="evt_1")

    event = gateway.verify_event(payload.encode("utf-8"), sign_payload(payload))

    assert event.id == "evt_1"
    assert event.type == "payment_intent.succeeded"
    assert event.data_object == {"id": "pi_123"}


@pytest.mark.unit
def test_verify_event_rejects_wrong_secret(gateway: StripeGateway) -> None:
    payload = make_event("payment_intent.succeeded", {"id": "pi_123"})

    with pytest.raises(SignatureError, match="verification failed"):
        gateway.verify_event(payload.encode("utf-8"), sign_payload(payload, "whsec_other"))


@pytest.mark.unit
def test_verify_event_rejects_stale_timestamp(gateway: StripeGateway) -> None:
    payload = make_event("payment_intent.succeeded", {"id": "pi_123"})
    stale = int(time.time()) - 3600

    with pytest.raises(SignatureError):
        gateway.verify_event(payload.encode("utf-8"), sign_payload(payload, timestamp=stale))


@pytest.mark.unit
def test_verify_event_requires_signature(gateway: StripeGateway) -> None:
    with pytest.raises(SignatureError, match="No signature"):
        gateway.verify_event(b"{}", None)


@pytest.mark.unit
def test_verify_event_rejects_non_event_body(gateway: StripeGateway) -> None:
    payload = json.dumps({"hello": "world"})

    with pytest.raises(SignatureError, match="not an event"):
        gateway.verify_event(payload.encode("utf-8"), sign_payload(payload))


@pytest.mark.unit
def test_verify_event_without_secret_is_not_configured() -> None:
    gateway = StripeGateway(api_key="sk_test_123", webhook_secret=None, app_url="https://app")

    with pytest.raises(PaymentProviderError, match=NOT_CONFIGURED):
        gateway.verify_event(b"{}", "t=1,v1=abc")
