"""
Webhook Dispatcher: drives bookings forward from Stripe events.

    payment_intent.succeeded        pending   -> confirmed (payment paid); also
                                    recovers a booking its failed payment cancelled
    payment_intent.payment_failed   pending   -> cancelled (payment failed)
    charge.refunded                 confirmed -> cancelled (payment refunded);
                                    completed bookings only record the refund
    account.updated                 mirrors landlord onboarding state

Processing a delivery:

1. verify the signature (nothing is read or written before this succeeds)
2. resolve the booking from the PaymentIntent id; unknown ones are
   acknowledged and ignored
3. claim the idempotency key (booking_id, charge_ref, event_type) and apply
   the booking transition in the same transaction. charge_ref is the
   PaymentIntent id, or "<charge id>:<refunded cents>" for refunds so every
   partial refund gets its own key
4. run ledger bookkeeping and notifications as best-effort side effects
5. mark the key processed once every side effect succeeded

A side effect failure leaves the key "applied" and raises SideEffectError, so
the processor redelivers. The redelivery skips step 3 (the transition is never
applied twice) and re-runs the side effects, which are themselves idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Connection, Engine

from golocal_spaces.db.readers.bookings import get_booking_by_payment_intent
from golocal_spaces.db.readers.spaces import get_space
from golocal_spaces.db.readers.transactions import get_payment_transaction, refunded_total
from golocal_spaces.db.readers.users import get_user_by_stripe_account
from golocal_spaces.db.writers.bookings import (
    confirm_paid_booking,
    fail_pending_booking,
    refund_booking,
)
from golocal_spaces.db.writers.webhook_events import (
    claim_event,
    mark_event_processed,
    record_transition,
)
from golocal_spaces.errors import SideEffectError, SignatureError
from golocal_spaces.metrics import webhook_events
from golocal_spaces.payments.gateway import PaymentEvent, StripeGateway
from golocal_spaces.services.ledger import TransactionLedger
from golocal_spaces.services.notifications import NotificationEmitter
from golocal_spaces.services.payouts import PayoutAccountService
from golocal_spaces.services.side_effects import BestEffortQueue
from golocal_spaces.utils.datetime import utc_now
from golocal_spaces.utils.money import from_cents

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of one delivery.

    outcome: processed, duplicate, ignored (no matching booking or user),
    skipped (booking not in the state the event transitions from) or
    unhandled (event type not handled).
    """

    event_type: str
    outcome: str
    booking_id: Optional[UUID] = None


class PaymentEventDispatcher:
    def __init__(
        self,
        engine: Engine,
        gateway: StripeGateway,
        ledger: TransactionLedger,
        notifier: NotificationEmitter,
        payouts: PayoutAccountService,
    ) -> None:
        self.engine = engine
        self.gateway = gateway
        self.ledger = ledger
        self.notifier = notifier
        self.payouts = payouts
        self._handlers: dict[str, Callable[[PaymentEvent], DispatchResult]] = {
            "payment_intent.succeeded": self._payment_succeeded,
            "payment_intent.payment_failed": self._payment_failed,
            "charge.refunded": self._charge_refunded,
            "account.updated": self._account_updated,
        }

    def dispatch(self, payload: bytes, signature: Optional[str]) -> DispatchResult:
        """
        Verify and process one webhook delivery.

        Args:
            payload: Raw request body
            signature: Stripe-Signature header

        Returns:
            DispatchResult: What happened to the event

        Raises:
            SignatureError: Authentication failed; nothing was processed
            PaymentProviderError: No webhook secret configured
            SideEffectError: The transition is applied but follow-up writes failed
        """
        try:
            event = self.gateway.verify_event(payload, signature)
        except SignatureError:
            webhook_events.labels(event_type="unknown", outcome="rejected").inc()
            raise

        logger.info("webhook_received", event_id=event.id, event_type=event.type)

        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info("webhook_unhandled_event", event_id=event.id, event_type=event.type)
            webhook_events.labels(event_type=event.type, outcome="unhandled").inc()
            return DispatchResult(event_type=event.type, outcome="unhandled")

        try:
            result = handler(event)
        except Exception:
            webhook_events.labels(event_type=event.type, outcome="failed").inc()
            raise

        webhook_events.labels(event_type=event.type, outcome=result.outcome).inc()
        return result

    # -------------------------------------------------------------------------
    # Shared flow
    # -------------------------------------------------------------------------

    def _ignored(self, event: PaymentEvent, reason: str, **context: Any) -> DispatchResult:
        logger.warning(
            "webhook_event_ignored",
            event_id=event.id,
            event_type=event.type,
            reason=reason,
            **context,
        )
        return DispatchResult(event_type=event.type, outcome="ignored")

    def _apply(
        self,
        event: PaymentEvent,
        booking: dict[str, Any],
        charge_ref: str,
        transition: Callable[[Connection], bool],
        side_effects: BestEffortQueue,
    ) -> DispatchResult:
        booking_id = booking["id"]

        with self.engine.begin() as conn:
            claim = claim_event(conn, booking_id, charge_ref, event.type, event.id)
            if claim.status == "processed":
                applied = None
            elif claim.claimed:
                applied = transition(conn)
                record_transition(conn, booking_id, charge_ref, event.type, applied)
            else:
                applied = claim.transition_applied

        if applied is None:
            logger.info(
                "webhook_duplicate",
                event_type=event.type,
                booking_id=str(booking_id),
                charge_ref=charge_ref,
            )
            return DispatchResult(event_type=event.type, outcome="duplicate", booking_id=booking_id)

        if not applied:
            logger.warning(
                "webhook_transition_skipped",
                event_type=event.type,
                booking_id=str(booking_id),
                booking_status=booking["booking_status"],
            )
        else:
            logger.info(
                "booking_transition_applied",
                event_type=event.type,
                booking_id=str(booking_id),
                charge_ref=charge_ref,
                redelivery=not claim.claimed,
            )
            failures = side_effects.drain()
            if failures:
                raise SideEffectError(
                    "Webhook side effects failed", failed=[failure.name for failure in failures]
                )

        with self.engine.begin() as conn:
            mark_event_processed(conn, booking_id, charge_ref, event.type)

        return DispatchResult(
            event_type=event.type,
            outcome="processed" if applied else "skipped",
            booking_id=booking_id,
        )

    def _lookup(self, payment_intent_id: Optional[str]) -> tuple[Optional[dict[str, Any]], str]:
        if not payment_intent_id:
            return None, ""
        with self.engine.connect() as conn:
            booking = get_booking_by_payment_intent(conn, payment_intent_id)
            space = get_space(conn, booking["space_id"]) if booking else None
        title = space["title"] if space else "your space"
        return booking, title

    def _notify(
        self,
        side_effects: BestEffortQueue,
        booking_id: UUID,
        charge_ref: str,
        event_type: str,
        role: str,
        user_id: UUID,
        notification_type: str,
        title: str,
        message: str,
    ) -> None:
        side_effects.add(
            f"notify_{role}_{notification_type}",
            self.notifier.notify,
            user_id,
            notification_type,
            title,
            message,
            related_id=booking_id,
            dedup_key=f"{booking_id}:{charge_ref}:{event_type}:{role}",
        )

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _payment_succeeded(self, event: PaymentEvent) -> DispatchResult:
        intent_id = event.data_object.get("id")
        booking, space_title = self._lookup(intent_id)
        if not booking:
            return self._ignored(event, "booking_not_found", payment_intent_id=intent_id)

        booking_id = booking["id"]
        paid_at = utc_now()
        if booking["booking_status"] == "cancelled" and booking["payment_status"] == "failed":
            logger.info(
                "payment_retry_succeeded", booking_id=str(booking_id), payment_intent_id=intent_id
            )

        def complete_payment() -> None:
            self.ledger.mark_completed(booking_id, intent_id, paid_at)

        side_effects = BestEffortQueue()
        side_effects.add("ledger_mark_completed", complete_payment)
        self._notify(
            side_effects, booking_id, intent_id, event.type, "vendor", booking["vendor_id"],
            "payment_confirmation",
            "Payment Successful",
            f"Your payment for {space_title} has been confirmed. Booking is now active.",
        )
        self._notify(
            side_effects, booking_id, intent_id, event.type, "landlord", booking["landlord_id"],
            "booking_confirmed",
            "Booking Confirmed",
            f"Payment received for {space_title}. The booking is now confirmed.",
        )

        return self._apply(
            event,
            booking,
            intent_id,
            lambda conn: confirm_paid_booking(conn, booking_id, paid_at),
            side_effects,
        )

    def _payment_failed(self, event: PaymentEvent) -> DispatchResult:
        intent_id = event.data_object.get("id")
        booking, space_title = self._lookup(intent_id)
        if not booking:
            return self._ignored(event, "booking_not_found", payment_intent_id=intent_id)

        booking_id = booking["id"]

        def fail_payment() -> None:
            self.ledger.mark_failed(booking_id, intent_id)

        side_effects = BestEffortQueue()
        side_effects.add("ledger_mark_failed", fail_payment)
        self._notify(
            side_effects, booking_id, intent_id, event.type, "vendor", booking["vendor_id"],
            "payment_failed",
            "Payment Failed",
            f"Payment for {space_title} failed. Please update your payment method and try again.",
        )
        self._notify(
            side_effects, booking_id, intent_id, event.type, "landlord", booking["landlord_id"],
            "booking_cancelled",
            "Booking Cancelled",
            f"The booking request for {space_title} was cancelled because payment failed.",
        )

        return self._apply(
            event,
            booking,
            intent_id,
            lambda conn: fail_pending_booking(conn, booking_id),
            side_effects,
        )

    def _charge_refunded(self, event: PaymentEvent) -> DispatchResult:
        charge = event.data_object
        intent_id = charge.get("payment_intent")
        booking, _ = self._lookup(intent_id)
        if not booking:
            return self._ignored(
                event, "booking_not_found", charge_id=charge.get("id"), payment_intent_id=intent_id
            )

        booking_id = booking["id"]
        # amount_refunded is cumulative over the charge, so each delivery with a
        # new total is a separate refund of the difference
        refunded_cents = int(charge.get("amount_refunded") or 0)
        refund_ref = f"{charge.get('id') or intent_id}:{refunded_cents}"

        with self.engine.connect() as conn:
            original = get_payment_transaction(conn, booking_id, intent_id)
            already_refunded = refunded_total(conn, booking_id, exclude_charge_ref=refund_ref)
        if original is None:
            original = {
                "booking_id": booking_id,
                "payer_id": booking["vendor_id"],
                "payee_id": booking["landlord_id"],
                "charge_ref": intent_id,
            }
        refund_amount = from_cents(refunded_cents) - already_refunded

        side_effects = BestEffortQueue()
        if refund_amount > 0:

            def record_refund() -> None:
                self.ledger.record_refund(original, refund_amount, refund_ref=refund_ref)

            side_effects.add("ledger_record_refund", record_refund)
            self._notify(
                side_effects, booking_id, refund_ref, event.type, "vendor", booking["vendor_id"],
                "refund_processed",
                "Refund Processed",
                f"Your refund of {_format_amount(refund_amount)} for booking #{booking_id} has been processed.",
            )
            self._notify(
                side_effects, booking_id, refund_ref, event.type, "landlord", booking["landlord_id"],
                "refund_processed",
                "Refund Issued",
                f"A refund of {_format_amount(refund_amount)} has been issued for booking #{booking_id}.",
            )
        else:
            logger.info(
                "refund_already_recorded",
                booking_id=str(booking_id),
                charge_ref=refund_ref,
                refunded_total=str(already_refunded),
            )

        return self._apply(
            event,
            booking,
            refund_ref,
            lambda conn: refund_booking(conn, booking_id),
            side_effects,
        )

    def _account_updated(self, event: PaymentEvent) -> DispatchResult:
        status = self.gateway.account_status(event.data_object)
        with self.engine.connect() as conn:
            user = get_user_by_stripe_account(conn, status.account_id)
        if not user:
            return self._ignored(event, "user_not_found", account_id=status.account_id)

        side_effects = BestEffortQueue()
        self.payouts.sync_account(user["id"], status, side_effects)
        failures = side_effects.drain()
        if failures:
            raise SideEffectError(
                "Webhook side effects failed", failed=[failure.name for failure in failures]
            )
        return DispatchResult(event_type=event.type, outcome="processed")


def _format_amount(amount: Decimal) -> str:
    return f"${amount:,.2f}"
