"""
Booking Record Manager.

Request flow for a new booking:

    validate -> price (services.pricing) -> open authorization (gateway)
        -> persist pending booking + pending payment transaction -> notify landlord

The external authorization and the local insert cannot share a transaction.
When the local write fails after the authorization was opened, the
authorization is cancelled; if that cancel fails too the intent id is logged
as orphaned_authorization and counted for out-of-band reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from golocal_spaces.config import CURRENCY, REJECT_OVERLAPPING_BOOKINGS, REQUIRE_PAYOUT_ONBOARDING
from golocal_spaces.db.readers.bookings import (
    get_booking,
    get_booking_details,
    has_confirmed_overlap,
    list_bookings,
)
from golocal_spaces.db.readers.spaces import get_space
from golocal_spaces.db.readers.users import get_user
from golocal_spaces.db.writers.bookings import (
    cancel_pending_booking,
    insert_booking,
    set_cancellation_reason,
)
from golocal_spaces.errors import (
    BookingConflictError,
    MarketplaceError,
    NotFoundError,
    PaymentProviderError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from golocal_spaces.metrics import booking_failures, bookings_created, orphaned_authorizations
from golocal_spaces.payments.gateway import PaymentAuthorization, StripeGateway
from golocal_spaces.services.ledger import TransactionLedger
from golocal_spaces.services.notifications import NotificationEmitter
from golocal_spaces.services.pricing import PriceQuote, calculate_price
from golocal_spaces.services.side_effects import BestEffortQueue

logger = structlog.get_logger(__name__)

BOOKING_ROLES = ("vendor", "landlord")


@dataclass
class BookingCreated:
    booking: dict[str, Any]
    authorization: PaymentAuthorization
    quote: PriceQuote
    side_effects: BestEffortQueue


@dataclass
class BookingCancelled:
    booking: dict[str, Any]
    refund_id: Optional[str]
    side_effects: BestEffortQueue


class BookingService:
    """
    Creates, lists, reads and cancels bookings.

    Args:
        engine: SQLAlchemy engine
        gateway: Stripe gateway used to open, cancel and refund authorizations
        ledger: Transaction ledger for the pending payment row
        notifier: Notification emitter for best-effort notifications
        reject_overlap: Reject requests overlapping a confirmed booking
        require_onboarding: Reject requests when the landlord has not finished
            payout onboarding
        currency: Currency for authorizations
    """

    def __init__(
        self,
        engine: Engine,
        gateway: StripeGateway,
        ledger: TransactionLedger,
        notifier: NotificationEmitter,
        reject_overlap: bool = REJECT_OVERLAPPING_BOOKINGS,
        require_onboarding: bool = REQUIRE_PAYOUT_ONBOARDING,
        currency: str = CURRENCY,
    ) -> None:
        self.engine = engine
        self.gateway = gateway
        self.ledger = ledger
        self.notifier = notifier
        self.reject_overlap = reject_overlap
        self.require_onboarding = require_onboarding
        self.currency = currency

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_booking(
        self,
        space_id: Optional[UUID],
        vendor_id: Optional[UUID],
        start_date: Optional[date],
        end_date: Optional[date],
        special_requests: Optional[str] = None,
    ) -> BookingCreated:
        """
        Create a pending booking with an open payment authorization.

        Validation and not-found errors are raised before any external call or
        write.

        Returns:
            BookingCreated: Booking row, authorization handle, price quote and
            the queued notification for the landlord

        Raises:
            ValidationError: Missing identifiers, invalid dates, unpriceable space,
                unavailable space, or own-space booking
            BookingConflictError: Dates overlap a confirmed booking
            NotFoundError: Space or vendor does not exist
            PaymentProviderError: The authorization could not be opened
            PersistenceError: The booking could not be stored
        """
        try:
            return self._create_booking(space_id, vendor_id, start_date, end_date, special_requests)
        except MarketplaceError as e:
            booking_failures.labels(reason=e.code).inc()
            raise

    def _create_booking(
        self,
        space_id: Optional[UUID],
        vendor_id: Optional[UUID],
        start_date: Optional[date],
        end_date: Optional[date],
        special_requests: Optional[str],
    ) -> BookingCreated:
        if not space_id or not vendor_id or not start_date or not end_date:
            raise ValidationError("Missing required fields")
        if end_date <= start_date:
            raise ValidationError("end_date must be after start_date")

        with self.engine.connect() as conn:
            space = get_space(conn, space_id)
            if not space:
                raise NotFoundError("Space not found")
            if not get_user(conn, vendor_id):
                raise NotFoundError("Vendor not found")
            if space["status"] != "active":
                raise ValidationError("Space is not available for booking")
            if space["owner_id"] == vendor_id:
                raise ValidationError("You cannot book your own space")
            if self.reject_overlap and has_confirmed_overlap(conn, space_id, start_date, end_date):
                raise BookingConflictError("Space is already booked for the requested dates")
            if self.require_onboarding:
                landlord = get_user(conn, space["owner_id"])
                if not landlord or not landlord["stripe_onboarding_complete"]:
                    raise ValidationError("This space's owner cannot accept payments yet")

        quote = calculate_price(space, start_date, end_date)
        landlord_id = space["owner_id"]

        authorization = self.gateway.open_authorization(
            quote.total_price,
            self.currency,
            metadata={
                "space_id": str(space_id),
                "vendor_id": str(vendor_id),
                "landlord_id": str(landlord_id),
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
        )

        try:
            with self.engine.begin() as conn:
                booking = insert_booking(
                    conn,
                    space_id=space_id,
                    vendor_id=vendor_id,
                    landlord_id=landlord_id,
                    start_date=start_date,
                    end_date=end_date,
                    total_price=quote.total_price,
                    platform_fee=quote.platform_fee,
                    payment_intent_id=authorization.id,
                    special_requests=special_requests,
                )
                self.ledger.record_pending(
                    booking["id"],
                    payer_id=vendor_id,
                    payee_id=landlord_id,
                    amount=quote.total_price,
                    platform_fee=quote.platform_fee,
                    charge_ref=authorization.id,
                    conn=conn,
                )
        except SQLAlchemyError as e:
            logger.error(
                "booking_persist_failed",
                space_id=str(space_id),
                vendor_id=str(vendor_id),
                payment_intent_id=authorization.id,
                error=str(e),
            )
            self._release_authorization(authorization.id)
            raise PersistenceError("Failed to create booking") from e

        bookings_created.inc()
        logger.info(
            "booking_created",
            booking_id=str(booking["id"]),
            space_id=str(space_id),
            vendor_id=str(vendor_id),
            total_price=str(quote.total_price),
            payment_intent_id=authorization.id,
        )

        side_effects = BestEffortQueue()
        side_effects.add(
            "notify_booking_request",
            self.notifier.notify,
            landlord_id,
            "booking_request",
            "New Booking Request",
            f"You have a new booking request for {space['title']}",
            related_id=booking["id"],
            dedup_key=f"{booking['id']}:booking_request",
        )
        return BookingCreated(
            booking=booking, authorization=authorization, quote=quote, side_effects=side_effects
        )

    def _release_authorization(self, payment_intent_id: str) -> None:
        """Cancel an authorization that has no local booking."""
        try:
            self.gateway.cancel_authorization(payment_intent_id)
        except PaymentProviderError as e:
            orphaned_authorizations.inc()
            logger.error(
                "orphaned_authorization", payment_intent_id=payment_intent_id, error=e.message
            )

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_bookings(
        self,
        user_id: UUID,
        role: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """List a user's bookings newest first; role narrows to one side."""
        if role is not None and role not in BOOKING_ROLES:
            raise ValidationError("role must be 'vendor' or 'landlord'")
        with self.engine.connect() as conn:
            return list_bookings(conn, user_id, role=role, limit=limit, offset=offset)

    def get_booking(self, booking_id: UUID) -> dict[str, Any]:
        with self.engine.connect() as conn:
            booking = get_booking_details(conn, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    # -------------------------------------------------------------------------
    # Cancel
    # -------------------------------------------------------------------------

    def cancel_booking(
        self, booking_id: UUID, actor_id: UUID, reason: Optional[str] = None
    ) -> BookingCancelled:
        """
        Cancel a booking on behalf of its vendor or landlord.

        A pending booking is cancelled immediately: the authorization is
        cancelled, the booking becomes cancelled (vendor) or declined
        (landlord) and the pending payment is marked failed. A confirmed
        booking is refunded at the processor; the charge.refunded webhook then
        completes the transition.

        Raises:
            NotFoundError: Booking does not exist
            PermissionDeniedError: Actor is not a party to the booking
            ValidationError: Booking is in a state that cannot be cancelled
            PaymentProviderError: The processor call failed (nothing changed locally)
        """
        with self.engine.connect() as conn:
            booking = get_booking(conn, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")

        if actor_id == booking["vendor_id"]:
            actor_role, counterparty = "vendor", booking["landlord_id"]
        elif actor_id == booking["landlord_id"]:
            actor_role, counterparty = "landlord", booking["vendor_id"]
        else:
            raise PermissionDeniedError("Only the vendor or landlord can cancel this booking")

        status = booking["booking_status"]
        side_effects = BestEffortQueue()

        if status == "pending":
            self.gateway.cancel_authorization(booking["payment_intent_id"])
            new_status = "cancelled" if actor_role == "vendor" else "declined"
            with self.engine.begin() as conn:
                changed = cancel_pending_booking(conn, booking_id, new_status, reason)
                if changed:
                    self.ledger.mark_failed(booking_id, booking["payment_intent_id"], conn=conn)
            if not changed:
                raise ValidationError("Booking can no longer be cancelled")

            notification_type = "booking_cancelled" if actor_role == "vendor" else "booking_declined"
            title = "Booking Cancelled" if actor_role == "vendor" else "Booking Declined"
            side_effects.add(
                f"notify_{notification_type}",
                self.notifier.notify,
                counterparty,
                notification_type,
                title,
                f"Booking #{booking_id} was {new_status}.",
                related_id=booking_id,
                dedup_key=f"{booking_id}:{notification_type}",
            )
            logger.info(
                "booking_cancelled", booking_id=str(booking_id), status=new_status, actor=actor_role
            )
            return BookingCancelled(
                booking=self.get_booking(booking_id), refund_id=None, side_effects=side_effects
            )

        if status == "confirmed":
            refund_id = self.gateway.refund(booking["payment_intent_id"])
            with self.engine.begin() as conn:
                set_cancellation_reason(conn, booking_id, reason)
            logger.info(
                "booking_refund_requested",
                booking_id=str(booking_id),
                refund_id=refund_id,
                actor=actor_role,
            )
            return BookingCancelled(
                booking=self.get_booking(booking_id), refund_id=refund_id, side_effects=side_effects
            )

        raise ValidationError(f"Cannot cancel a booking that is {status}")
