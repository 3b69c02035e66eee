"""
Booking writes.

Every status change is a guarded UPDATE: it only matches rows in the state the
transition starts from, and returns whether it matched. Callers use that to
decide whether follow-up effects apply.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, insert, or_, update
from sqlalchemy.engine import Connection

from golocal_spaces.models.bookings import Booking
from golocal_spaces.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_booking(
    conn: Connection,
    space_id: UUID,
    vendor_id: UUID,
    landlord_id: UUID,
    start_date: date,
    end_date: date,
    total_price: Decimal,
    platform_fee: Decimal,
    payment_intent_id: str,
    special_requests: Optional[str] = None,
) -> dict[str, Any]:
    """
    Insert a pending booking linked to a processor authorization.

    Args:
        conn: Active database connection (within transaction)
        space_id: Booked space
        vendor_id: Requesting vendor
        landlord_id: Space owner at request time
        start_date: First day (inclusive)
        end_date: Last day (exclusive)
        total_price: Quoted total
        platform_fee: Platform share of the total
        payment_intent_id: Processor authorization reference
        special_requests: Free text from the vendor

    Returns:
        dict: The inserted booking row
    """
    now = utc_now()
    row = {
        "id": uuid4(),
        "space_id": space_id,
        "vendor_id": vendor_id,
        "landlord_id": landlord_id,
        "start_date": start_date,
        "end_date": end_date,
        "total_price": total_price,
        "platform_fee": platform_fee,
        "booking_status": "pending",
        "payment_status": "pending",
        "payment_intent_id": payment_intent_id,
        "special_requests": special_requests,
        "cancellation_reason": None,
        "paid_at": None,
        "created_at": now,
        "updated_at": now,
    }
    conn.execute(insert(Booking).values(row))
    return row


def _transition(
    conn: Connection,
    booking_id: UUID,
    from_statuses: tuple[str, ...],
    values: dict[str, Any],
) -> bool:
    values["updated_at"] = utc_now()
    result = conn.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .where(Booking.booking_status.in_(from_statuses))
        .values(**values)
    )
    return bool(result.rowcount)


def confirm_paid_booking(conn: Connection, booking_id: UUID, paid_at: datetime) -> bool:
    """
    pending -> confirmed, payment_status paid.

    A booking cancelled by a failed payment is confirmed as well: the vendor
    may retry the same PaymentIntent, and its success means the funds were
    captured. Bookings cancelled or declined by a person stay cancelled.
    """
    values = {
        "booking_status": "confirmed",
        "payment_status": "paid",
        "paid_at": paid_at,
        "updated_at": utc_now(),
    }
    result = conn.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .where(
            or_(
                Booking.booking_status == "pending",
                and_(Booking.booking_status == "cancelled", Booking.payment_status == "failed"),
            )
        )
        .values(**values)
    )
    return bool(result.rowcount)


def fail_pending_booking(conn: Connection, booking_id: UUID) -> bool:
    """pending -> cancelled, payment_status failed."""
    return _transition(
        conn,
        booking_id,
        ("pending",),
        {"booking_status": "cancelled", "payment_status": "failed"},
    )


def refund_booking(conn: Connection, booking_id: UUID) -> bool:
    """
    pending/confirmed/cancelled -> cancelled, payment_status refunded.

    A completed booking keeps its status and only has payment_status set to
    refunded. Returns True whenever the booking took the refund.
    """
    if _transition(
        conn,
        booking_id,
        ("pending", "confirmed", "cancelled"),
        {"booking_status": "cancelled", "payment_status": "refunded"},
    ):
        return True
    return _transition(conn, booking_id, ("completed",), {"payment_status": "refunded"})


def cancel_pending_booking(
    conn: Connection, booking_id: UUID, status: str, reason: Optional[str]
) -> bool:
    """pending -> cancelled or declined, before any funds were captured."""
    return _transition(
        conn,
        booking_id,
        ("pending",),
        {"booking_status": status, "cancellation_reason": reason},
    )


def set_cancellation_reason(conn: Connection, booking_id: UUID, reason: Optional[str]) -> None:
    conn.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .values(cancellation_reason=reason, updated_at=utc_now())
    )


def complete_finished_bookings(conn: Connection, today: date) -> int:
    """
    Mark confirmed, paid bookings that have ended as completed.

    Args:
        conn: SQLAlchemy DB connection
        today: Bookings with end_date on or before this day are finished

    Returns:
        int: Number of bookings completed
    """
    result = conn.execute(
        update(Booking)
        .where(Booking.booking_status == "confirmed")
        .where(Booking.payment_status == "paid")
        .where(Booking.end_date <= today)
        .values(booking_status="completed", updated_at=utc_now())
    )
    logger.info("bookings_completed", count=result.rowcount, as_of=today.isoformat())
    return int(result.rowcount)
