from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.engine import Connection

from golocal_spaces.db.readers.spaces import get_spaces_by_ids
from golocal_spaces.db.readers.users import get_party_summaries
from golocal_spaces.models.bookings import Booking


def get_booking(conn: Connection, booking_id: UUID) -> Optional[dict[str, Any]]:
    """
    Fetch a booking row by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (UUID): Booking ID.

    Returns:
        Optional[dict[str, Any]]: Booking row or None if not found.
    """
    row = conn.execute(select(Booking.__table__).where(Booking.id == booking_id)).mappings().first()
    return dict(row) if row else None


def get_booking_by_payment_intent(
    conn: Connection, payment_intent_id: str
) -> Optional[dict[str, Any]]:
    """
    Fetch the booking linked to a processor authorization.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        payment_intent_id (str): Stripe PaymentIntent ID (pi_...).

    Returns:
        Optional[dict[str, Any]]: Booking row or None.
    """
    row = (
        conn.execute(
            select(Booking.__table__).where(Booking.payment_intent_id == payment_intent_id)
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def attach_details(conn: Connection, bookings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Join space, vendor and landlord summaries onto booking rows.

    Uses one query per related table regardless of how many bookings are passed.
    """
    spaces = get_spaces_by_ids(conn, [b["space_id"] for b in bookings])
    parties = get_party_summaries(
        conn, [b["vendor_id"] for b in bookings] + [b["landlord_id"] for b in bookings]
    )
    for booking in bookings:
        booking["space"] = spaces.get(booking["space_id"])
        booking["vendor"] = parties.get(booking["vendor_id"])
        booking["landlord"] = parties.get(booking["landlord_id"])
    return bookings


def get_booking_details(conn: Connection, booking_id: UUID) -> Optional[dict[str, Any]]:
    booking = get_booking(conn, booking_id)
    if not booking:
        return None
    return attach_details(conn, [booking])[0]


def list_bookings(
    conn: Connection,
    user_id: UUID,
    role: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """
    List bookings for a user, newest first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        user_id (UUID): User to list bookings for.
        role (Optional[str]): "vendor", "landlord", or None for either side.
        limit (Optional[int]): Page size, None for all.
        offset (int): Rows to skip.

    Returns:
        list[dict]: Booking rows with space and party summaries attached.
    """
    if role == "vendor":
        condition = Booking.vendor_id == user_id
    elif role == "landlord":
        condition = Booking.landlord_id == user_id
    else:
        condition = or_(Booking.vendor_id == user_id, Booking.landlord_id == user_id)

    stmt = (
        select(Booking.__table__)
        .where(condition)
        .order_by(Booking.created_at.desc(), Booking.id)
        .offset(offset)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    bookings = [dict(row) for row in conn.execute(stmt).mappings()]
    return attach_details(conn, bookings)


def has_confirmed_overlap(conn: Connection, space_id: UUID, start: date, end: date) -> bool:
    """
    Check whether a confirmed booking on the space intersects [start, end).

    Args:
        conn (Connection): SQLAlchemy DB connection.
        space_id (UUID): Space ID.
        start (date): Requested start (inclusive).
        end (date): Requested end (exclusive).

    Returns:
        bool: True if any confirmed booking overlaps.
    """
    result = conn.execute(
        select(Booking.id)
        .where(Booking.space_id == space_id)
        .where(Booking.booking_status == "confirmed")
        .where(Booking.start_date < end)
        .where(Booking.end_date > start)
        .limit(1)
    )
    return result.first() is not None
