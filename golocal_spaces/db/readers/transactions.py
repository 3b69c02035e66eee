from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from golocal_spaces.models.transactions import Transaction
from golocal_spaces.utils.money import quantize, to_decimal


def get_payment_transaction(
    conn: Connection, booking_id: UUID, charge_ref: str
) -> Optional[dict[str, Any]]:
    """
    Fetch the payment transaction recorded for a booking and charge reference.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (UUID): Booking the payment belongs to.
        charge_ref (str): PaymentIntent ID the payment was recorded under.

    Returns:
        Optional[dict[str, Any]]: Transaction row or None.
    """
    row = (
        conn.execute(
            select(Transaction.__table__)
            .where(Transaction.booking_id == booking_id)
            .where(Transaction.charge_ref == charge_ref)
            .where(Transaction.transaction_type == "payment")
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def refunded_total(
    conn: Connection, booking_id: UUID, exclude_charge_ref: Optional[str] = None
) -> Decimal:
    """Sum of completed refunds on a booking, optionally leaving one refund out."""
    stmt = (
        select(func.coalesce(func.sum(Transaction.amount), 0))
        .where(Transaction.booking_id == booking_id)
        .where(Transaction.transaction_type == "refund")
        .where(Transaction.transaction_status == "completed")
    )
    if exclude_charge_ref is not None:
        stmt = stmt.where(Transaction.charge_ref != exclude_charge_ref)
    return quantize(to_decimal(conn.execute(stmt).scalar_one()) or Decimal("0"))


def list_booking_transactions(conn: Connection, booking_id: UUID) -> list[dict[str, Any]]:
    rows = conn.execute(
        select(Transaction.__table__)
        .where(Transaction.booking_id == booking_id)
        .order_by(Transaction.created_at, Transaction.id)
    ).mappings()
    return [dict(row) for row in rows]
