from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import update
from sqlalchemy.engine import Connection

from golocal_spaces.db.writers._upsert import insert_ignore_conflict
from golocal_spaces.models.transactions import Transaction
from golocal_spaces.utils.datetime import utc_now


def insert_transaction(
    conn: Connection,
    booking_id: UUID,
    payer_id: UUID,
    payee_id: UUID,
    amount: Decimal,
    platform_fee: Decimal,
    charge_ref: str,
    transaction_type: str,
    transaction_status: str,
    processed_at: Optional[datetime] = None,
) -> bool:
    """
    Insert a transaction unless one already exists for (booking, charge_ref, type).

    Args:
        conn: Active database connection (within transaction)
        booking_id: Booking the money movement belongs to
        payer_id: User paying
        payee_id: User receiving
        amount: Amount moved
        platform_fee: Platform share of the amount
        charge_ref: Processor reference
        transaction_type: payment, refund or payout
        transaction_status: pending, completed or failed
        processed_at: When the processor settled it

    Returns:
        bool: True if inserted, False if it was already recorded
    """
    now = utc_now()
    return insert_ignore_conflict(
        conn,
        Transaction,
        {
            "id": uuid4(),
            "booking_id": booking_id,
            "payer_id": payer_id,
            "payee_id": payee_id,
            "amount": amount,
            "platform_fee": platform_fee,
            "charge_ref": charge_ref,
            "transaction_type": transaction_type,
            "transaction_status": transaction_status,
            "processed_at": processed_at,
            "created_at": now,
            "updated_at": now,
        },
        conflict_columns=["booking_id", "charge_ref", "transaction_type"],
    )


def finalize_transaction(
    conn: Connection,
    booking_id: UUID,
    charge_ref: str,
    status: str,
    processed_at: Optional[datetime] = None,
    from_statuses: tuple[str, ...] = ("pending",),
) -> bool:
    """
    Move a payment transaction to a terminal status.

    Matches on booking_id AND charge_ref so a booking with several charge
    attempts never has the wrong attempt updated. Only rows in from_statuses
    are touched.

    Returns:
        bool: True if a transaction was finalized
    """
    values = {"transaction_status": status, "updated_at": utc_now()}
    if processed_at is not None:
        values["processed_at"] = processed_at

    result = conn.execute(
        update(Transaction)
        .where(Transaction.booking_id == booking_id)
        .where(Transaction.charge_ref == charge_ref)
        .where(Transaction.transaction_type == "payment")
        .where(Transaction.transaction_status.in_(from_statuses))
        .values(**values)
    )
    return bool(result.rowcount)
