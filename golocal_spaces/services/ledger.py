"""
Transaction Ledger.

Records each money movement tied to a booking. Every call that changes a
transaction matches on booking_id AND charge_ref. Completed transactions are
never changed again; a failed payment only moves to completed when its
PaymentIntent is retried and succeeds. All operations are safe to repeat:
recording the same (booking, charge_ref, type) twice stores one row.

Each method takes an optional connection so callers can include the write in
their own transaction; without one the ledger opens its own.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Connection, Engine

from golocal_spaces.db.writers.transactions import finalize_transaction, insert_transaction
from golocal_spaces.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


class TransactionLedger:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @contextmanager
    def _connection(self, conn: Optional[Connection]) -> Iterator[Connection]:
        if conn is not None:
            yield conn
            return
        with self.engine.begin() as own_conn:
            yield own_conn

    def record_pending(
        self,
        booking_id: UUID,
        payer_id: UUID,
        payee_id: UUID,
        amount: Decimal,
        platform_fee: Decimal,
        charge_ref: str,
        conn: Optional[Connection] = None,
    ) -> bool:
        """
        Record the pending payment for a newly opened authorization.

        Returns:
            bool: True if recorded now, False if it already existed
        """
        with self._connection(conn) as c:
            inserted = insert_transaction(
                c,
                booking_id=booking_id,
                payer_id=payer_id,
                payee_id=payee_id,
                amount=amount,
                platform_fee=platform_fee,
                charge_ref=charge_ref,
                transaction_type="payment",
                transaction_status="pending",
            )
        logger.info(
            "transaction_recorded",
            booking_id=str(booking_id),
            charge_ref=charge_ref,
            transaction_type="payment",
            inserted=inserted,
        )
        return inserted

    def mark_completed(
        self,
        booking_id: UUID,
        charge_ref: str,
        processed_at: Optional[datetime] = None,
        conn: Optional[Connection] = None,
    ) -> bool:
        """pending or failed -> completed for the payment of (booking_id, charge_ref)."""
        with self._connection(conn) as c:
            changed = finalize_transaction(
                c,
                booking_id,
                charge_ref,
                "completed",
                processed_at or utc_now(),
                from_statuses=("pending", "failed"),
            )
        logger.info(
            "transaction_completed", booking_id=str(booking_id), charge_ref=charge_ref, changed=changed
        )
        return changed

    def mark_failed(
        self, booking_id: UUID, charge_ref: str, conn: Optional[Connection] = None
    ) -> bool:
        """pending -> failed for the payment of (booking_id, charge_ref)."""
        with self._connection(conn) as c:
            changed = finalize_transaction(c, booking_id, charge_ref, "failed")
        logger.info(
            "transaction_failed", booking_id=str(booking_id), charge_ref=charge_ref, changed=changed
        )
        return changed

    def record_refund(
        self,
        original: Mapping[str, Any],
        refunded_amount: Decimal,
        refund_ref: Optional[str] = None,
        processed_at: Optional[datetime] = None,
        conn: Optional[Connection] = None,
    ) -> bool:
        """
        Record a completed refund against an original payment.

        The payer and payee are flipped relative to the original: the money
        moves from the landlord back to the vendor. The refund carries no
        platform fee of its own.

        Args:
            original: The original payment transaction row
            refunded_amount: Amount refunded; may be less than the original (partial)
            refund_ref: Reference of this refund; defaults to the original charge_ref
            processed_at: When the processor settled the refund
            conn: Optional connection to write within

        Returns:
            bool: True if recorded now, False if this refund was already recorded
        """
        charge_ref = refund_ref or original["charge_ref"]
        with self._connection(conn) as c:
            inserted = insert_transaction(
                c,
                booking_id=original["booking_id"],
                payer_id=original["payee_id"],
                payee_id=original["payer_id"],
                amount=refunded_amount,
                platform_fee=Decimal("0.00"),
                charge_ref=charge_ref,
                transaction_type="refund",
                transaction_status="completed",
                processed_at=processed_at or utc_now(),
            )
        logger.info(
            "refund_recorded",
            booking_id=str(original["booking_id"]),
            charge_ref=charge_ref,
            amount=str(refunded_amount),
            inserted=inserted,
        )
        return inserted
