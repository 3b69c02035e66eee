"""SQLAlchemy model for money movements tied to a booking."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base


class Transaction(Base):
    """
    ORM model for one payment, refund or payout.

    charge_ref is the PaymentIntent id for a payment, and
    "<charge id>:<cumulative refunded cents>" for a refund, so each partial
    refund is its own row. The unique constraint keeps a redelivered event
    from inserting the same movement twice.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(
            "booking_id", "charge_ref", "transaction_type", name="uq_transactions_booking_charge_type"
        ),
        {"schema": SCHEMA},
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(
        Uuid, ForeignKey(f"{SCHEMA}.bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    payer_id = Column(Uuid, ForeignKey(f"{SCHEMA}.users.id"), nullable=False)
    payee_id = Column(Uuid, ForeignKey(f"{SCHEMA}.users.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    platform_fee = Column(Numeric(10, 2), nullable=False, default=0)
    charge_ref = Column(String, nullable=True, index=True)
    transaction_type = Column(String, nullable=False)
    transaction_status = Column(String, nullable=False, default="pending")
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
