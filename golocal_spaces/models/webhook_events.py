"""SQLAlchemy model for the webhook idempotency ledger."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base


class WebhookEvent(Base):
    """
    One row per (booking, charge reference, event type) the processor told us about.

    The row is inserted in the same transaction as the booking status change,
    so the unique constraint is what makes a redelivery a no-op. status moves
    from "applied" to "processed" once ledger and notification writes succeed.
    transition_applied records whether the guarded booking update matched.
    """

    __tablename__ = "webhook_events"
    __table_args__ = (
        UniqueConstraint(
            "booking_id", "charge_ref", "event_type", name="uq_webhook_events_idempotency_key"
        ),
        {"schema": SCHEMA},
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, nullable=False, index=True)
    charge_ref = Column(String, nullable=False)
    event_type = Column(String, nullable=False)
    provider_event_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default="applied")
    transition_applied = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    processed_at = Column(DateTime(timezone=True), nullable=True)
