# models/bookings.py

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base


class Booking(Base):
    """
    ORM model for a vendor's reservation of a space over [start_date, end_date).

    landlord_id is copied from the space owner when the booking is created.
    booking_status and payment_status move independently; after webhook
    processing a confirmed booking always has payment_status "paid".
    payment_intent_id references the processor authorization and is how
    webhook events find their booking.
    """

    __tablename__ = "bookings"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    space_id = Column(
        Uuid, ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vendor_id = Column(Uuid, ForeignKey(f"{SCHEMA}.users.id"), nullable=False, index=True)
    landlord_id = Column(Uuid, ForeignKey(f"{SCHEMA}.users.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    platform_fee = Column(Numeric(10, 2), nullable=False)
    booking_status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")
    payment_intent_id = Column(String, nullable=True, unique=True)
    special_requests = Column(Text, nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
