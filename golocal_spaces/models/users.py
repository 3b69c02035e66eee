"""SQLAlchemy model for marketplace users (landlords and vendors)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid, text
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base


class User(Base):
    """
    ORM model for a marketplace user profile.

    Authentication is handled by the identity provider; this row holds the
    profile and the Stripe Connect payout account mirrored from the processor.
    stripe_onboarding_complete is True once charges and payouts are enabled.
    """

    __tablename__ = "users"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    user_type = Column(String, nullable=False)
    profile_image_url = Column(String, nullable=True)
    verified = Column(Boolean, nullable=False, server_default=text("false"), default=False)
    stripe_account_id = Column(String, nullable=True, unique=True)
    stripe_onboarding_complete = Column(
        Boolean, nullable=False, server_default=text("false"), default=False
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
