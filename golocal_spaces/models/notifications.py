"""SQLAlchemy model for user-facing notifications."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base


class Notification(Base):
    """
    One-way informational record addressed to a user.

    dedup_key is set for notifications emitted by webhook processing so a
    redelivered event cannot notify the same party twice.
    """

    __tablename__ = "notifications"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid, ForeignKey(f"{SCHEMA}.users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notification_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Uuid, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    dedup_key = Column(String, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
