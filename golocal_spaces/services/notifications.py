"""Notification Emitter: user-facing notification records for lifecycle transitions."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from golocal_spaces.db.writers.notifications import insert_notification

logger = structlog.get_logger(__name__)


class NotificationEmitter:
    """
    Writes notifications in their own transaction.

    notify() never raises: a failed write is logged and reported through the
    return value, so it can be queued on a BestEffortQueue without ever failing
    the operation that triggered it.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def notify(
        self,
        user_id: UUID,
        notification_type: str,
        title: str,
        message: str,
        related_id: Optional[UUID] = None,
        dedup_key: Optional[str] = None,
    ) -> bool:
        """
        Insert a notification for a user.

        Args:
            user_id: Recipient
            notification_type: NotificationType value
            title: Short title
            message: Body text
            related_id: Entity the notification refers to (usually a booking)
            dedup_key: When set, repeated calls with the same key store one row

        Returns:
            bool: True if the notification is stored (including an earlier
            delivery with the same dedup_key), False if the write failed
        """
        try:
            with self.engine.begin() as conn:
                inserted = insert_notification(
                    conn,
                    user_id=user_id,
                    notification_type=notification_type,
                    title=title,
                    message=message,
                    related_id=related_id,
                    dedup_key=dedup_key,
                )
        except SQLAlchemyError as e:
            logger.error(
                "notification_failed",
                user_id=str(user_id),
                notification_type=notification_type,
                related_id=str(related_id) if related_id else None,
                error=str(e),
            )
            return False

        if inserted:
            logger.info(
                "notification_created",
                user_id=str(user_id),
                notification_type=notification_type,
                related_id=str(related_id) if related_id else None,
            )
        else:
            logger.debug("notification_deduplicated", dedup_key=dedup_key)
        return True
