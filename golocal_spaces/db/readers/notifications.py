from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection

from golocal_spaces.models.notifications import Notification


def list_notifications(
    conn: Connection, user_id: UUID, unread_only: bool = False, limit: int = 50
) -> list[dict[str, Any]]:
    """
    List a user's notifications, newest first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        user_id (UUID): Recipient.
        unread_only (bool): Only return notifications not yet read.
        limit (int): Maximum rows.

    Returns:
        list[dict]: Notification rows.
    """
    stmt = select(Notification.__table__).where(Notification.user_id == user_id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id).limit(limit)
    return [dict(row) for row in conn.execute(stmt).mappings()]
