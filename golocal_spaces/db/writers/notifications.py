from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from golocal_spaces.db.writers._upsert import insert_ignore_conflict
from golocal_spaces.models.notifications import Notification
from golocal_spaces.utils.datetime import utc_now


def insert_notification(
    conn: Connection,
    user_id: UUID,
    notification_type: str,
    title: str,
    message: str,
    related_id: Optional[UUID] = None,
    dedup_key: Optional[str] = None,
) -> bool:
    """
    Insert a notification; with a dedup_key, at most one per key is ever stored.

    Returns:
        bool: True if a row was inserted, False if the dedup_key already existed
    """
    row = {
        "id": uuid4(),
        "user_id": user_id,
        "notification_type": notification_type,
        "title": title,
        "message": message,
        "related_id": related_id,
        "is_read": False,
        "dedup_key": dedup_key,
        "created_at": utc_now(),
    }
    if dedup_key is None:
        conn.execute(insert(Notification).values(row))
        return True
    return insert_ignore_conflict(conn, Notification, row, conflict_columns=["dedup_key"])


def mark_notification_read(conn: Connection, notification_id: UUID, user_id: UUID) -> bool:
    """Mark one of the user's notifications read. False if it is not theirs or missing."""
    result = conn.execute(
        update(Notification)
        .where(Notification.id == notification_id)
        .where(Notification.user_id == user_id)
        .values(is_read=True)
    )
    return bool(result.rowcount)
