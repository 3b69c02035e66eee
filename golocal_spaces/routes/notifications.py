from typing import Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from golocal_spaces.db.readers.notifications import list_notifications
from golocal_spaces.db.writers.notifications import mark_notification_read
from golocal_spaces.dependencies import get_db_engine
from golocal_spaces.errors import MarketplaceError, NotFoundError
from golocal_spaces.routes._helpers import success
from golocal_spaces.schemas.notifications import NotificationReadPayload

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/notifications")
def get_notifications(
    user_id: UUID = Query(...),
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """List a user's notifications, newest first."""
    try:
        with db.connect() as conn:
            rows = list_notifications(conn, user_id, unread_only=unread_only, limit=limit)
        return success(rows)
    except Exception as e:
        logger.exception("notification_list_failed", user_id=str(user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch notifications")


@router.post("/notifications/{notification_id}/read")
def read_notification(
    notification_id: UUID,
    payload: NotificationReadPayload,
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Mark one of the user's notifications read."""
    try:
        with db.begin() as conn:
            updated = mark_notification_read(conn, notification_id, payload.user_id)
        if not updated:
            raise NotFoundError("Notification not found")
        return {"success": True, "message": "Notification marked as read"}
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception(
            "notification_update_failed", notification_id=str(notification_id), error=str(e)
        )
        raise HTTPException(status_code=500, detail="Failed to update notification")
