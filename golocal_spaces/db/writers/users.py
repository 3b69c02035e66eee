import logging
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from golocal_spaces.models.users import User
from golocal_spaces.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def insert_user(conn: Connection, data: dict[str, Any]) -> UUID:
    """
    Insert a user profile.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict): Profile fields (email, first_name, last_name, user_type, ...).

    Returns:
        UUID: ID of the new user.
    """
    now = utc_now()
    user_id = data.get("id") or uuid4()
    conn.execute(
        insert(User).values(
            {
                **data,
                "id": user_id,
                "verified": data.get("verified", False),
                "stripe_onboarding_complete": False,
                "created_at": now,
                "updated_at": now,
            }
        )
    )
    logger.info("Inserted user_id=%s", user_id)
    return user_id


def set_stripe_account_id(conn: Connection, user_id: UUID, account_id: str) -> None:
    """
    Store the Stripe Connect account created for a user.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        user_id (UUID): User ID.
        account_id (str): Stripe Connect account ID.
    """
    conn.execute(
        update(User)
        .where(User.id == user_id)
        .values(stripe_account_id=account_id, updated_at=utc_now())
    )
    logger.info("Stored stripe_account_id=%s for user_id=%s", account_id, user_id)


def set_onboarding_complete(conn: Connection, user_id: UUID, complete: bool) -> bool:
    """
    Mirror the processor's onboarding state onto the user.

    Only writes when the value actually changes.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        user_id (UUID): User ID.
        complete (bool): True when charges and payouts are enabled.

    Returns:
        bool: True if the stored flag changed.
    """
    result = conn.execute(
        update(User)
        .where(User.id == user_id)
        .where(User.stripe_onboarding_complete.is_distinct_from(complete))
        .values(stripe_onboarding_complete=complete, updated_at=utc_now())
    )
    return bool(result.rowcount)
