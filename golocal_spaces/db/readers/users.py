from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection

from golocal_spaces.models.users import User

PARTY_SUMMARY_COLUMNS = (
    User.id,
    User.first_name,
    User.last_name,
    User.email,
    User.phone,
    User.profile_image_url,
)


def get_user(conn: Connection, user_id: UUID) -> Optional[dict[str, Any]]:
    """
    Fetch a user profile by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_id (UUID): User ID.

    Returns:
        Optional[dict[str, Any]]: User row as a dict, or None if not found.
    """
    row = conn.execute(select(User.__table__).where(User.id == user_id)).mappings().first()
    return dict(row) if row else None


def user_email_exists(conn: Connection, email: str) -> bool:
    result = conn.execute(select(User.id).where(User.email == email))
    return result.first() is not None


def get_user_by_stripe_account(conn: Connection, account_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch the user owning a Stripe Connect account.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (str): Stripe Connect account ID (acct_...).

    Returns:
        Optional[dict[str, Any]]: User row or None.
    """
    row = (
        conn.execute(select(User.__table__).where(User.stripe_account_id == account_id))
        .mappings()
        .first()
    )
    return dict(row) if row else None


def get_party_summaries(conn: Connection, user_ids: Iterable[UUID]) -> dict[UUID, dict[str, Any]]:
    """
    Fetch public contact summaries for a set of users in one query.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        user_ids (Iterable[UUID]): IDs to look up; duplicates are fine.

    Returns:
        dict[UUID, dict]: Summary dict keyed by user id (missing ids are absent).
    """
    ids = set(user_ids)
    if not ids:
        return {}
    rows = conn.execute(select(*PARTY_SUMMARY_COLUMNS).where(User.id.in_(ids))).mappings()
    return {row["id"]: dict(row) for row in rows}
