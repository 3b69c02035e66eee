"""
Dialect-aware INSERT ... ON CONFLICT helpers.

PostgreSQL is the production store; SQLite is used for local development and
the unit test suite. Both dialects expose the same on_conflict_do_nothing API,
so writers build their statements through ``insert_for`` and stay portable.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection


def insert_for(conn: Connection, table: type) -> Any:
    """
    Return a dialect-specific insert() construct supporting ON CONFLICT.

    Args:
        conn: Active database connection
        table: SQLAlchemy ORM table class

    Returns:
        Insert statement for the connection's dialect
    """
    if conn.dialect.name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)


def insert_ignore_conflict(
    conn: Connection,
    table: type,
    row: dict[str, Any],
    conflict_columns: list[str],
) -> bool:
    """
    Insert a row unless it collides on conflict_columns.

    This is the conditional write behind every "at most once" effect: the
    unique index decides, not the order in which concurrent requests arrive.

    Args:
        conn: Active database connection (within transaction)
        table: SQLAlchemy ORM table class
        row: Column values to insert
        conflict_columns: Columns of the unique index to match on

    Returns:
        bool: True if the row was inserted, False if it already existed

    Example:
        >>> with engine.begin() as conn:
        ...     inserted = insert_ignore_conflict(
        ...         conn, Notification, {...}, conflict_columns=["dedup_key"]
        ...     )
    """
    stmt = insert_for(conn, table).values(row)
    stmt = stmt.on_conflict_do_nothing(index_elements=conflict_columns)
    result = conn.execute(stmt)
    return bool(result.rowcount)
