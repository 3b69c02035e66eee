"""
Process-wide SQLAlchemy engine.

The API hands it to components through ``golocal_spaces.dependencies.get_db_engine``;
scripts import it directly.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from golocal_spaces.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,  # drop connections the server closed while idle
    pool_recycle=3600,
)


def check_engine_health(db_engine: Engine) -> bool:
    """Return True when a trivial query succeeds on ``db_engine``."""
    try:
        with db_engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return False
    return True
