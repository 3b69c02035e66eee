"""Alembic environment for the golocal schema."""

from logging.config import fileConfig
from typing import Any

from sqlalchemy import engine_from_config, pool
from sqlalchemy.schema import CreateSchema

from alembic import context  # type: ignore[attr-defined]
from golocal_spaces.config import DATABASE_URL, SCHEMA
from golocal_spaces.models.base import Base
from golocal_spaces.models.bookings import Booking  # noqa: F401
from golocal_spaces.models.notifications import Notification  # noqa: F401
from golocal_spaces.models.spaces import Space, SpaceAmenities, SpaceImage  # noqa: F401
from golocal_spaces.models.transactions import Transaction  # noqa: F401
from golocal_spaces.models.users import User  # noqa: F401
from golocal_spaces.models.webhook_events import WebhookEvent  # noqa: F401

alembic_config = context.config
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

alembic_config.set_main_option("sqlalchemy.url", DATABASE_URL)


def only_marketplace_schema(object_: Any, name: str, type_: str, reflected: bool, compare_to: Any) -> bool:
    """Keep autogenerate away from tables outside the golocal schema."""
    return getattr(object_, "schema", SCHEMA) == SCHEMA


def migration_options() -> dict[str, Any]:
    return {
        "target_metadata": Base.metadata,
        "include_schemas": True,
        "include_object": only_marketplace_schema,
        "version_table_schema": SCHEMA,
    }


def migrate_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=alembic_config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    """Apply migrations over a live connection, creating the schema first."""
    connectable = engine_from_config(
        alembic_config.get_section(alembic_config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        # alembic_version lives inside the schema
        connection.execute(CreateSchema(SCHEMA, if_not_exists=True))
        connection.commit()

        context.configure(connection=connection, **migration_options())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
