from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection, Engine

from golocal_spaces.models.spaces import Space, SpaceAmenities, SpaceImage
from golocal_spaces.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_space(conn: Connection, owner_id: UUID, data: dict[str, Any]) -> UUID:
    """
    Insert an active space for an owner.

    Args:
        conn: Active database connection (within transaction)
        owner_id: Landlord user ID
        data: Space columns (title, address, rates, ...)

    Returns:
        UUID: ID of the new space
    """
    now = utc_now()
    space_id = uuid4()
    conn.execute(
        insert(Space).values(
            {
                **data,
                "id": space_id,
                "owner_id": owner_id,
                "status": "active",
                "created_at": now,
                "updated_at": now,
            }
        )
    )
    return space_id


def insert_amenities(engine: Engine, space_id: UUID, amenities: dict[str, bool]) -> None:
    """Insert the amenity flags row for a space in its own transaction."""
    with engine.begin() as conn:
        conn.execute(
            insert(SpaceAmenities).values(
                {**amenities, "id": uuid4(), "space_id": space_id, "created_at": utc_now()}
            )
        )
    logger.info("space_amenities_inserted", space_id=str(space_id))


def insert_images(engine: Engine, space_id: UUID, image_urls: list[str]) -> None:
    """
    Insert image rows for a space in its own transaction.

    The first URL is the primary image; display_order follows list order.
    """
    if not image_urls:
        return

    now = utc_now()
    rows = [
        {
            "id": uuid4(),
            "space_id": space_id,
            "image_url": url,
            "is_primary": index == 0,
            "display_order": index,
            "created_at": now,
        }
        for index, url in enumerate(image_urls)
    ]
    with engine.begin() as conn:
        conn.execute(insert(SpaceImage), rows)
    logger.info("space_images_inserted", space_id=str(space_id), count=len(rows))


def update_space(conn: Connection, space_id: UUID, data: dict[str, Any]) -> None:
    """
    Update space fields.

    Args:
        conn: SQLAlchemy DB connection
        space_id: Space ID
        data: Fields to update (only the ones provided by the owner)
    """
    data["updated_at"] = utc_now()
    conn.execute(update(Space).where(Space.id == space_id).values(**data))


def set_space_status(conn: Connection, space_id: UUID, status: str) -> None:
    conn.execute(
        update(Space).where(Space.id == space_id).values(status=status, updated_at=utc_now())
    )
