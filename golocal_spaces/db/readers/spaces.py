from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy import String, cast, func, select
from sqlalchemy.engine import Connection

from golocal_spaces.db.readers.users import get_party_summaries
from golocal_spaces.models.spaces import Space, SpaceAmenities, SpaceImage


@dataclass
class SpaceFilters:
    """Search filters for active spaces. None means "no filter"."""

    city: Optional[str] = None
    state: Optional[str] = None
    space_type: Optional[str] = None
    usage_type: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_size: Optional[int] = None


def get_space(conn: Connection, space_id: UUID) -> Optional[dict[str, Any]]:
    """
    Fetch a single space row.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        space_id (UUID): Space ID.

    Returns:
        Optional[dict[str, Any]]: Space row or None if not found.
    """
    row = conn.execute(select(Space.__table__).where(Space.id == space_id)).mappings().first()
    return dict(row) if row else None


def get_spaces_by_ids(conn: Connection, space_ids: Iterable[UUID]) -> dict[UUID, dict[str, Any]]:
    ids = set(space_ids)
    if not ids:
        return {}
    rows = conn.execute(select(Space.__table__).where(Space.id.in_(ids))).mappings()
    return {row["id"]: dict(row) for row in rows}


def get_space_details(conn: Connection, space_id: UUID) -> Optional[dict[str, Any]]:
    """
    Fetch a space with its amenities, ordered images and owner summary.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        space_id (UUID): Space ID.

    Returns:
        Optional[dict[str, Any]]: Space dict with "amenities", "images" and
        "owner" keys, or None if the space does not exist.
    """
    space = get_space(conn, space_id)
    if not space:
        return None

    amenities = (
        conn.execute(
            select(SpaceAmenities.__table__).where(SpaceAmenities.space_id == space_id)
        )
        .mappings()
        .first()
    )
    images = conn.execute(
        select(SpaceImage.__table__)
        .where(SpaceImage.space_id == space_id)
        .order_by(SpaceImage.display_order)
    ).mappings()
    owners = get_party_summaries(conn, [space["owner_id"]])

    space["amenities"] = dict(amenities) if amenities else None
    space["images"] = [dict(image) for image in images]
    space["owner"] = owners.get(space["owner_id"])
    return space


def _filter_conditions(filters: SpaceFilters) -> list[Any]:
    conditions: list[Any] = [Space.status == "active"]
    if filters.city:
        conditions.append(Space.city.icontains(filters.city, autoescape=True))
    if filters.state:
        conditions.append(Space.state == filters.state)
    if filters.space_type:
        conditions.append(Space.space_type == filters.space_type)
    if filters.usage_type:
        # JSON array stored as text on both dialects: ["food_truck", "retail"]
        conditions.append(
            cast(Space.allowed_usage_types, String).contains(
                f'"{filters.usage_type}"', autoescape=True
            )
        )
    if filters.min_price is not None:
        conditions.append(Space.price_per_month >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Space.price_per_month <= filters.max_price)
    if filters.min_size is not None:
        conditions.append(Space.size_sqft >= filters.min_size)
    return conditions


def search_spaces(
    conn: Connection, filters: SpaceFilters, limit: int, offset: int
) -> tuple[list[dict[str, Any]], int]:
    """
    Search active spaces, newest first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        filters (SpaceFilters): Filters to apply.
        limit (int): Page size.
        offset (int): Rows to skip.

    Returns:
        tuple[list[dict], int]: Page of space rows and the total matching count.
    """
    conditions = _filter_conditions(filters)

    total = conn.execute(select(func.count()).select_from(Space).where(*conditions)).scalar_one()
    rows = conn.execute(
        select(Space.__table__)
        .where(*conditions)
        .order_by(Space.created_at.desc(), Space.id)
        .limit(limit)
        .offset(offset)
    ).mappings()
    spaces = [dict(row) for row in rows]

    owners = get_party_summaries(conn, [s["owner_id"] for s in spaces])
    for space in spaces:
        space["owner"] = owners.get(space["owner_id"])

    return spaces, int(total)
