"""Space listings: create, search, read, owner-only update and soft delete."""

from __future__ import annotations

import math
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine

from golocal_spaces.db.readers.spaces import SpaceFilters, get_space, get_space_details, search_spaces
from golocal_spaces.db.readers.users import get_user
from golocal_spaces.db.writers.spaces import (
    insert_amenities,
    insert_images,
    insert_space,
    set_space_status,
    update_space,
)
from golocal_spaces.errors import NotFoundError, PermissionDeniedError, ValidationError
from golocal_spaces.services.side_effects import BestEffortQueue

logger = structlog.get_logger(__name__)

RATE_FIELDS = ("price_per_day", "price_per_week", "price_per_month")
MAX_PAGE_SIZE = 100


class SpaceService:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_space(
        self,
        owner_id: UUID,
        fields: dict[str, Any],
        amenities: Optional[dict[str, bool]] = None,
        image_urls: Optional[list[str]] = None,
    ) -> tuple[dict[str, Any], BestEffortQueue]:
        """
        Create an active space for an owner.

        Amenities and images are queued as best-effort side effects; a failure
        there never fails the listing itself.

        Returns:
            tuple: The stored space row and the queued side effects
        """
        if not any(fields.get(rate) for rate in RATE_FIELDS):
            raise ValidationError("At least one price is required")

        with self.engine.begin() as conn:
            if not get_user(conn, owner_id):
                raise NotFoundError("Owner not found")
            space_id = insert_space(conn, owner_id, fields)
            space = get_space(conn, space_id)

        logger.info("space_created", space_id=str(space_id), owner_id=str(owner_id))

        side_effects = BestEffortQueue()
        if amenities:
            side_effects.add("insert_amenities", insert_amenities, self.engine, space_id, amenities)
        if image_urls:
            side_effects.add("insert_images", insert_images, self.engine, space_id, image_urls)
        return space, side_effects

    def search(self, filters: SpaceFilters, page: int = 1, limit: int = 20) -> dict[str, Any]:
        """
        Page through active spaces, newest first.

        Returns:
            dict: {"data", "total", "page", "limit", "total_pages"}
        """
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        with self.engine.connect() as conn:
            rows, total = search_spaces(conn, filters, limit=limit, offset=(page - 1) * limit)
        return {
            "data": rows,
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if total else 0,
        }

    def get_space(self, space_id: UUID) -> dict[str, Any]:
        with self.engine.connect() as conn:
            space = get_space_details(conn, space_id)
        if not space:
            raise NotFoundError("Space not found")
        return space

    def _owned_space(self, conn: Any, space_id: UUID, owner_id: UUID) -> dict[str, Any]:
        space = get_space(conn, space_id)
        if not space:
            raise NotFoundError("Space not found")
        if space["owner_id"] != owner_id:
            raise PermissionDeniedError("Only the owner can modify this space")
        return space

    def update_space(self, space_id: UUID, owner_id: UUID, fields: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial update from the space's owner."""
        with self.engine.begin() as conn:
            space = self._owned_space(conn, space_id, owner_id)
            merged = {**space, **fields}
            if not any(merged.get(rate) for rate in RATE_FIELDS):
                raise ValidationError("At least one price is required")
            if fields:
                update_space(conn, space_id, dict(fields))

        logger.info("space_updated", space_id=str(space_id), fields=sorted(fields))
        return self.get_space(space_id)

    def delete_space(self, space_id: UUID, owner_id: UUID) -> None:
        """Soft delete: the space becomes inactive and drops out of search."""
        with self.engine.begin() as conn:
            self._owned_space(conn, space_id, owner_id)
            set_space_status(conn, space_id, "inactive")
        logger.info("space_deactivated", space_id=str(space_id), owner_id=str(owner_id))
