from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from golocal_spaces.db.readers.spaces import SpaceFilters
from golocal_spaces.dependencies import get_space_service
from golocal_spaces.errors import MarketplaceError
from golocal_spaces.models.enums import SpaceType, UsageType
from golocal_spaces.routes._helpers import schedule_side_effects, success
from golocal_spaces.schemas.spaces import SpaceCreatePayload, SpaceUpdatePayload
from golocal_spaces.services.spaces import MAX_PAGE_SIZE, SpaceService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/spaces", status_code=status.HTTP_201_CREATED)
def create_space(
    payload: SpaceCreatePayload,
    background_tasks: BackgroundTasks,
    service: SpaceService = Depends(get_space_service),
) -> dict[str, Any]:
    """
    List a new space.

    Amenities and images are stored in the background after the response.
    """
    try:
        amenities = payload.amenities.model_dump() if payload.amenities else None
        space, side_effects = service.create_space(
            payload.owner_id,
            payload.space_columns(),
            amenities=amenities,
            image_urls=payload.image_urls,
        )
        schedule_side_effects(background_tasks, side_effects)
        return success(space, message="Space created successfully")

    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("space_creation_failed", owner_id=str(payload.owner_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create space")


@router.get("/spaces")
def search_spaces(
    city: Optional[str] = None,
    state: Optional[str] = None,
    space_type: Optional[SpaceType] = None,
    usage_type: Optional[UsageType] = None,
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    min_size: Optional[int] = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    service: SpaceService = Depends(get_space_service),
) -> dict[str, Any]:
    """Search active spaces, newest first, with pagination."""
    filters = SpaceFilters(
        city=city,
        state=state,
        space_type=space_type.value if space_type else None,
        usage_type=usage_type.value if usage_type else None,
        min_price=min_price,
        max_price=max_price,
        min_size=min_size,
    )
    try:
        result = service.search(filters, page=page, limit=limit)
        return {"success": True, **result}
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("space_search_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch spaces")


@router.get("/spaces/{space_id}")
def get_space(
    space_id: UUID,
    service: SpaceService = Depends(get_space_service),
) -> dict[str, Any]:
    """Fetch a space with amenities, images and owner summary."""
    try:
        return success(service.get_space(space_id))
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("space_fetch_failed", space_id=str(space_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch space")


@router.put("/spaces/{space_id}")
def update_space(
    space_id: UUID,
    payload: SpaceUpdatePayload,
    service: SpaceService = Depends(get_space_service),
) -> dict[str, Any]:
    """Partially update a space. Only its owner may do this."""
    try:
        space = service.update_space(space_id, payload.owner_id, payload.space_columns())
        return success(space, message="Space updated successfully")
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("space_update_failed", space_id=str(space_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update space")


@router.delete("/spaces/{space_id}")
def delete_space(
    space_id: UUID,
    owner_id: UUID = Query(..., description="Owner requesting the deletion"),
    service: SpaceService = Depends(get_space_service),
) -> dict[str, Any]:
    """Soft delete a space (status becomes inactive)."""
    try:
        service.delete_space(space_id, owner_id)
        return {"success": True, "message": "Space deleted successfully"}
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("space_delete_failed", space_id=str(space_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to delete space")
