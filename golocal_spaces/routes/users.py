from typing import Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from golocal_spaces.db.readers.users import get_user, user_email_exists
from golocal_spaces.db.writers.users import insert_user
from golocal_spaces.dependencies import get_db_engine
from golocal_spaces.errors import MarketplaceError, NotFoundError, ValidationError
from golocal_spaces.routes._helpers import success
from golocal_spaces.schemas.users import UserCreatePayload

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreatePayload,
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create a user profile.

    Raises:
        ValidationError: A profile with this email already exists
    """
    try:
        with db.begin() as conn:
            if user_email_exists(conn, payload.email):
                raise ValidationError("A user with this email already exists")
            user_id = insert_user(conn, payload.model_dump())
            user = get_user(conn, user_id)

        logger.info("user_created", user_id=str(user_id), user_type=payload.user_type)
        return success(user, message="User created successfully")

    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("user_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("/users/{user_id}")
def read_user(
    user_id: UUID,
    db: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    try:
        with db.connect() as conn:
            user = get_user(conn, user_id)
        if not user:
            raise NotFoundError("User not found")
        return success(user)
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("user_fetch_failed", user_id=str(user_id), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch user")
