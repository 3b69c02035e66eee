# models/spaces.py

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.sql import func

from golocal_spaces.config import SCHEMA
from golocal_spaces.models.base import Base, JSONType


class Space(Base):
    """
    ORM model for a rentable listing (parking lot, storefront, vacant land, ...).

    At least one of the daily, weekly or monthly rates is set. Spaces are
    scoped by status rather than deleted: an owner "deleting" a space sets it
    inactive so existing bookings keep their reference.
    """

    __tablename__ = "spaces"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(
        Uuid, ForeignKey(f"{SCHEMA}.users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    space_type = Column(String, nullable=False)
    size_sqft = Column(Integer, nullable=True)
    price_per_day = Column(Numeric(10, 2), nullable=True)
    price_per_week = Column(Numeric(10, 2), nullable=True)
    price_per_month = Column(Numeric(10, 2), nullable=True)
    instant_book = Column(Boolean, nullable=False, server_default=text("false"), default=False)
    status = Column(String, nullable=False, server_default=text("'active'"), default="active")
    allowed_usage_types = Column(JSONType, nullable=True)
    allowed_business_types = Column(JSONType, nullable=True)
    operating_hours = Column(String, nullable=True)  # e.g. "6am-10pm Mon-Fri"
    insurance_requirements = Column(Text, nullable=True)
    rental_period_length = Column(Integer, nullable=True)
    rental_period_unit = Column(String, nullable=True)
    payment_collection_day = Column(Integer, nullable=True)  # 1-31
    vendor_experience_required = Column(Integer, nullable=True)  # years
    additional_terms = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class SpaceAmenities(Base):
    """Amenity flags for a space (one row per space)."""

    __tablename__ = "space_amenities"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    space_id = Column(
        Uuid,
        ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    electricity = Column(Boolean, nullable=False, default=False)
    water_access = Column(Boolean, nullable=False, default=False)
    restrooms = Column(Boolean, nullable=False, default=False)
    parking = Column(Boolean, nullable=False, default=False)
    wifi = Column(Boolean, nullable=False, default=False)
    storage = Column(Boolean, nullable=False, default=False)
    security_camera = Column(Boolean, nullable=False, default=False)
    covered = Column(Boolean, nullable=False, default=False)
    high_traffic = Column(Boolean, nullable=False, default=False)
    garbage_access = Column(Boolean, nullable=False, default=False)
    water_dump = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class SpaceImage(Base):
    """Image attached to a space; display_order 0 is the primary image."""

    __tablename__ = "space_images"
    __table_args__ = {"schema": SCHEMA}

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    space_id = Column(
        Uuid, ForeignKey(f"{SCHEMA}.spaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url = Column(String, nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
