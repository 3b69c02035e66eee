from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from golocal_spaces.models.enums import RentalPeriodUnit, SpaceStatus, SpaceType, UsageType


class AmenitiesPayload(BaseModel):
    electricity: bool = False
    water_access: bool = False
    restrooms: bool = False
    parking: bool = False
    wifi: bool = False
    storage: bool = False
    security_camera: bool = False
    covered: bool = False
    high_traffic: bool = False
    garbage_access: bool = False
    water_dump: bool = False


class SpaceFields(BaseModel):
    """Listing fields shared by create and update. All optional here."""

    model_config = ConfigDict(use_enum_values=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    zip_code: Optional[str] = Field(None, min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    space_type: Optional[SpaceType] = None
    size_sqft: Optional[int] = Field(None, gt=0)
    price_per_day: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    price_per_week: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    price_per_month: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    instant_book: Optional[bool] = None
    allowed_usage_types: Optional[list[UsageType]] = None
    allowed_business_types: Optional[list[str]] = None
    operating_hours: Optional[str] = None
    insurance_requirements: Optional[str] = None
    rental_period_length: Optional[int] = Field(None, gt=0)
    rental_period_unit: Optional[RentalPeriodUnit] = None
    payment_collection_day: Optional[int] = Field(None, ge=1, le=31)
    vendor_experience_required: Optional[int] = Field(None, ge=0)
    additional_terms: Optional[str] = None


class SpaceCreatePayload(SpaceFields):
    """
    Schema for listing a new space. Requires an address, a type and at least
    one of the daily, weekly or monthly rates.
    """

    owner_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    space_type: SpaceType
    instant_book: bool = False
    amenities: Optional[AmenitiesPayload] = None
    image_urls: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_rate(self) -> "SpaceCreatePayload":
        if not (self.price_per_day or self.price_per_week or self.price_per_month):
            raise ValueError("At least one price is required")
        return self

    def space_columns(self) -> dict:
        return self.model_dump(exclude={"owner_id", "amenities", "image_urls"})


class SpaceUpdatePayload(SpaceFields):
    """
    Partial update from the owner. Only fields present in the request are applied.
    """

    owner_id: UUID
    status: Optional[SpaceStatus] = None

    def space_columns(self) -> dict:
        return self.model_dump(exclude={"owner_id"}, exclude_unset=True)
