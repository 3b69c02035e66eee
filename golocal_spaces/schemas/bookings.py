from datetime import date
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class BookingCreatePayload(BaseModel):
    """
    Schema for a vendor's booking request over [start_date, end_date).
    """

    space_id: UUID = Field(..., description="Space to book")
    vendor_id: UUID = Field(..., description="Requesting vendor")
    start_date: date = Field(..., description="First day of the booking (inclusive)")
    end_date: date = Field(..., description="Day after the last day (exclusive)")
    special_requests: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreatePayload":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class BookingCancelPayload(BaseModel):
    actor_id: UUID = Field(..., description="Vendor or landlord cancelling the booking")
    reason: Optional[str] = Field(None, max_length=1000)


BookingRole = Literal["vendor", "landlord"]
