from uuid import UUID

from pydantic import BaseModel, Field


class ConnectAccountPayload(BaseModel):
    user_id: UUID = Field(..., description="Landlord starting payout onboarding")
