from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from golocal_spaces.models.enums import UserType


class UserCreatePayload(BaseModel):
    """
    Schema for creating a user profile. Authentication itself is handled by
    the identity provider.
    """

    model_config = ConfigDict(use_enum_values=True)

    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    user_type: UserType
    phone: Optional[str] = None
    profile_image_url: Optional[str] = None
