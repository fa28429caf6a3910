"""Authentication related schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SessionToken(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str
    token_type: str = "bearer"
    user_id: str = Field(..., alias="userId")
    is_anonymous: bool = Field(..., alias="isAnonymous")


class CustomTokenRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Pre-issued custom token")


class IdentityRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    is_anonymous: bool = Field(..., alias="isAnonymous")
