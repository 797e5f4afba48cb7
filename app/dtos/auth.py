from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user import UserPublic


class LoginRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class TokenPair(BaseModel):
    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")

    model_config = ConfigDict(populate_by_name=True)


class LoginResponse(TokenPair):
    user: UserPublic
