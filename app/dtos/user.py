"""User DTOs"""

from typing import Literal, Optional

from pydantic import Field

from .base import BaseResponse


class UserPublic(BaseResponse):
    """A user as it may leave the service: no password, no refresh token."""

    name: str
    email: str
    full_name: str = Field(alias="fullName")
    avatar: str
    cover_image: Optional[str] = Field(default=None, alias="coverImage")
    role: Literal["user", "artist"] = "user"
