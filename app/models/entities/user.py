"""User entity - an account that can log in and, as an artist, publish songs"""

import re
from typing import Literal, Optional

from pydantic import Field, field_validator

from .base import BaseEntity

UserRole = Literal["user", "artist"]

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def normalize_identity(value: str) -> str:
    """Names and emails are stored trimmed and lowercased."""
    return value.strip().lower()


class User(BaseEntity):
    name: str
    email: str
    full_name: str = Field(alias="fullName")
    # bcrypt hash, never the plain password
    password: str
    avatar: str
    cover_image: Optional[str] = Field(None, alias="coverImage")
    role: UserRole = "user"
    # Latest issued refresh token; a new login overwrites it
    refresh_token: Optional[str] = Field(None, alias="refreshToken")

    @field_validator("name", "email")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_identity(v)

    @field_validator("full_name")
    @classmethod
    def _trim(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email")
        return v
