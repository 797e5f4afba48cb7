"""Access/refresh token signing and verification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from bson import ObjectId
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from app.config import Settings, parse_expiry
from app.core.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
)
from app.dtos.auth import TokenPair
from app.repositories.user import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenConfig:
    access_secret: str
    access_expiry: timedelta
    refresh_secret: str
    refresh_expiry: timedelta
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        if not (
            settings.ACCESS_TOKEN_SECRET
            and settings.ACCESS_TOKEN_EXPIRY
            and settings.REFRESH_TOKEN_SECRET
            and settings.REFRESH_TOKEN_EXPIRY
        ):
            raise ConfigurationError("JWT configurations are missing")
        try:
            access_expiry = parse_expiry(settings.ACCESS_TOKEN_EXPIRY)
            refresh_expiry = parse_expiry(settings.REFRESH_TOKEN_EXPIRY)
        except ValueError as exc:
            raise ConfigurationError(f"JWT configurations are invalid: {exc}")
        return cls(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            access_expiry=access_expiry,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            refresh_expiry=refresh_expiry,
            algorithm=settings.JWT_ALGORITHM,
        )


def _sign(
    payload: dict[str, Any],
    secret: str,
    algorithm: str,
    expires_in: timedelta,
    now: Optional[datetime] = None,
) -> str:
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        **payload,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def generate_access_token(
    config: TokenConfig,
    *,
    user_id: str | ObjectId,
    name: str,
    email: str,
    role: str,
    now: Optional[datetime] = None,
) -> str:
    return _sign(
        {"_id": str(user_id), "name": name, "email": email, "role": role},
        config.access_secret,
        config.algorithm,
        config.access_expiry,
        now,
    )


def generate_refresh_token(
    config: TokenConfig,
    *,
    user_id: str | ObjectId,
    now: Optional[datetime] = None,
) -> str:
    return _sign(
        {"_id": str(user_id)},
        config.refresh_secret,
        config.algorithm,
        config.refresh_expiry,
        now,
    )


def _decode(token: str, secret: str, algorithm: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError(str(exc))
    except JWTError as exc:
        raise InvalidTokenError(str(exc))

    if not payload.get("_id"):
        raise InvalidTokenError("Token has no subject")
    return payload


def decode_access_token(config: TokenConfig, token: str) -> dict[str, Any]:
    return _decode(token, config.access_secret, config.algorithm)


def decode_refresh_token(config: TokenConfig, token: str) -> dict[str, Any]:
    return _decode(token, config.refresh_secret, config.algorithm)


class TokenService:
    """Issues token pairs and keeps the user's refresh-token slot current."""

    def __init__(self, config: TokenConfig, users: UserRepository):
        self.config = config
        self.users = users

    def issue_tokens(self, user_id: str | ObjectId) -> TokenPair:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("Failed to get user")

        access_token = generate_access_token(
            self.config,
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
        )
        refresh_token = generate_refresh_token(self.config, user_id=user.id)

        # Last writer wins: concurrent logins overwrite each other's slot
        self.users.set_refresh_token(user.id, refresh_token)
        logger.info("Issued tokens", extra={"user_id": str(user.id)})

        return TokenPair(access_token=access_token, refresh_token=refresh_token)
