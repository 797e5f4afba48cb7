"""Authentication dependencies for FastAPI."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Cookie, Depends, Header
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_token_config, get_user_repository
from app.core.exceptions import (
    ApiError,
    AuthError,
    InvalidTokenError,
    TokenExpiredError,
)
from app.dtos.user import UserPublic
from app.repositories.user import UserRepository
from app.services.token_service import TokenConfig, decode_access_token

logger = logging.getLogger(__name__)


def extract_access_token(
    cookie_token: Optional[str], authorization: Optional[str]
) -> Optional[str]:
    """The access-token cookie wins over the Authorization header."""
    if cookie_token:
        return cookie_token
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "", 1).strip() or None
    return None


async def get_current_user(
    access_token: Optional[str] = Cookie(None, alias="accessToken"),
    authorization: Optional[str] = Header(None),
    config: TokenConfig = Depends(get_token_config),
    users: UserRepository = Depends(get_user_repository),
) -> UserPublic:
    token = extract_access_token(access_token, authorization)
    if not token:
        raise AuthError("Unauthorized request")

    try:
        payload = decode_access_token(config, token)
    except TokenExpiredError:
        raise AuthError("Access token expired")
    except InvalidTokenError:
        raise AuthError("Invalid access token")

    try:
        user = await run_in_threadpool(users.find_public_by_id, payload["_id"])
    except Exception:
        logger.exception("Failed to load authenticated user")
        raise ApiError("Internal server error", status_code=500)

    if not user:
        raise AuthError("Invalid access token")
    return UserPublic.model_validate(user)


async def require_artist(
    current_user: UserPublic = Depends(get_current_user),
) -> UserPublic:
    if current_user.role != "artist":
        raise AuthError("Unauthorized request")
    return current_user
