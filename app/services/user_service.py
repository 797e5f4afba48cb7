"""Registration, login, logout and refresh-token rotation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import (
    AuthError,
    ConfigurationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    TokenExpiredError,
    UpstreamFailure,
    ValidationError,
)
from app.dtos.auth import LoginRequest, TokenPair
from app.dtos.user import UserPublic
from app.models.entities.user import EMAIL_PATTERN, User, normalize_identity
from app.repositories.user import UserRepository
from app.services.asset_host import AssetHost
from app.services.passwords import hash_password, verify_password
from app.services.token_service import TokenService, decode_refresh_token

logger = logging.getLogger(__name__)

USER_ROLES = ("user", "artist")


class UserService:
    def __init__(
        self,
        users: UserRepository,
        tokens: Optional[TokenService] = None,
        assets: Optional[AssetHost] = None,
    ):
        self.users = users
        self.tokens = tokens
        self.assets = assets

    def register(
        self,
        *,
        name: Optional[str],
        email: Optional[str],
        full_name: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
        avatar_path: Optional[Path] = None,
        cover_image_path: Optional[Path] = None,
    ) -> UserPublic:
        """Create a user; the avatar is required, the cover image optional."""
        if not all(
            value and value.strip() for value in (name, email, full_name, password)
        ) or avatar_path is None:
            raise ValidationError("Please provide all the required data")

        name = normalize_identity(name)
        email = normalize_identity(email)
        role = (role or "user").strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email")
        if role not in USER_ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(USER_ROLES)}")

        if self.users.find_by_name_or_email(name=name, email=email):
            raise ConflictError("User with same email or username already exists")

        if self.assets is None:
            raise ConfigurationError("Asset host configurations are missing")
        avatar = self.assets.upload(avatar_path, f"users/{name}/avatar")
        if avatar is None:
            raise UpstreamFailure("Failed to upload avatar to the asset host")
        cover_image = None
        if cover_image_path is not None:
            cover_image = self.assets.upload(cover_image_path, f"users/{name}/coverImage")
            if cover_image is None:
                logger.warning("Cover image upload failed, continuing without it")

        user = User(
            name=name,
            email=email,
            full_name=full_name,
            password=hash_password(password),
            avatar=avatar.secure_url,
            cover_image=cover_image.secure_url if cover_image else None,
            role=role,
        )
        try:
            created = self.users.create_user(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            self._discard_assets(avatar, cover_image)
            raise ConflictError("User with same email or username already exists")

        created_user = self.users.find_public_by_id(created.id)
        if not created_user:
            raise UpstreamFailure("Failed to get created user")

        logger.info("Created user", extra={"user_id": str(created.id), "role": role})
        return UserPublic.model_validate(created_user)

    def login(self, payload: LoginRequest) -> Tuple[UserPublic, TokenPair]:
        if not payload.name and not payload.email:
            raise ValidationError("Username or email is required")
        if not payload.password:
            raise ValidationError("Password is required")

        user = self.users.find_by_name_or_email(name=payload.name, email=payload.email)
        if user is None:
            raise NotFoundError("Invalid user credentials or user does not exits")

        if not verify_password(payload.password, user.password):
            raise AuthError("Incorrect password")

        tokens = self._token_service().issue_tokens(user.id)
        logged_in_user = self.users.find_public_by_id(user.id)
        if not logged_in_user:
            raise NotFoundError("Failed to get user")
        return UserPublic.model_validate(logged_in_user), tokens

    def logout(self, user_id: str | ObjectId) -> None:
        self.users.clear_refresh_token(user_id)
        logger.info("User logged out", extra={"user_id": str(user_id)})

    def refresh_access_token(self, refresh_token: Optional[str]) -> TokenPair:
        if not refresh_token:
            raise AuthError("Unauthorized request")

        try:
            payload = decode_refresh_token(self._token_service().config, refresh_token)
        except TokenExpiredError:
            raise AuthError("Refresh token expired")
        except InvalidTokenError:
            raise AuthError("Invalid refresh token")

        user = self.users.find_by_id(payload["_id"])
        if user is None:
            raise AuthError("Invalid refresh token")

        return self._token_service().issue_tokens(user.id)

    def _token_service(self) -> TokenService:
        if self.tokens is None:
            raise ConfigurationError("JWT configurations are missing")
        return self.tokens

    def _discard_assets(self, *assets) -> None:
        for asset in assets:
            if asset is not None:
                self.assets.delete(asset.public_id, asset.resource_type)
