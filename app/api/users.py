"""User endpoints: registration, login, logout and access-token refresh."""

from __future__ import annotations

import json
from typing import Any, Optional, Type, TypeVar

from fastapi import APIRouter, Cookie, Depends, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from app.api.deps import (
    get_file_service,
    get_registration_service,
    get_settings,
    get_user_service,
)
from app.config import Settings
from app.core.responses import success_response
from app.dtos.auth import LoginRequest, LoginResponse, RefreshTokenRequest, TokenPair
from app.dtos.user import UserPublic
from app.middleware.auth import get_current_user
from app.services.files import LocalFileService
from app.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["User"])

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def cookie_options(app_settings: Settings) -> dict:
    if app_settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}
    return {"httponly": True, "secure": False, "samesite": "lax", "path": "/"}


async def read_payload(request: Request, model: Type[PayloadT]) -> PayloadT:
    """Build `model` from a JSON or form-encoded body; an empty body gives defaults."""
    content_type = request.headers.get("content-type", "")
    fields: Any
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        raw = await request.body()
        try:
            fields = json.loads(raw) if raw.strip() else {}
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": f"JSON decode error: {exc}"}]
            ) from exc
        if fields is None:
            fields = {}

    try:
        return model.model_validate(fields)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def set_auth_cookies(
    response: JSONResponse, tokens: TokenPair, app_settings: Settings
) -> None:
    options = cookie_options(app_settings)
    response.set_cookie(ACCESS_TOKEN_COOKIE, tokens.access_token, **options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, tokens.refresh_token, **options)


def clear_auth_cookies(response: JSONResponse, app_settings: Settings) -> None:
    options = cookie_options(app_settings)
    response.delete_cookie(ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(REFRESH_TOKEN_COOKIE, **options)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_user(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None, alias="fullName"),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    service: UserService = Depends(get_registration_service),
    files: LocalFileService = Depends(get_file_service),
):
    """Register a user; avatar is required, cover image optional."""
    avatar_path = await files.save_upload(avatar)
    cover_image_path = await files.save_upload(cover_image)
    try:
        created_user = await run_in_threadpool(
            lambda: service.register(
                name=name,
                email=email,
                full_name=full_name,
                password=password,
                role=role,
                avatar_path=avatar_path,
                cover_image_path=cover_image_path,
            )
        )
    finally:
        # Uploaded files are already gone; this catches early rejections
        files.discard(avatar_path, cover_image_path)

    return success_response(
        status.HTTP_201_CREATED,
        "Successfully created a new user",
        {"createdUser": created_user.model_dump(by_alias=True, mode="json")},
    )


@router.post("/login")
async def login_user(
    request: Request,
    service: UserService = Depends(get_user_service),
    app_settings: Settings = Depends(get_settings),
):
    payload = await read_payload(request, LoginRequest)
    user, tokens = await run_in_threadpool(service.login, payload)

    body = LoginResponse(
        user=user,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
    response = success_response(
        status.HTTP_200_OK,
        "User logged in successfully",
        body.model_dump(by_alias=True, mode="json"),
    )
    set_auth_cookies(response, tokens, app_settings)
    return response


@router.post("/logout")
async def logout_user(
    current_user: UserPublic = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
    app_settings: Settings = Depends(get_settings),
):
    await run_in_threadpool(service.logout, current_user.id)

    response = success_response(status.HTTP_200_OK, "User logged out successfully")
    clear_auth_cookies(response, app_settings)
    return response


@router.post("/refreshAccessToken")
async def refresh_access_token(
    request: Request,
    refresh_token: Optional[str] = Cookie(None, alias=REFRESH_TOKEN_COOKIE),
    service: UserService = Depends(get_user_service),
    app_settings: Settings = Depends(get_settings),
):
    if refresh_token:
        incoming = refresh_token
    else:
        incoming = (await read_payload(request, RefreshTokenRequest)).refresh_token
    tokens = await run_in_threadpool(service.refresh_access_token, incoming)

    response = success_response(
        status.HTTP_200_OK,
        "Access token refreshed successfully",
        tokens.model_dump(by_alias=True),
    )
    set_auth_cookies(response, tokens, app_settings)
    return response
