"""Uniform success/error envelopes and the exception handlers producing them."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ApiError
from app.dtos.base import ApiResponse, ErrorResponse

logger = logging.getLogger(__name__)


def success_response(
    status_code: int, message: str, data: Any = None
) -> JSONResponse:
    body = ApiResponse.build(status_code, message, data)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


def error_response(
    status_code: int, message: str, errors: Optional[Any] = None
) -> JSONResponse:
    body = ErrorResponse(status=status_code, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed: %s",
            exc.message,
            extra={"path": request.url.path, "status": exc.status_code},
        )
    return error_response(exc.status_code, exc.message, exc.errors)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid request data", errors
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "This route is not defined")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def duplicate_key_handler(
    request: Request, exc: DuplicateKeyError
) -> JSONResponse:
    return error_response(
        status.HTTP_409_CONFLICT, "User with same email or username already exists"
    )


async def database_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception("Database error", extra={"path": request.url.path})
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
