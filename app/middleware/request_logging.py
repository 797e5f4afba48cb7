"""Per-request access log and X-Request-ID correlation.

Bodies are never logged; they carry passwords and tokens.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings
from app.middleware.auth import extract_access_token

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("app.request")


def _caller_id(request: Request) -> Optional[str]:
    """User id from a valid access token, if the request carries one."""
    token = extract_access_token(
        request.cookies.get("accessToken"), request.headers.get("Authorization")
    )
    if not token or not settings.ACCESS_TOKEN_SECRET:
        return None
    try:
        claims = jwt.decode(
            token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None
    return claims.get("_id")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.monotonic()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        fields: Dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "user_id": _caller_id(request),
        }

        try:
            response = await call_next(request)
        except Exception:
            fields["duration_ms"] = int((time.monotonic() - started) * 1000)
            logger.exception("Request crashed", extra=fields)
            raise

        fields["status"] = response.status_code
        fields["duration_ms"] = int((time.monotonic() - started) * 1000)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code, extra=fields)

        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
