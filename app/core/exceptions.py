"""Application error taxonomy.

Every error a handler raises on purpose is an ``ApiError``; the exception
handlers registered in ``app.core.responses`` turn it into the uniform error
envelope.
"""

from typing import Any, Optional


class ApiError(Exception):
    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        errors: Optional[Any] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Please provide all the required data"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Resource already exists"


class AuthError(ApiError):
    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class ConfigurationError(ApiError):
    status_code = 400
    default_message = "Configuration is missing"


class UpstreamFailure(ApiError):
    """The asset host or the database failed underneath a request."""

    status_code = 400
    default_message = "Upstream service failed"


class InvalidTokenError(Exception):
    pass


class TokenExpiredError(InvalidTokenError):
    pass
