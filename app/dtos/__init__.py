"""Data Transfer Objects (DTOs) for API requests and responses"""

from .base import ApiResponse, BaseResponse, ErrorResponse
from .auth import LoginRequest, LoginResponse, RefreshTokenRequest, TokenPair
from .song import SongResponse
from .user import UserPublic

__all__ = [
    "ApiResponse",
    "BaseResponse",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "SongResponse",
    "TokenPair",
    "UserPublic",
]
