"""Common DTO base classes and the response envelope."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.entities.base import PyObjectIdStr


class BaseResponse(BaseModel):
    """Shared response fields for API DTOs."""

    id: Optional[PyObjectIdStr] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class ApiResponse(BaseModel):
    status: int
    success: bool = True
    message: str
    data: Optional[Any] = None

    @classmethod
    def build(cls, status: int, message: str, data: Any = None) -> "ApiResponse":
        return cls(status=status, success=status < 400, message=message, data=data)


class ErrorResponse(BaseModel):
    status: int
    success: bool = False
    message: str
    errors: Optional[Any] = None
