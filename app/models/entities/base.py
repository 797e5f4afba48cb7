from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    WithJsonSchema,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


# Entities keep real ObjectIds; only JSON output turns them into strings
PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_coerce_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
    WithJsonSchema({"type": "string"}, mode="serialization"),
]

# DTO ids are plain hex strings
PyObjectIdStr = Annotated[str, BeforeValidator(lambda v: str(_coerce_object_id(v)))]


class BaseEntity(BaseModel):
    """Document id plus the createdAt/updatedAt stamps every collection carries."""

    id: Optional[PyObjectId] = Field(None, alias="_id")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)
