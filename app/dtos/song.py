"""Song DTOs"""

from pydantic import Field

from app.models.entities.base import PyObjectIdStr

from .base import BaseResponse


class SongResponse(BaseResponse):
    name: str
    song_file: str = Field(alias="songFile")
    duration: float = 0
    artist: PyObjectIdStr
    image: str
    is_published: bool = Field(default=False, alias="isPublished")
