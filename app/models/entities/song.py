"""Song entity - a track published by an artist"""

from pydantic import Field, field_validator

from .base import BaseEntity, PyObjectId


class Song(BaseEntity):
    name: str
    song_file: str = Field(alias="songFile")
    duration: float = 0
    artist: PyObjectId
    image: str
    is_published: bool = Field(False, alias="isPublished")

    @field_validator("name")
    @classmethod
    def _trim(cls, v: str) -> str:
        return v.strip()
