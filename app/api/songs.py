"""Song endpoints (artists only)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_file_service, get_song_service
from app.core.responses import success_response
from app.dtos.user import UserPublic
from app.middleware.auth import require_artist
from app.services.files import LocalFileService
from app.services.song_service import SongService

router = APIRouter(prefix="/song", tags=["Song"])


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_song(
    artist: UserPublic = Depends(require_artist),
    name: Optional[str] = Form(None),
    is_published: bool = Form(False, alias="isPublished"),
    song_file: Optional[UploadFile] = File(None, alias="songFile"),
    image: Optional[UploadFile] = File(None),
    service: SongService = Depends(get_song_service),
    files: LocalFileService = Depends(get_file_service),
):
    """Upload a song file and its cover image, then store the song."""
    song_file_path = await files.save_upload(song_file)
    image_path = await files.save_upload(image)
    try:
        song = await run_in_threadpool(
            lambda: service.add_song(
                artist,
                name=name,
                is_published=is_published,
                song_file_path=song_file_path,
                image_path=image_path,
            )
        )
    finally:
        files.discard(song_file_path, image_path)

    return success_response(
        status.HTTP_201_CREATED,
        "Successfully added a new song",
        {"song": song.model_dump(by_alias=True, mode="json")},
    )
