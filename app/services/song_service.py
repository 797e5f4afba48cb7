"""Song publishing for artists."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from app.core.exceptions import AuthError, UpstreamFailure, ValidationError
from app.dtos.song import SongResponse
from app.dtos.user import UserPublic
from app.models.entities.song import Song
from app.repositories.song import SongRepository
from app.services.asset_host import AssetHost

logger = logging.getLogger(__name__)

MISSING_FILES_MESSAGE = (
    "Song file and image is required while uploading to the asset host"
)


class SongService:
    def __init__(self, songs: SongRepository, assets: AssetHost):
        self.songs = songs
        self.assets = assets

    def add_song(
        self,
        artist: UserPublic,
        *,
        name: Optional[str],
        is_published: bool = False,
        song_file_path: Optional[Path] = None,
        image_path: Optional[Path] = None,
    ) -> SongResponse:
        if artist.role != "artist":
            raise AuthError("Unauthorized request")

        if not name or not name.strip():
            raise ValidationError("Please provide all the required data")
        name = name.strip()

        if song_file_path is None or image_path is None:
            raise ValidationError(MISSING_FILES_MESSAGE)

        folder = f"users/{artist.name}/songs/{name}"
        song_file = self.assets.upload(song_file_path, folder, "video")
        image = self.assets.upload(image_path, folder, "image")
        if song_file is None or image is None:
            for asset in (song_file, image):
                if asset is not None:
                    self.assets.delete(asset.public_id, asset.resource_type)
            raise UpstreamFailure(MISSING_FILES_MESSAGE)

        song = self.songs.create_song(
            Song(
                name=name,
                artist=artist.id,
                song_file=song_file.secure_url,
                duration=song_file.duration or 0,
                image=image.secure_url,
                is_published=is_published,
            )
        )
        logger.info(
            "Added song",
            extra={"song_id": str(song.id), "artist_id": artist.id},
        )
        return SongResponse.model_validate(song.model_dump(by_alias=True))
