"""Asset host adapter: forwards spooled uploads to Cloudinary."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import cloudinary.uploader

from app.config import Settings
from app.core.exceptions import ConfigurationError

LOG = logging.getLogger(__name__)

AssetType = Literal["image", "raw", "video"]


@dataclass(frozen=True)
class AssetHostConfig:
    cloud_name: str
    api_key: str
    api_secret: str
    main_folder: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssetHostConfig":
        if not (
            settings.CLOUDINARY_CLOUD_NAME
            and settings.CLOUDINARY_API_KEY
            and settings.CLOUDINARY_API_SECRET
        ):
            raise ConfigurationError("Asset host configurations are missing")
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            main_folder=settings.CLOUDINARY_MAIN_FOLDER.strip("/"),
        )

    def credentials(self) -> Dict[str, Any]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "secure": True,
        }


@dataclass(frozen=True)
class UploadedAsset:
    secure_url: str
    public_id: str
    resource_type: str
    duration: Optional[float] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "UploadedAsset":
        return cls(
            secure_url=response["secure_url"],
            public_id=response.get("public_id", ""),
            resource_type=response.get("resource_type", "image"),
            duration=response.get("duration"),
        )


def remove_local_file(local_path: Path) -> None:
    """Delete a spooled temp file; a failed delete is logged, never raised."""
    try:
        local_path.unlink(missing_ok=True)
    except OSError as exc:
        LOG.warning("Failed to remove temp file %s: %s", local_path, exc)


class AssetHost:
    """Uploads local files under ``<main_folder>/<folder>`` on the asset host."""

    def __init__(self, config: AssetHostConfig):
        self.config = config

    def _folder(self, folder: str) -> str:
        folder = folder.strip("/")
        if not self.config.main_folder:
            return folder
        return f"{self.config.main_folder}/{folder}"

    def upload(
        self,
        local_path: Optional[Path | str],
        folder: str,
        asset_type: AssetType = "image",
    ) -> Optional[UploadedAsset]:
        """
        Upload a local file and always remove it afterwards.

        Returns:
            The uploaded asset, or None when the upload failed. Callers treat
            None as a hard failure; nothing is retried.
        """
        if not local_path:
            LOG.warning("Asset upload skipped: no local file")
            return None

        path = Path(local_path)
        try:
            response = cloudinary.uploader.upload(
                str(path),
                resource_type=asset_type,
                folder=self._folder(folder),
                **self.config.credentials(),
            )
            asset = UploadedAsset.from_response(response)
        except Exception as exc:
            LOG.error(
                "Failed to upload file %s to %s: %s",
                path.name,
                self._folder(folder),
                exc,
            )
            return None
        finally:
            remove_local_file(path)

        LOG.info(
            "Uploaded asset public_id=%s type=%s",
            asset.public_id,
            asset.resource_type,
        )
        return asset

    def delete(
        self, public_id: str, asset_type: AssetType = "image"
    ) -> Optional[Dict[str, Any]]:
        """Destroy a remote asset; returns None when the host call failed."""
        try:
            return cloudinary.uploader.destroy(
                public_id,
                resource_type=asset_type,
                **self.config.credentials(),
            )
        except Exception as exc:
            LOG.error("Failed to delete the asset %s: %s", public_id, exc)
            return None
