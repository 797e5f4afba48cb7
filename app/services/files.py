from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import UploadFile

from app.services.asset_host import remove_local_file


class LocalFileService:
    """Spools multipart uploads to a temp directory for the asset host."""

    def __init__(self, upload_dir: Path | str) -> None:
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _sanitize(name: str) -> str:
        name = name.strip().replace("\\", "_").replace("/", "_")
        name = re.sub(r"[^A-Za-z0-9._-]+", "_", name)
        return name or "upload"

    async def save_upload(self, upload: Optional[UploadFile]) -> Optional[Path]:
        if upload is None or not upload.filename:
            return None
        target = self.upload_dir / f"{uuid.uuid4().hex}_{self._sanitize(upload.filename)}"
        async with aiofiles.open(target, "wb") as out_file:
            while chunk := await upload.read(1024 * 1024):
                await out_file.write(chunk)
        await upload.close()
        return target

    @staticmethod
    def discard(*paths: Optional[Path]) -> None:
        for path in paths:
            if path is not None:
                remove_local_file(path)
