"""In-memory stand-ins for the Mongo repositories and the asset host."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.config import Settings
from app.models.entities.base import utcnow
from app.models.entities.song import Song
from app.models.entities.user import User, normalize_identity
from app.services.asset_host import AssetHost, AssetHostConfig, UploadedAsset
from app.services.passwords import hash_password


def make_settings(**overrides: Any) -> Settings:
    values = {
        "ACCESS_TOKEN_SECRET": "access-secret",
        "ACCESS_TOKEN_EXPIRY": "15m",
        "REFRESH_TOKEN_SECRET": "refresh-secret",
        "REFRESH_TOKEN_EXPIRY": "10d",
        "CLOUDINARY_CLOUD_NAME": "demo",
        "CLOUDINARY_API_KEY": "key",
        "CLOUDINARY_API_SECRET": "secret",
        "CLOUDINARY_MAIN_FOLDER": "music-share",
        "ENVIRONMENT": "development",
    }
    values.update(overrides)
    return Settings(**values)


class FakeUserRepository:
    def __init__(self):
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}

    def add(self, *, name: str, email: str, password: str, role: str = "user") -> User:
        user = User(
            name=name,
            email=email,
            full_name=name.title(),
            password=hash_password(password),
            avatar=f"https://assets.example/{name}.png",
            role=role,
        )
        return self.create_user(user)

    def create_user(self, user: User) -> User:
        for doc in self.docs.values():
            if doc["name"] == user.name or doc["email"] == user.email:
                raise DuplicateKeyError("E11000 duplicate key error")
        doc = user.model_dump(by_alias=True, exclude_none=True)
        doc["_id"] = ObjectId()
        doc["updatedAt"] = doc["createdAt"]
        self.docs[doc["_id"]] = doc
        return User.model_validate(doc)

    def find_by_id(self, user_id) -> Optional[User]:
        doc = self.docs.get(ObjectId(str(user_id))) if ObjectId.is_valid(str(user_id)) else None
        return User.model_validate(doc) if doc else None

    def find_by_name_or_email(self, name=None, email=None) -> Optional[User]:
        for doc in self.docs.values():
            if name and doc["name"] == normalize_identity(name):
                return User.model_validate(doc)
            if email and doc["email"] == normalize_identity(email):
                return User.model_validate(doc)
        return None

    def find_public_by_id(self, user_id) -> Optional[Dict[str, Any]]:
        doc = self.docs.get(ObjectId(str(user_id))) if ObjectId.is_valid(str(user_id)) else None
        if doc is None:
            return None
        return {k: v for k, v in doc.items() if k not in ("password", "refreshToken")}

    def set_refresh_token(self, user_id, refresh_token: str) -> bool:
        doc = self.docs.get(ObjectId(str(user_id)))
        if doc is None:
            return False
        doc["refreshToken"] = refresh_token
        doc["updatedAt"] = utcnow()
        return True

    def clear_refresh_token(self, user_id) -> bool:
        doc = self.docs.get(ObjectId(str(user_id)))
        if doc is None:
            return False
        doc.pop("refreshToken", None)
        return True


class FakeSongRepository:
    def __init__(self):
        self.songs: List[Song] = []

    def create_song(self, song: Song) -> Song:
        doc = song.model_dump(by_alias=True, exclude_none=True)
        doc["_id"] = ObjectId()
        doc["updatedAt"] = doc["createdAt"]
        created = Song.model_validate(doc)
        self.songs.append(created)
        return created


class FakeAssetHost(AssetHost):
    """Accepts uploads without a network call; asset types in ``fail_types`` fail."""

    def __init__(self, fail_types=()):
        super().__init__(
            AssetHostConfig(
                cloud_name="demo", api_key="key", api_secret="secret", main_folder="music-share"
            )
        )
        self.fail_types = set(fail_types)
        self.uploads: List[Dict[str, Any]] = []
        self.deleted: List[str] = []

    def upload(self, local_path, folder, asset_type="image") -> Optional[UploadedAsset]:
        path = Path(local_path)
        existed = path.exists()
        path.unlink(missing_ok=True)
        self.uploads.append(
            {"folder": self._folder(folder), "type": asset_type, "existed": existed}
        )
        if asset_type in self.fail_types:
            return None
        public_id = f"{self._folder(folder)}/{path.stem}"
        return UploadedAsset(
            secure_url=f"https://res.example/{public_id}",
            public_id=public_id,
            resource_type=asset_type,
            duration=187.4 if asset_type == "video" else None,
        )

    def delete(self, public_id, asset_type="image"):
        self.deleted.append(public_id)
        return {"result": "ok"}
