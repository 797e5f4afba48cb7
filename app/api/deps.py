"""Dependency providers shared by the API routers."""

from fastapi import Depends
from pymongo.database import Database

from app.config import Settings, settings
from app.database.mongo import get_db
from app.repositories.song import SongRepository
from app.repositories.user import UserRepository
from app.services.asset_host import AssetHost, AssetHostConfig
from app.services.files import LocalFileService
from app.services.song_service import SongService
from app.services.token_service import TokenConfig, TokenService
from app.services.user_service import UserService


def get_settings() -> Settings:
    return settings


def get_token_config(app_settings: Settings = Depends(get_settings)) -> TokenConfig:
    return TokenConfig.from_settings(app_settings)


def get_asset_host(app_settings: Settings = Depends(get_settings)) -> AssetHost:
    return AssetHost(AssetHostConfig.from_settings(app_settings))


def get_file_service(
    app_settings: Settings = Depends(get_settings),
) -> LocalFileService:
    return LocalFileService(app_settings.TEMP_UPLOAD_DIR)


def get_user_repository(db: Database = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_song_repository(db: Database = Depends(get_db)) -> SongRepository:
    return SongRepository(db)


def get_token_service(
    config: TokenConfig = Depends(get_token_config),
    users: UserRepository = Depends(get_user_repository),
) -> TokenService:
    return TokenService(config, users)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(users, tokens)


def get_registration_service(
    users: UserRepository = Depends(get_user_repository),
    assets: AssetHost = Depends(get_asset_host),
) -> UserService:
    # registration signs no tokens, so it works without JWT settings
    return UserService(users, assets=assets)


def get_song_service(
    songs: SongRepository = Depends(get_song_repository),
    assets: AssetHost = Depends(get_asset_host),
) -> SongService:
    return SongService(songs, assets)
