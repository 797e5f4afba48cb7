from .base import BaseRepository
from .song import SongRepository
from .user import UserRepository

__all__ = ["BaseRepository", "SongRepository", "UserRepository"]
