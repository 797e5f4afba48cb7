"""Song repository for database operations"""

from pymongo.database import Database

from app.models.entities.song import Song
from .base import BaseRepository


class SongRepository(BaseRepository[Song]):
    """Repository for song entities"""

    def __init__(self, db: Database):
        super().__init__(db, "songs", Song)

    def create_song(self, song: Song) -> Song:
        return self.insert_one(song)
