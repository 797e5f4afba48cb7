"""User repository for database operations"""

from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo.database import Database

from app.models.entities.user import User, normalize_identity
from .base import BaseRepository

# Never leaves the data-access layer on the public read path
SECRET_FIELDS = {"password": 0, "refreshToken": 0}


class UserRepository(BaseRepository[User]):
    """Repository for user entities"""

    def __init__(self, db: Database):
        super().__init__(db, "users", User)

    def find_by_name_or_email(
        self, name: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[User]:
        """Find a user matching either identifier (case-insensitive)"""
        clauses = []
        if name:
            clauses.append({"name": normalize_identity(name)})
        if email:
            clauses.append({"email": normalize_identity(email)})
        if not clauses:
            return None
        return self.find_one({"$or": clauses})

    def find_public_by_id(self, user_id: str | ObjectId) -> Optional[Dict[str, Any]]:
        """Load a user document without password and refresh token"""
        identifier = self._to_object_id(user_id)
        if identifier is None:
            return None
        return self.collection.find_one({"_id": identifier}, SECRET_FIELDS)

    def create_user(self, user: User) -> User:
        """Persist a new user"""
        return self.insert_one(user)

    def set_refresh_token(self, user_id: str | ObjectId, refresh_token: str) -> bool:
        """Overwrite the single refresh-token slot"""
        return self.update_one(user_id, {"refreshToken": refresh_token})

    def clear_refresh_token(self, user_id: str | ObjectId) -> bool:
        return self.unset_fields(user_id, "refreshToken")
