from .base import BaseEntity, PyObjectId, PyObjectIdStr
from .song import Song
from .user import User, UserRole

__all__ = ["BaseEntity", "PyObjectId", "PyObjectIdStr", "Song", "User", "UserRole"]
