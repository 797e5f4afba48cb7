"""Shared MongoDB access for entity repositories"""

from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.database import Database

from app.models.entities.base import utcnow

EntityT = TypeVar("EntityT", bound=BaseModel)
EntityId = Union[str, ObjectId]


class BaseRepository(Generic[EntityT]):
    """Typed wrapper over one collection; documents come back as entities."""

    def __init__(self, db: Database, collection_name: str, entity: Type[EntityT]):
        self.db = db
        self.collection: Collection = db[collection_name]
        self.entity = entity

    def find_by_id(self, entity_id: EntityId) -> Optional[EntityT]:
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        return self._to_model(self.collection.find_one({"_id": identifier}))

    def find_one(self, query: Mapping[str, Any]) -> Optional[EntityT]:
        return self._to_model(self.collection.find_one(query))

    def insert_one(self, entity: EntityT) -> EntityT:
        """Insert an entity; both timestamps start out equal."""
        doc = entity.model_dump(by_alias=True, exclude_none=True)
        doc.setdefault("createdAt", utcnow())
        doc["updatedAt"] = doc["createdAt"]
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        return self._to_model(doc)

    def update_one(self, entity_id: EntityId, updates: Dict[str, Any]) -> bool:
        return self._update_by_id(entity_id, {"$set": dict(updates)})

    def unset_fields(self, entity_id: EntityId, *fields: str) -> bool:
        return self._update_by_id(entity_id, {"$unset": dict.fromkeys(fields, "")})

    def _update_by_id(self, entity_id: EntityId, update: Dict[str, Any]) -> bool:
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return False
        update.setdefault("$set", {})["updatedAt"] = utcnow()
        result = self.collection.update_one({"_id": identifier}, update)
        return result.matched_count > 0

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[EntityT]:
        if not doc:
            return None
        return self.entity.model_validate(doc)

    @staticmethod
    def _to_object_id(value: Optional[EntityId]) -> Optional[ObjectId]:
        if value is None or isinstance(value, ObjectId):
            return value
        try:
            return ObjectId(value)
        except (InvalidId, TypeError):
            return None
