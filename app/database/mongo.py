"""MongoDB connection helpers."""

from __future__ import annotations

import logging
from typing import Dict

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from app.config import settings

logger = logging.getLogger(__name__)

_clients: Dict[str, MongoClient] = {}


def get_client(uri: str) -> MongoClient:
    """One pooled client per URI; datetimes come back UTC-aware."""
    client = _clients.get(uri)
    if client is None:
        client = _clients[uri] = MongoClient(uri, tz_aware=True)
    return client


def get_database(uri: str, db_name: str) -> Database:
    return get_client(uri)[db_name]


def get_db() -> Database:
    """FastAPI dependency for the configured database."""
    return get_database(settings.mongo_uri, settings.DB_NAME)


def ensure_indexes(db: Database) -> None:
    """Create the unique indexes the user collection relies on."""
    db.users.create_index([("name", ASCENDING)], unique=True, name="name_unique")
    db.users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
    db.songs.create_index([("artist", ASCENDING)], name="artist_idx")


def connect_database(db: Database) -> None:
    """Ping the server and prepare indexes; raises if MongoDB is unreachable."""
    try:
        db.client.admin.command("ping")
        ensure_indexes(db)
    except Exception:
        logger.exception("Failed to connect to the database")
        raise
    logger.info("Connected to the database successfully", extra={"db": db.name})


def close_clients() -> None:
    for client in _clients.values():
        client.close()
    _clients.clear()
