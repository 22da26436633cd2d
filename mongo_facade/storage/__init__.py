"""Connection caching and the repository built on top of it."""

from __future__ import annotations

from mongo_facade.config import MongoConfig, load_config
from mongo_facade.storage.mongo_client import CacheState, ConnectionCache
from mongo_facade.storage.repository import DocumentRepository


def create_repository(config: MongoConfig | None = None) -> DocumentRepository:
    """Build a repository with its own ConnectionCache.

    Loads configuration from the environment when none is given. Share
    the returned repository (or its cache) across the application;
    building one per request defeats the connection cache.
    """
    config = config or load_config()
    return DocumentRepository(ConnectionCache(config), config)


__all__ = [
    "CacheState",
    "ConnectionCache",
    "DocumentRepository",
    "create_repository",
]
