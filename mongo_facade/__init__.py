"""Async MongoDB data-access facade with a shared, memoized connection.

Example usage:

    from mongo_facade import ConnectionCache, DocumentRepository, load_config

    config = load_config()
    repo = DocumentRepository(ConnectionCache(config), config)

    found = await repo.get_data_by_query("app", "users", {"id": 42})
    await repo.close_connection()
"""

from mongo_facade.config import MongoConfig, load_config
from mongo_facade.errors import (
    ConnectionReleasedError,
    DocumentStoreError,
    UnknownStoreError,
)
from mongo_facade.logging_setup import configure_logging
from mongo_facade.models import (
    CODE_NO_RESULTS,
    CODE_OK,
    CODE_UNKNOWN_ERROR,
    NO_RESULTS,
    Failure,
    FuzzyOptions,
    Page,
    QueryUpdatePair,
    Success,
)
from mongo_facade.storage import (
    CacheState,
    ConnectionCache,
    DocumentRepository,
    create_repository,
)

__all__ = [
    "CODE_NO_RESULTS",
    "CODE_OK",
    "CODE_UNKNOWN_ERROR",
    "CacheState",
    "ConnectionCache",
    "ConnectionReleasedError",
    "DocumentRepository",
    "DocumentStoreError",
    "Failure",
    "FuzzyOptions",
    "MongoConfig",
    "NO_RESULTS",
    "Page",
    "QueryUpdatePair",
    "Success",
    "UnknownStoreError",
    "configure_logging",
    "create_repository",
    "load_config",
]
