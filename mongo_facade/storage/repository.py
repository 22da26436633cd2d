"""MongoDB data-access facade.

Each public coroutine performs the same four steps:

    1. Acquire the shared client from the ConnectionCache
    2. Select the logical database and collection named by the caller
    3. Issue exactly one driver call (or one batched call)
    4. Normalize the outcome into a Success / Page / Failure envelope

Documents are schemaless mappings; the repository never inspects or
enforces their shape.

Failure policy: connection errors from the cache propagate unchanged.
Any other driver error is raised as UnknownStoreError, which carries a
code -4 Failure envelope with the original exception attached. An empty
read is never an error; an empty search answers with NO_RESULTS.
"""

from __future__ import annotations

import contextlib
import logging
import math
from typing import Any, Iterable, Iterator, Mapping, Sequence, Union

from pymongo import ASCENDING, ReturnDocument, UpdateOne
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure, PyMongoError

from mongo_facade.config import MongoConfig
from mongo_facade.errors import UnknownStoreError
from mongo_facade.models import (
    NO_RESULTS,
    Failure,
    FuzzyOptions,
    Page,
    QueryUpdatePair,
    Success,
)
from mongo_facade.storage.mongo_client import ConnectionCache
from mongo_facade.validation.validators import (
    require_valid,
    validate_limit,
    validate_namespace,
    validate_pagination,
)

logger = logging.getLogger(__name__)

Document = Mapping[str, Any]
Projection = Union[Mapping[str, Any], Sequence[str], None]
IndexKeys = Union[str, Mapping[str, Any], Sequence[tuple[str, Any]]]

NAMESPACE_NOT_FOUND = 26
COLLECTION_MISSING_MESSAGE = "Collection does not exist, or already deleted"


@contextlib.contextmanager
def _driver_errors() -> Iterator[None]:
    """Re-raise unexpected driver failures as UnknownStoreError."""
    try:
        yield
    except PyMongoError as exc:
        raise UnknownStoreError(exc) from exc


def _is_namespace_not_found(exc: OperationFailure) -> bool:
    return exc.code == NAMESPACE_NOT_FOUND or "ns not found" in str(exc)


def _as_update(update_data: Any) -> Any:
    """Wrap a plain field mapping in $set; operator documents pass through."""
    if isinstance(update_data, Mapping) and update_data and not any(
        str(key).startswith("$") for key in update_data
    ):
        return {"$set": dict(update_data)}
    return update_data


def _as_pair(pair: QueryUpdatePair | Mapping[str, Any]) -> QueryUpdatePair:
    if isinstance(pair, QueryUpdatePair):
        return pair
    missing = [key for key in ("query", "data") if key not in pair]
    if missing:
        raise ValueError(
            f"bulk update entry is missing {', '.join(missing)}: {pair!r}"
        )
    return QueryUpdatePair(query=pair["query"], data=pair["data"])


def _index_keys(fields: IndexKeys) -> Any:
    if isinstance(fields, Mapping):
        return list(fields.items())
    return fields


class DocumentRepository:
    """Data-access facade over a shared, lazily established connection.

    Holds no connection state of its own: the ConnectionCache passed in
    owns the client, so several repositories may share one cache.
    """

    def __init__(self, cache: ConnectionCache, config: MongoConfig) -> None:
        """Initialize with the connection cache and read/search defaults."""
        self._cache = cache
        self._config = config

    async def get_database(self, db_name: str) -> AsyncDatabase:
        """Select a logical database on the shared connection."""
        client = await self._cache.acquire()
        return client[db_name]

    async def get_collection(
        self, db_name: str, collection: str
    ) -> AsyncCollection:
        """Validate the namespace and select a collection within it.

        Raises:
            ValueError: If either name is empty or illegal.
        """
        require_valid(validate_namespace(db_name, collection))
        db = await self.get_database(db_name)
        return db[collection]

    async def get_data_by_query(
        self,
        db_name: str,
        collection: str,
        query: Document,
        projection: Projection = None,
        is_multiple: bool = False,
    ) -> Success | None:
        """Read one document, or all matching documents, for a filter.

        Results are sorted ascending on the configured sort field.

        Args:
            db_name: Logical database name.
            collection: Collection name.
            query: MongoDB filter document.
            projection: Fields to include or exclude; None returns all.
            is_multiple: Return every match as a list instead of the first.

        Returns:
            Success with the document (or list of documents). When
            is_multiple is False and nothing matches, returns None.
            When is_multiple is True and nothing matches, data is [].
        """
        coll = await self.get_collection(db_name, collection)
        sort = [(self._config.sort_field, ASCENDING)]
        with _driver_errors():
            if is_multiple:
                cursor = coll.find(query, projection or None).sort(sort)
                documents = await cursor.to_list()
                return Success(data=documents)

            document = await coll.find_one(
                query, projection or None, sort=sort
            )
        if document is None:
            return None
        return Success(data=document)

    async def get_data_with_pagination(
        self,
        db_name: str,
        collection: str,
        query: Document | None = None,
        page: int = 1,
        page_size: int = 10,
        projection: Projection = None,
    ) -> Page:
        """Read one page of documents and the total match count.

        Pages are 1-based. The count and the page are two separate
        driver calls, so they may disagree under concurrent writes.
        """
        require_valid(validate_pagination(page, page_size))
        coll = await self.get_collection(db_name, collection)
        query = query or {}
        skip = (page - 1) * page_size

        with _driver_errors():
            cursor = coll.find(query, projection or None)
            documents = await cursor.skip(skip).limit(page_size).to_list()
            total_count = await coll.count_documents(query)

        return Page(
            data=documents,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total_count / page_size),
        )

    async def find_and_update_by_query(
        self,
        db_name: str,
        collection: str,
        query: Document,
        update_data: Any,
        upsert: bool = True,
        return_new: bool = True,
    ) -> Success:
        """Atomically update the first document matching a filter.

        A plain field mapping is applied with $set; update documents
        that already use operators ($inc, $push, ...) are sent as-is.

        Returns:
            Success whose result is the document after the update (or
            before it, when return_new is False).
        """
        coll = await self.get_collection(db_name, collection)
        with _driver_errors():
            result = await coll.find_one_and_update(
                query,
                _as_update(update_data),
                upsert=upsert,
                return_document=(
                    ReturnDocument.AFTER if return_new else ReturnDocument.BEFORE
                ),
            )
        logger.info("Updated one document in %s.%s", db_name, collection)
        return Success(message="Query updated successfully.", result=result)

    async def bulk_find_and_update_by_queries(
        self,
        db_name: str,
        collection: str,
        query_data_pairs: Iterable[QueryUpdatePair | Mapping[str, Any]],
        upsert: bool = True,
    ) -> Success:
        """$set fields on one document per filter in a single bulk_write.

        Accepts QueryUpdatePair objects or {"query": ..., "data": ...}
        mappings. An empty batch is answered without a round-trip.

        Returns:
            Success whose result holds matched/modified/upserted counts.
        """
        require_valid(validate_namespace(db_name, collection))
        pairs = [_as_pair(pair) for pair in query_data_pairs]
        if not pairs:
            return Success(
                message="Queries updated successfully.",
                result={
                    "matched_count": 0,
                    "modified_count": 0,
                    "upserted_count": 0,
                },
            )

        coll = await self.get_collection(db_name, collection)
        operations = [
            UpdateOne(pair.query, {"$set": dict(pair.data)}, upsert=upsert)
            for pair in pairs
        ]
        with _driver_errors():
            result = await coll.bulk_write(operations)

        logger.info(
            "Bulk updated %s.%s (%d matched, %d modified, %d upserted)",
            db_name,
            collection,
            result.matched_count,
            result.modified_count,
            result.upserted_count,
        )
        return Success(
            message="Queries updated successfully.",
            result={
                "matched_count": result.matched_count,
                "modified_count": result.modified_count,
                "upserted_count": result.upserted_count,
            },
        )

    async def delete_by_query(
        self, db_name: str, collection: str, query: Document
    ) -> Success:
        """Delete the first document matching a filter."""
        coll = await self.get_collection(db_name, collection)
        with _driver_errors():
            result = await coll.delete_one(query)
        logger.info(
            "Deleted %d document(s) from %s.%s",
            result.deleted_count,
            db_name,
            collection,
        )
        return Success(
            message="Query deleted successfully.",
            result={"deleted_count": result.deleted_count},
        )

    async def delete_all_data(self, db_name: str, collection: str) -> Success:
        """Drop a collection.

        Dropping a collection that does not exist is a success, whether
        the server reports NamespaceNotFound or the collection is simply
        not listed.

        Raises:
            UnknownStoreError: Any other driver failure.
        """
        require_valid(validate_namespace(db_name, collection))
        db = await self.get_database(db_name)
        with _driver_errors():
            existing = await db.list_collection_names(
                filter={"name": collection}
            )
            if not existing:
                logger.info(
                    "Collection %s.%s does not exist", db_name, collection
                )
                return Success(message=COLLECTION_MISSING_MESSAGE)
            try:
                await db.command("drop", collection)
            except OperationFailure as exc:
                if not _is_namespace_not_found(exc):
                    raise
                logger.info(
                    "Collection %s.%s already dropped", db_name, collection
                )
                return Success(message=COLLECTION_MISSING_MESSAGE)

        logger.info("Dropped collection %s.%s", db_name, collection)
        return Success(message="All data deleted successfully.")

    async def get_all_data(
        self, db_name: str, collection: str, projection: Projection = None
    ) -> Success:
        """Read every document in a collection."""
        coll = await self.get_collection(db_name, collection)
        with _driver_errors():
            documents = await coll.find({}, projection or None).to_list()
        return Success(data=documents)

    async def add_data(
        self, db_name: str, collection: str, data: Document
    ) -> Success:
        """Insert one document at the collection root.

        Returns:
            Success whose data is the stored document including its _id.
        """
        coll = await self.get_collection(db_name, collection)
        document = dict(data)
        with _driver_errors():
            result = await coll.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(
            "Inserted document %s into %s.%s",
            result.inserted_id,
            db_name,
            collection,
        )
        return Success(data=document)

    async def atlas_search(
        self,
        db_name: str,
        collection: str,
        query_text: str,
        path: str | Sequence[str],
        is_multiple: bool = False,
        fuzzy: FuzzyOptions | None = None,
        limit: int = 10,
    ) -> Success | Failure:
        """Fuzzy full-text search through the collection's search index.

        Builds a $search text stage on the configured index (edit
        distance and prefix rules from ``fuzzy``) followed by $limit.

        Returns:
            Success with the best hit, or all hits when is_multiple is
            True. NO_RESULTS (code -1) when nothing matches.

        Raises:
            UnknownStoreError: The search failed, e.g. no search index.
        """
        require_valid(validate_limit(limit))
        fuzzy = fuzzy or FuzzyOptions()
        pipeline = [
            {
                "$search": {
                    "index": self._config.search_index,
                    "text": {
                        "query": query_text,
                        "path": path,
                        "fuzzy": fuzzy.to_document(),
                    },
                }
            },
            {"$limit": limit},
        ]

        coll = await self.get_collection(db_name, collection)
        try:
            with _driver_errors():
                cursor = await coll.aggregate(pipeline)
                hits = await cursor.to_list()
        except UnknownStoreError as exc:
            logger.error("Search error: %s", exc.envelope.error_object)
            raise

        if not hits:
            return NO_RESULTS
        return Success(data=hits if is_multiple else hits[0])

    async def aggregate(
        self, db_name: str, collection: str, pipeline: Sequence[Document]
    ) -> list[dict]:
        """Run an aggregation pipeline and return every output document."""
        coll = await self.get_collection(db_name, collection)
        with _driver_errors():
            cursor = await coll.aggregate(list(pipeline))
            return await cursor.to_list()

    async def create_index(
        self,
        db_name: str,
        collection: str,
        fields: IndexKeys,
        **options: Any,
    ) -> str:
        """Create an index; options (unique, name, ...) go to the driver.

        Returns:
            The index name reported by the server.
        """
        coll = await self.get_collection(db_name, collection)
        with _driver_errors():
            name = await coll.create_index(_index_keys(fields), **options)
        logger.info("Ensured index %s on %s.%s", name, db_name, collection)
        return name

    async def get_random_distinct_documents(
        self,
        db_name: str,
        collection: str,
        query: Document,
        limit: int = 5,
        distinct_field: str = "data.information.job_title",
    ) -> list[dict]:
        """Sample up to ``limit`` matches, keeping one per distinct_field value.

        Sampling happens before grouping, so fewer than ``limit``
        documents come back when sampled documents share a value.
        """
        require_valid(validate_limit(limit))
        coll = await self.get_collection(db_name, collection)
        pipeline = [
            {"$match": dict(query)},
            {"$sample": {"size": limit}},
            {
                "$group": {
                    "_id": f"${distinct_field}",
                    "doc": {"$first": "$$ROOT"},
                }
            },
            {"$replaceRoot": {"newRoot": "$doc"}},
        ]
        with _driver_errors():
            cursor = await coll.aggregate(pipeline)
            return await cursor.to_list()

    async def close_connection(self) -> None:
        """Release the shared connection. Safe when none is open."""
        await self._cache.release()
