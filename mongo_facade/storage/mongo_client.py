"""MongoDB connection caching.

A ConnectionCache holds at most one live AsyncMongoClient and at most
one in-flight connection attempt. Every repository operation asks the
cache for a client; the first caller starts the attempt and everyone
arriving while it is in flight awaits that same attempt, so a burst of
concurrent requests against a cold process opens a single connection.

The cache is an ordinary object owned by the application and passed to
DocumentRepository, rather than module-level state, so tests and
embedding applications control its lifetime explicitly.

No lock is needed under asyncio: acquire() checks for and registers the
pending attempt without an await in between.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Callable

from pymongo import AsyncMongoClient

from mongo_facade.config import MongoConfig
from mongo_facade.errors import ConnectionReleasedError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncMongoClient]

RELEASED_MESSAGE = "Connection was released while it was being established"


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    CONNECTING = "connecting"
    READY = "ready"


class ConnectionCache:
    """Memoizes a single shared MongoDB client across concurrent callers.

    States move EMPTY -> CONNECTING -> READY on a successful attempt,
    CONNECTING -> EMPTY on failure or release(), and READY -> EMPTY on
    release(). There is no retry; a failed acquire() leaves the cache
    EMPTY and the next acquire() starts over.
    """

    def __init__(
        self,
        config: MongoConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize with connection settings and a client constructor.

        Args:
            config: Connection string and timeouts for new clients.
            client_factory: Callable building a client from a URI and
                keyword options. Defaults to AsyncMongoClient.
        """
        self._config = config
        self._client_factory = client_factory or AsyncMongoClient
        self._handle: AsyncMongoClient | None = None
        self._pending: asyncio.Future | None = None
        self._generation = 0

    @property
    def state(self) -> CacheState:
        if self._handle is not None:
            return CacheState.READY
        if self._pending is not None:
            return CacheState.CONNECTING
        return CacheState.EMPTY

    async def acquire(self) -> AsyncMongoClient:
        """Return the shared client, connecting first if necessary.

        Returns immediately when a client is cached. Otherwise joins the
        in-flight attempt, starting one if none exists. Cancelling one
        waiter does not cancel the attempt for the others.

        Raises:
            pymongo.errors.PyMongoError: The connection attempt failed.
                Every caller waiting on that attempt gets the same error.
            ConnectionReleasedError: release() ran while connecting.
        """
        if self._handle is not None:
            return self._handle

        if self._pending is None:
            self._pending = asyncio.ensure_future(
                self._connect(self._generation)
            )
        pending = self._pending
        try:
            return await asyncio.shield(pending)
        except asyncio.CancelledError:
            # release() cancelled the attempt before it got going.
            if pending.cancelled():
                raise ConnectionReleasedError(RELEASED_MESSAGE) from None
            raise

    async def release(self) -> None:
        """Close the cached client and reset to EMPTY.

        Safe to call when nothing is connected. An attempt still in
        flight is cancelled, its client closed, and its waiters receive
        ConnectionReleasedError, so the next acquire() never runs
        alongside it.
        """
        handle = self._handle
        pending = self._pending
        self._handle = None
        self._pending = None
        self._generation += 1

        if pending is not None:
            pending.cancel()

        if handle is not None:
            await handle.close()
            logger.info("MongoDB connection closed")

    async def _connect(self, generation: int) -> AsyncMongoClient:
        logger.info("Creating new MongoDB connection")
        client = None
        try:
            client = self._client_factory(
                self._config.uri, **self._config.client_options()
            )
            # Constructing the client does not contact the server.
            await client.admin.command("ping")
        except BaseException as exc:
            released = generation != self._generation
            if not released:
                self._pending = None
            if client is not None:
                await client.close()
            if released:
                logger.info("Abandoned MongoDB connection attempt")
                raise ConnectionReleasedError(RELEASED_MESSAGE) from exc
            logger.error("MongoDB connection failed: %s", exc)
            raise

        if generation != self._generation:
            await client.close()
            raise ConnectionReleasedError(RELEASED_MESSAGE)

        self._handle = client
        self._pending = None
        logger.info("MongoDB connection ready")
        return client

    def __repr__(self) -> str:
        return f"ConnectionCache(state={self.state.value})"
