"""Configuration for the MongoDB data-access facade.

Centralizes the connection string, the two connection timeouts handed
to the driver, and the defaults the repository applies to reads and
search. All config is loaded from environment variables at runtime
(no hardcoded secrets).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlparse

VALID_SCHEMES: tuple[str, ...] = ("mongodb", "mongodb+srv")


@dataclass(frozen=True)
class MongoConfig:
    uri: str = ""
    server_selection_timeout_ms: int = 30000
    socket_timeout_ms: int = 45000
    search_index: str = "default"
    sort_field: str = "data.date"

    def client_options(self) -> dict[str, int]:
        """Keyword arguments passed unchanged to the MongoDB client."""
        return {
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "socketTimeoutMS": self.socket_timeout_ms,
        }


def _read_timeout(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def validate_uri(uri: str) -> None:
    """Check that a connection string is present and has a MongoDB scheme.

    Raises:
        ValueError: If the URI is empty or has an invalid scheme.
    """
    if not uri:
        raise ValueError("MONGODB_URI environment variable is required")

    parsed = urlparse(uri)
    if parsed.scheme not in VALID_SCHEMES:
        raise ValueError(
            f"Invalid MongoDB URI scheme: '{parsed.scheme}'. "
            "Expected 'mongodb' or 'mongodb+srv'."
        )


def load_config() -> MongoConfig:
    """Load and validate configuration from environment variables.

    Reads MONGODB_URI (required), MONGODB_SERVER_SELECTION_TIMEOUT_MS,
    MONGODB_SOCKET_TIMEOUT_MS and MONGODB_SEARCH_INDEX. Only the URI
    scheme is checked here; the driver owns the rest of the parsing.

    Returns:
        A frozen MongoConfig with validated settings.

    Raises:
        ValueError: If MONGODB_URI is missing or has an invalid scheme,
            or a timeout is not a positive integer.
    """
    mongo_uri = os.environ.get("MONGODB_URI", "")
    validate_uri(mongo_uri)

    defaults = MongoConfig()
    return MongoConfig(
        uri=mongo_uri,
        server_selection_timeout_ms=_read_timeout(
            "MONGODB_SERVER_SELECTION_TIMEOUT_MS",
            defaults.server_selection_timeout_ms,
        ),
        socket_timeout_ms=_read_timeout(
            "MONGODB_SOCKET_TIMEOUT_MS", defaults.socket_timeout_ms
        ),
        search_index=os.environ.get(
            "MONGODB_SEARCH_INDEX", defaults.search_index
        ),
    )
