"""Argument validation for repository operations.

Runs before the repository touches the driver, so obviously bad calls
fail fast with a ValueError instead of a server round-trip. Catches
issues like:
- Empty database or collection names
- Characters MongoDB forbids in namespace names
- Page numbers or page sizes below 1

Errors block the operation. Warnings are logged but don't block - they
flag unusual but legal requests (e.g. a very large page size, or a
write aimed at a system collection).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DB_NAME_FORBIDDEN = frozenset('/\\. "$\0')
COLLECTION_NAME_FORBIDDEN = frozenset("$\0")
MAX_DB_NAME_LENGTH = 63
LARGE_PAGE_SIZE = 1000


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating one set of arguments.

    Attributes:
        valid: True if no errors (warnings are OK).
        errors: Issues that should prevent the operation.
        warnings: Unusual arguments that are still acceptable.
    """

    valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]


def _result(errors: list[str], warnings: list[str]) -> ValidationResult:
    return ValidationResult(
        valid=len(errors) == 0,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def validate_namespace(db_name: str, collection: str) -> ValidationResult:
    """Validate a logical database name and a collection name.

    Checks:
    - Both names are non-empty strings
    - Database name avoids / \\ . space " $ and NUL
    - Database name is at most 63 characters
    - Collection name avoids $ and NUL
    - Collection name starting with "system." (warns)

    Args:
        db_name: Logical database to select on the shared connection.
        collection: Collection within that database.

    Returns:
        ValidationResult with valid=True if no errors found.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(db_name, str) or not db_name:
        errors.append("database name must be a non-empty string")
    else:
        bad = sorted(set(db_name) & DB_NAME_FORBIDDEN)
        if bad:
            errors.append(
                f"database name '{db_name}' contains forbidden "
                f"characters {bad}"
            )
        if len(db_name) > MAX_DB_NAME_LENGTH:
            errors.append(
                f"database name '{db_name}' exceeds "
                f"{MAX_DB_NAME_LENGTH} characters"
            )

    if not isinstance(collection, str) or not collection:
        errors.append("collection name must be a non-empty string")
    else:
        if set(collection) & COLLECTION_NAME_FORBIDDEN:
            errors.append(
                f"collection name '{collection}' contains '$' or NUL"
            )
        if collection.startswith("system."):
            warnings.append(
                f"collection '{collection}' is a system collection"
            )

    return _result(errors, warnings)


def validate_pagination(page: int, page_size: int) -> ValidationResult:
    """Validate 1-based pagination arguments.

    Checks:
    - page is an integer >= 1
    - page_size is an integer >= 1
    - page_size above LARGE_PAGE_SIZE (warns)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(page, int) or isinstance(page, bool) or page < 1:
        errors.append(f"page must be an integer >= 1, got {page!r}")
    if (
        not isinstance(page_size, int)
        or isinstance(page_size, bool)
        or page_size < 1
    ):
        errors.append(
            f"page_size must be an integer >= 1, got {page_size!r}"
        )
    elif page_size > LARGE_PAGE_SIZE:
        warnings.append(
            f"page_size {page_size} is larger than {LARGE_PAGE_SIZE}"
        )

    return _result(errors, warnings)


def validate_limit(limit: int) -> ValidationResult:
    """Validate a result limit for search and sampling pipelines."""
    errors: list[str] = []
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        errors.append(f"limit must be an integer >= 1, got {limit!r}")
    return _result(errors, [])


def require_valid(*results: ValidationResult) -> None:
    """Log warnings and raise if any result carries errors.

    Raises:
        ValueError: With all error messages joined by "; ".
    """
    errors = [err for result in results for err in result.errors]
    for result in results:
        for warning in result.warnings:
            logger.warning("Validation warning: %s", warning)
    if errors:
        raise ValueError("; ".join(errors))
