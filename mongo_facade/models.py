"""Immutable response envelopes and request models.

Every repository operation answers with one of the envelope dataclasses
below. They are frozen to prevent accidental mutation, and each has a
to_dict() method that produces the plain mapping shape callers expect:

    success:  {"data" | "result" | "message": ..., "code": 0}
    failure:  {"error": ..., "message": ..., "code": <0, "errorObject": ...}

Fields left unset are omitted from to_dict() output; a write result
explicitly set to None is kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

CODE_OK = 0
CODE_NO_RESULTS = -1
CODE_UNKNOWN_ERROR = -4


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks an envelope field that was never set, as opposed to set to None.
UNSET: Any = _Unset()


@dataclass(frozen=True)
class Success:
    """A successful operation.

    Attributes:
        data: Documents read from the store (a single document or a list).
        result: Driver-side outcome of a write (updated document, counts).
            Emitted by to_dict() whenever set, even to None.
        message: Human-readable status for writes and deletes.
        code: Always CODE_OK.
    """

    data: Any = None
    result: Any = UNSET
    message: str | None = None
    code: int = CODE_OK

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict:
        """Convert to the plain envelope mapping, dropping unset fields."""
        doc: dict[str, Any] = {}
        if self.data is not None:
            doc["data"] = self.data
        if self.result is not UNSET:
            doc["result"] = self.result
        if self.message is not None:
            doc["message"] = self.message
        doc["code"] = self.code
        return doc


@dataclass(frozen=True)
class Page:
    """One page of a paginated read.

    Attributes:
        data: Documents on this page.
        total_count: Number of documents matching the filter overall.
        page: 1-based page number that was requested.
        page_size: Maximum number of documents per page.
        total_pages: ceil(total_count / page_size).
    """

    data: list
    total_count: int
    page: int
    page_size: int
    total_pages: int
    code: int = CODE_OK

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "data": self.data,
            "totalCount": self.total_count,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "code": self.code,
        }


@dataclass(frozen=True)
class Failure:
    """A failed or empty outcome.

    Attributes:
        error: Short error label ("No Results", "Unknown error").
        message: Human-readable explanation.
        code: Negative failure class (CODE_NO_RESULTS, CODE_UNKNOWN_ERROR).
        error_object: The underlying exception, for diagnostics only.
    """

    error: str
    message: str
    code: int
    error_object: BaseException | None = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        doc: dict[str, Any] = {
            "error": self.error,
            "message": self.message,
            "code": self.code,
        }
        if self.error_object is not None:
            doc["errorObject"] = self.error_object
        return doc


NO_RESULTS = Failure(
    error="No Results",
    message="No documents matched the query.",
    code=CODE_NO_RESULTS,
)


@dataclass(frozen=True)
class QueryUpdatePair:
    """A filter and the fields to $set on the first matching document."""

    query: Mapping[str, Any]
    data: Mapping[str, Any]


@dataclass(frozen=True)
class FuzzyOptions:
    """Edit-distance tolerance for an Atlas Search text query.

    Attributes:
        max_edits: Maximum single-character edits per term (1 or 2).
        prefix_length: Leading characters that must match exactly.
        max_expansions: Maximum variations generated per term.
    """

    max_edits: int = 2
    prefix_length: int = 3
    max_expansions: int = 100

    def to_document(self) -> dict:
        """Convert to the ``fuzzy`` sub-document of a $search stage."""
        return {
            "maxEdits": self.max_edits,
            "prefixLength": self.prefix_length,
            "maxExpansions": self.max_expansions,
        }
