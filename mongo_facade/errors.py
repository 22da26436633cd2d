"""Errors raised by the data-access facade."""

from __future__ import annotations

from mongo_facade.models import CODE_UNKNOWN_ERROR, Failure


class DocumentStoreError(Exception):
    """Base class for errors raised by mongo_facade."""


class ConnectionReleasedError(DocumentStoreError):
    """Raised to waiters of a connection attempt abandoned by release()."""


class UnknownStoreError(DocumentStoreError):
    """Wraps an unexpected driver failure in a code -4 envelope.

    The original exception is kept both as ``error_object`` on the
    envelope and as ``__cause__``.
    """

    def __init__(self, error_object: BaseException) -> None:
        self.envelope = Failure(
            error="Unknown error",
            message="An unknown error occurred.",
            code=CODE_UNKNOWN_ERROR,
            error_object=error_object,
        )
        super().__init__(f"{self.envelope.message} ({error_object})")

    @property
    def code(self) -> int:
        return self.envelope.code

    def to_dict(self) -> dict:
        return self.envelope.to_dict()
