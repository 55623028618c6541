"""Binding-specific exceptions and the internal error classification.

Startup failures (configuration, provisioning, cleanup) are raised to the
harness.  Failures during a data operation are classified into an
:class:`ErrorKind` and reported through :class:`~esbench.db.base.adapter.Status`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from elasticsearch import NotFoundError, SerializationError

if TYPE_CHECKING:
    from esbench.db.base.adapter import Status


class DBError(Exception):
    """Base exception for binding errors."""


class ConfigurationError(DBError):
    """Raised when binding configuration is invalid."""


class InitializationError(DBError):
    """Raised when the binding cannot reach the backend or provision its index."""


class CleanupError(DBError):
    """Raised when releasing the client handle fails."""


class DocumentNotFoundError(DBError):
    """Raised when a requested document does not exist."""


class DocumentSerializationError(DBError):
    """Raised when a document cannot be converted to or from a record."""


class ErrorKind(str, Enum):
    """What went wrong during a data operation."""

    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    CONFIGURATION = "configuration"

    def to_status(self) -> Status:
        """Collapse the kind into the harness's tri-state status."""
        from esbench.db.base.adapter import Status

        if self is ErrorKind.NOT_FOUND:
            return Status.NOT_FOUND
        return Status.ERROR


def classify(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a data operation to an :class:`ErrorKind`.

    Anything unrecognised (connection resets, timeouts, rejected requests)
    counts as a transport failure.
    """
    if isinstance(exc, DocumentNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ConfigurationError):
        return ErrorKind.CONFIGURATION
    if isinstance(exc, (DocumentSerializationError, TypeError, ValueError)):
        return ErrorKind.SERIALIZATION

    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, SerializationError):
        return ErrorKind.SERIALIZATION
    return ErrorKind.TRANSPORT
