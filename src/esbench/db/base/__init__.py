"""Base binding interface: Abstract classes shared by datastore bindings."""

from esbench.db.base.adapter import DB, AdapterHealth, Record, Status
from esbench.db.base.exceptions import (
    CleanupError,
    ConfigurationError,
    DBError,
    DocumentNotFoundError,
    DocumentSerializationError,
    ErrorKind,
    InitializationError,
    classify,
)
from esbench.db.base.registry import DBNotFoundError, DBRegistry

__all__ = [
    "DB",
    "AdapterHealth",
    "CleanupError",
    "ConfigurationError",
    "DBError",
    "DBNotFoundError",
    "DBRegistry",
    "DocumentNotFoundError",
    "DocumentSerializationError",
    "ErrorKind",
    "InitializationError",
    "Record",
    "Status",
    "classify",
]
