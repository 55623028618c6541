"""Base binding: Abstract interface between the benchmark harness and a datastore.

The harness creates one binding instance per worker thread and drives it
through a fixed lifecycle:

  1. ``init()`` once, before any operation
  2. any number of ``read`` / ``scan`` / ``update`` / ``insert`` / ``delete``
  3. ``cleanup()`` once, when the worker finishes

Data operations return a :class:`Status` and never raise.  Lifecycle hooks
raise :class:`~esbench.db.base.exceptions.DBError` subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from esbench.models.fields import ByteIterator

Record = dict[str, ByteIterator]
"""One stored document: field name to field value."""


class Status(Enum):
    """Result of a data operation as seen by the harness."""

    OK = ("OK", "The operation completed successfully.")
    NOT_FOUND = ("NOT_FOUND", "The requested record was not found.")
    ERROR = ("ERROR", "The operation failed.")

    def __init__(self, label: str, description: str) -> None:
        self.label = label
        self.description = description

    def is_ok(self) -> bool:
        return self is Status.OK

    def __str__(self) -> str:
        return self.label


class AdapterHealth(BaseModel):
    """Health status of a binding's backend."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    cluster_name: str | None = Field(default=None, description="Name reported by the backend")
    number_of_nodes: int = Field(default=0, description="Nodes reported by the backend")
    message: str | None = Field(default=None, description="Additional health message")


class DB(ABC):
    """Abstract base class for datastore bindings.

    Subclasses receive their configuration explicitly through the
    constructor; nothing is looked up from process-wide state.

    Example:
        >>> with ElasticsearchDB(settings) as db:
        ...     db.insert("usertable", "user1", {"field0": StringByteIterator("v")})
    """

    def __init__(self, settings: Any = None) -> None:
        self.settings = settings

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique binding name (e.g., 'elasticsearch')."""

    @abstractmethod
    def init(self) -> None:
        """Prepare the binding for use.  Called once per instance."""

    def connect(self) -> None:
        """Open the backend connection without provisioning anything.

        Bindings that cannot separate the two steps run the full ``init()``.
        """
        self.init()

    @abstractmethod
    def cleanup(self) -> None:
        """Release resources held by the binding.  Called once per instance."""

    @abstractmethod
    def read(
        self,
        table: str,
        key: str,
        fields: set[str] | None,
        result: dict[str, ByteIterator],
    ) -> Status:
        """Read a record into ``result``.

        Args:
            table: Name of the table (index).
            key: Record key.
            fields: Fields to read, or ``None`` for all of them.
            result: Filled with field/value pairs on success.
        """

    @abstractmethod
    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[Record],
    ) -> Status:
        """Read records starting at ``start_key``, appending each to ``result``."""

    @abstractmethod
    def update(self, table: str, key: str, values: Mapping[str, ByteIterator]) -> Status:
        """Overwrite the given fields of an existing record, keeping the others."""

    @abstractmethod
    def insert(self, table: str, key: str, values: Mapping[str, ByteIterator]) -> Status:
        """Store a new record."""

    @abstractmethod
    def delete(self, table: str, key: str) -> Status:
        """Remove a record."""

    def health(self) -> AdapterHealth:
        """Report backend health.  Never raises."""
        return AdapterHealth(status="degraded", message=f"{self.name} does not report health")

    def __enter__(self) -> DB:
        self.init()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()
