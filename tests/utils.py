"""Test helpers shared across test modules."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

from elasticsearch import NotFoundError


def not_found_error(message: str = "not_found") -> NotFoundError:
    """Build the exception the client raises for a 404."""
    return NotFoundError(message, meta=MagicMock(status=404), body={"found": False})


class FakeElasticsearch:
    """In-memory stand-in for the document APIs of ``elasticsearch.Elasticsearch``."""

    def __init__(self) -> None:
        self.docs: dict[tuple[str, str], dict[str, Any]] = {}
        self.closed = False
        self.indices = MagicMock()
        self.cluster = MagicMock()

    def get(self, *, index: str, id: str) -> dict[str, Any]:
        if (index, id) not in self.docs:
            raise not_found_error(f"{index}/{id}")
        return {"_index": index, "_id": id, "found": True, "_source": dict(self.docs[(index, id)])}

    def index(self, *, index: str, id: str, document: dict[str, Any]) -> dict[str, Any]:
        result = "updated" if (index, id) in self.docs else "created"
        self.docs[(index, id)] = dict(document)
        return {"_index": index, "_id": id, "result": result}

    def update(self, *, index: str, id: str, doc: dict[str, Any]) -> dict[str, Any]:
        if (index, id) not in self.docs:
            raise not_found_error(f"{index}/{id}")
        self.docs[(index, id)].update(doc)
        return {"_index": index, "_id": id, "result": "updated"}

    def delete(self, *, index: str, id: str) -> dict[str, Any]:
        if (index, id) not in self.docs:
            raise not_found_error(f"{index}/{id}")
        del self.docs[(index, id)]
        return {"_index": index, "_id": id, "result": "deleted"}

    def close(self) -> None:
        self.closed = True
