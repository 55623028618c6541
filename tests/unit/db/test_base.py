"""Tests for the binding contract: status, error kinds and the registry."""

from __future__ import annotations

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import SerializationError
from utils import not_found_error

from esbench.db import ElasticsearchDB, registry
from esbench.db.base import (
    DB,
    ConfigurationError,
    DBNotFoundError,
    DBRegistry,
    DocumentNotFoundError,
    DocumentSerializationError,
    ErrorKind,
    InitializationError,
    Status,
    classify,
)


class _NullDB(DB):
    """Minimal binding used to exercise the base class."""

    @property
    def name(self) -> str:
        return "null"

    def init(self) -> None:
        self.initialized = True

    def cleanup(self) -> None:
        self.cleaned = True

    def read(self, table, key, fields, result):
        return Status.NOT_FOUND

    def scan(self, table, start_key, record_count, fields, result):
        return Status.NOT_FOUND

    def update(self, table, key, values):
        return Status.NOT_FOUND

    def insert(self, table, key, values):
        return Status.OK

    def delete(self, table, key):
        return Status.OK


# ── Status ───────────────────────────────────────────────────────────────────


class TestStatus:
    def test_only_ok_is_ok(self) -> None:
        assert Status.OK.is_ok()
        assert not Status.NOT_FOUND.is_ok()
        assert not Status.ERROR.is_ok()

    def test_str_and_description(self) -> None:
        assert str(Status.NOT_FOUND) == "NOT_FOUND"
        assert Status.ERROR.description


# ── Error kinds ──────────────────────────────────────────────────────────────


class TestErrorKind:
    @pytest.mark.parametrize(
        ("exc", "kind"),
        [
            (DocumentNotFoundError("gone"), ErrorKind.NOT_FOUND),
            (not_found_error(), ErrorKind.NOT_FOUND),
            (ConfigurationError("bad"), ErrorKind.CONFIGURATION),
            (DocumentSerializationError("bad doc"), ErrorKind.SERIALIZATION),
            (SerializationError("bad json"), ErrorKind.SERIALIZATION),
            (TypeError("not a str"), ErrorKind.SERIALIZATION),
            (ESConnectionError("refused"), ErrorKind.TRANSPORT),
            (InitializationError("no client"), ErrorKind.TRANSPORT),
            (RuntimeError("boom"), ErrorKind.TRANSPORT),
        ],
    )
    def test_classify(self, exc: Exception, kind: ErrorKind) -> None:
        assert classify(exc) is kind

    def test_to_status(self) -> None:
        assert ErrorKind.NOT_FOUND.to_status() is Status.NOT_FOUND
        for kind in (ErrorKind.TRANSPORT, ErrorKind.SERIALIZATION, ErrorKind.CONFIGURATION):
            assert kind.to_status() is Status.ERROR


# ── DB base ──────────────────────────────────────────────────────────────────


class TestDBBase:
    def test_context_manager(self) -> None:
        with _NullDB() as db:
            assert db.initialized
        assert db.cleaned

    def test_connect_defaults_to_init(self) -> None:
        db = _NullDB()
        db.connect()
        assert db.initialized

    def test_default_health(self) -> None:
        health = _NullDB().health()
        assert health.status == "degraded"
        assert "null" in (health.message or "")


# ── Registry ─────────────────────────────────────────────────────────────────


class TestDBRegistry:
    def test_register_and_create(self) -> None:
        reg = DBRegistry()
        reg.register("null", _NullDB)
        db = reg.create("null", {"a": "b"})
        assert isinstance(db, _NullDB)
        assert db.settings == {"a": "b"}
        assert reg.registered == ["null"]

    def test_unknown_binding(self) -> None:
        reg = DBRegistry()
        reg.register("null", _NullDB)
        with pytest.raises(DBNotFoundError, match="null"):
            reg.get("mongodb")

    def test_overwrite_registration(self) -> None:
        reg = DBRegistry()
        reg.register("x", _NullDB)
        reg.register("x", ElasticsearchDB)
        assert reg.get("x") is ElasticsearchDB

    def test_default_registry_has_elasticsearch(self) -> None:
        assert {"elasticsearch", "elasticsearch7"} <= set(registry.registered)
        assert registry.get("elasticsearch7") is registry.get("elasticsearch") is ElasticsearchDB
        db = registry.create("elasticsearch7", {"es.remote": "true"})
        assert isinstance(db, ElasticsearchDB)
        assert db.settings.remote is True
