"""Elasticsearch binding: benchmark operations over the Elasticsearch REST API.

Uses the official ``elasticsearch`` client (v8+).  Each binding instance owns
one client, created in :meth:`ElasticsearchDB.init` and closed in
:meth:`ElasticsearchDB.cleanup`; the harness runs one instance per worker
thread, so nothing here is shared between threads.

Default properties::

    es.remote = false
    es.index.key = es.ycsb
    es.number_of_shards = 1
    es.number_of_replicas = 0
    es.hosts.list = localhost:9300
"""

from __future__ import annotations

import logging
import socket
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from elasticsearch import ApiError, Elasticsearch, TransportError

from esbench.config.settings import ElasticsearchSettings
from esbench.db.base.adapter import DB, AdapterHealth, Record, Status
from esbench.db.base.exceptions import (
    CleanupError,
    ConfigurationError,
    DocumentNotFoundError,
    DocumentSerializationError,
    ErrorKind,
    InitializationError,
    classify,
)
from esbench.models.fields import ByteIterator, StringByteIterator, get_string_map

logger = logging.getLogger(__name__)


class ElasticsearchDB(DB):
    """Benchmark binding for Elasticsearch.

    ``scan`` fetches the single document at ``start_key``; it does not walk a
    key range and ignores ``record_count``.

    ``insert`` and ``delete`` address documents by the per-call key unless
    ``es.document_id=index_key``, in which case every insert and delete
    targets the document whose id is the configured index name.

    Args:
        settings: Binding settings, or a flat property mapping.
    """

    def __init__(self, settings: ElasticsearchSettings | Mapping[str, Any] | None = None) -> None:
        if settings is None:
            settings = ElasticsearchSettings()
        elif not isinstance(settings, ElasticsearchSettings):
            settings = ElasticsearchSettings.from_properties(settings)
        super().__init__(settings)
        self.settings: ElasticsearchSettings = settings
        self._client: Elasticsearch | None = None

    @property
    def name(self) -> str:
        return "elasticsearch"

    @property
    def index_key(self) -> str:
        return self.settings.index_key

    # ── Lifecycle ────────────────────────────────────────────────────────

    def init(self) -> None:
        """Connect and provision the target index.

        Raises:
            ConfigurationError: If the configuration is unusable.
            InitializationError: If the cluster cannot be reached or the
                index cannot be provisioned.
        """
        self.connect()
        try:
            self.provision()
        except Exception:
            self._discard_client()
            raise

    def connect(self) -> None:
        """Validate the configuration and build the client."""
        settings = self.settings
        if not settings.remote and not settings.path_home:
            raise ConfigurationError("path.home must be specified when running in embedded mode")

        logger.info("Elasticsearch starting node = %s", settings.cluster_name)
        logger.info("Elasticsearch node path.home = %s", settings.path_home)
        logger.info("Elasticsearch Remote Mode = %s", settings.remote)

        if not settings.remote:
            raise ConfigurationError(
                "Embedded Elasticsearch nodes are not supported; set es.remote=true "
                "and list the cluster endpoints in es.hosts.list"
            )

        hosts = self._parse_hosts(settings.hosts_list, settings.scheme)
        logger.info("Elasticsearch Remote Hosts = %s", settings.hosts_list)
        self._discard_client()
        self._client = Elasticsearch(hosts=hosts, request_timeout=settings.request_timeout)

    def provision(self) -> None:
        """Create (or recreate) the target index and wait for green health."""
        client = self._require_client()
        settings = self.settings
        index = settings.index_key
        try:
            exists = bool(client.indices.exists(index=index))
            if exists and settings.newdb:
                logger.info("Deleting existing index %s", index)
                client.indices.delete(index=index)
            if not exists or settings.newdb:
                client.indices.create(
                    index=index,
                    settings={
                        "index": {
                            "number_of_shards": settings.number_of_shards,
                            "number_of_replicas": settings.number_of_replicas,
                        }
                    },
                )
                logger.info(
                    "Created index %s (shards=%d, replicas=%d)",
                    index,
                    settings.number_of_shards,
                    settings.number_of_replicas,
                )
            health = _body(
                client.cluster.health(wait_for_status="green", timeout=settings.health_timeout)
            )
        except (ApiError, TransportError) as e:
            raise InitializationError(f"Failed to provision index '{index}': {_describe(e)}") from e

        if health.get("timed_out"):
            raise InitializationError(
                f"Cluster did not reach green status within {settings.health_timeout} "
                f"(status={health.get('status')})"
            )
        logger.info("Cluster %s is %s", health.get("cluster_name"), health.get("status"))

    def cleanup(self) -> None:
        """Close the client, if one was created."""
        if self._client is None:
            return
        try:
            self._client.close()
        except Exception as e:
            raise CleanupError(f"Failed to close Elasticsearch client: {e}") from e
        finally:
            self._client = None

    # ── Data operations ──────────────────────────────────────────────────

    def read(
        self,
        table: str,
        key: str,
        fields: set[str] | None,
        result: dict[str, ByteIterator],
    ) -> Status:
        try:
            source = self._get_source(table, key)
            result.update(self._select_fields(source, fields))
            return Status.OK
        except Exception as e:
            return self._failed("read", table, key, e)

    def scan(
        self,
        table: str,
        start_key: str,
        record_count: int,
        fields: set[str] | None,
        result: list[Record],
    ) -> Status:
        try:
            source = self._get_source(table, start_key)
            result.append(self._select_fields(source, fields))
            return Status.OK
        except Exception as e:
            return self._failed("scan", table, start_key, e)

    def update(self, table: str, key: str, values: Mapping[str, ByteIterator]) -> Status:
        try:
            source = self._get_source(table, key)
            source.update(get_string_map(values))
            response = self._require_client().update(index=table, id=key, doc=source)
            logger.debug("Update Index Response %s", _body(response).get("result"))
            return Status.OK
        except Exception as e:
            return self._failed("update", table, key, e)

    def insert(self, table: str, key: str, values: Mapping[str, ByteIterator]) -> Status:
        try:
            document = get_string_map(values)
            response = self._require_client().index(
                index=table, id=self._document_id(key), document=document
            )
            logger.debug("Insert Index Response %s", _body(response).get("result"))
            return Status.OK
        except Exception as e:
            return self._failed("insert", table, key, e)

    def delete(self, table: str, key: str) -> Status:
        try:
            response = self._require_client().delete(index=table, id=self._document_id(key))
            logger.debug("Delete Index Response %s", _body(response).get("result"))
            return Status.OK
        except Exception as e:
            return self._failed("delete", table, key, e)

    # ── Health ───────────────────────────────────────────────────────────

    def health(self) -> AdapterHealth:
        """Report cluster health without waiting for any status."""
        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = _body(self._client.cluster.health())
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=_describe(e))

        status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}
        return AdapterHealth(
            status=status_map.get(health.get("status", "red"), "unhealthy"),
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            cluster_name=health.get("cluster_name"),
            number_of_nodes=health.get("number_of_nodes", 0),
            message=f"Index: {self.index_key}",
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _require_client(self) -> Elasticsearch:
        if self._client is None:
            raise InitializationError("Elasticsearch client not initialized.")
        return self._client

    def _discard_client(self) -> None:
        """Close and forget the current client, logging close failures."""
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.close()
        except Exception:
            logger.warning("Error closing Elasticsearch client", exc_info=True)

    def _document_id(self, key: str) -> str:
        if self.settings.document_id == "index_key":
            return self.settings.index_key
        return key

    def _get_source(self, table: str, key: str) -> dict[str, Any]:
        """Fetch a document's source, raising :class:`DocumentNotFoundError` if absent."""
        response = _body(self._require_client().get(index=table, id=key))
        if not response.get("found"):
            raise DocumentNotFoundError(f"Document '{key}' not found in '{table}'.")
        source = response.get("_source")
        if not isinstance(source, dict):
            raise DocumentSerializationError(f"Document '{key}' has no object source.")
        return dict(source)

    @staticmethod
    def _select_fields(source: Mapping[str, Any], fields: set[str] | None) -> Record:
        """Wrap the requested fields (all of them when ``fields`` is empty or None)."""
        names = source.keys() if not fields else [f for f in fields if f in source]
        record: Record = {}
        for name in names:
            value = source[name]
            if value is None:
                continue
            record[name] = StringByteIterator(value if isinstance(value, str) else str(value))
        return record

    @staticmethod
    def _failed(operation: str, table: str, key: str, exc: Exception) -> Status:
        kind = classify(exc)
        if kind is ErrorKind.NOT_FOUND:
            logger.debug("%s %s/%s: not found", operation, table, key)
        else:
            logger.warning("%s %s/%s failed (%s): %s", operation, table, key, kind.value, _describe(exc))
        return kind.to_status()

    @staticmethod
    def _parse_hosts(hosts_list: str, scheme: str = "http") -> list[dict[str, Any]]:
        """Turn ``"host:port,host:port"`` into client node configs.

        Every host must resolve; the client is still given the host name so
        TLS verification keeps working.
        """
        nodes: list[dict[str, Any]] = []
        for entry in hosts_list.split(","):
            entry = entry.strip()
            if not entry:
                continue
            host, _, port = entry.rpartition(":")
            if not host:
                raise ConfigurationError(f"Unable to parse port number in '{entry}'.")
            try:
                port_number = int(port)
            except ValueError as e:
                raise ConfigurationError(f"Unable to parse port number in '{entry}'.") from e
            try:
                socket.gethostbyname(host)
            except OSError as e:
                raise ConfigurationError(f"Unable to identify host '{host}'.") from e
            nodes.append({"host": host, "port": port_number, "scheme": scheme})
        if not nodes:
            raise ConfigurationError("es.hosts.list does not name any host.")
        return nodes


def _body(response: Any) -> dict[str, Any]:
    """Unwrap a client response into a plain dict."""
    body = getattr(response, "body", response)
    return body if isinstance(body, dict) else {}


def _describe(exc: BaseException) -> str:
    """Render an exception with its type and original message.

    Client transport errors replace their message with a generic one in
    ``str()``; the message passed to the constructor is kept in ``args``.
    """
    detail = exc.args[0] if exc.args and isinstance(exc.args[0], str) else str(exc)
    errors = getattr(exc, "errors", None)
    if errors:
        detail = f"{detail} (caused by {type(errors[0]).__name__}: {errors[0]})"
    return f"{type(exc).__name__}: {detail}" if detail else type(exc).__name__
