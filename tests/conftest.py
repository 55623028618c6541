"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from utils import FakeElasticsearch

from esbench.config.settings import ElasticsearchSettings
from esbench.db.elasticsearch.adapter import ElasticsearchDB


@pytest.fixture
def es_settings() -> ElasticsearchSettings:
    """Remote-mode settings pointing at a local cluster."""
    return ElasticsearchSettings(remote=True, hosts_list="localhost:9200", index_key="es.ycsb")


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def db(es_settings: ElasticsearchSettings, mock_client: MagicMock) -> ElasticsearchDB:
    """A binding with a mocked client already attached."""
    binding = ElasticsearchDB(es_settings)
    binding._client = mock_client
    return binding


@pytest.fixture
def fake_client() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def fake_db(es_settings: ElasticsearchSettings, fake_client: FakeElasticsearch) -> ElasticsearchDB:
    """A binding backed by the in-memory fake."""
    binding = ElasticsearchDB(es_settings)
    binding._client = fake_client  # type: ignore[assignment]
    return binding
