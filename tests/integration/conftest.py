"""Integration test fixtures: A live Elasticsearch cluster.

Expects a single-node cluster on localhost:9200, e.g.::

    docker run -d -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false elasticsearch:8.15.0

Tests are skipped when the cluster is not reachable.
"""

from __future__ import annotations

import time

import httpx
import pytest

ES_HOST = "http://localhost:9200"


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running."""
    if not _wait_for_service(ES_HOST, timeout=10.0):
        pytest.skip("Elasticsearch not available at localhost:9200")
    return ES_HOST


@pytest.fixture
def drop_index(elasticsearch_ready: str):
    """Delete the named indices before and after a test."""
    names: list[str] = []

    def _drop(*indices: str) -> None:
        names.extend(indices)
        for name in indices:
            httpx.delete(f"{elasticsearch_ready}/{name}", params={"ignore_unavailable": "true"})

    yield _drop
    for name in names:
        httpx.delete(f"{elasticsearch_ready}/{name}", params={"ignore_unavailable": "true"})
