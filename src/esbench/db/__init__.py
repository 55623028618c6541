"""Datastore bindings: Pluggable backends driven by the benchmark harness.

Built-in bindings:
  - elasticsearch: Elasticsearch 8.x over the REST API
  - elasticsearch7: alias keeping the original binding name; it uses the
    same 8.x client and therefore still needs an 8.x server

Subclass ``DB`` and register it with ``registry`` to add your own.
"""

from esbench.db.base import DB, DBRegistry, Status
from esbench.db.elasticsearch import ElasticsearchDB

registry = DBRegistry()
registry.register("elasticsearch", ElasticsearchDB)
registry.register("elasticsearch7", ElasticsearchDB)

__all__ = ["DB", "DBRegistry", "ElasticsearchDB", "Status", "registry"]
