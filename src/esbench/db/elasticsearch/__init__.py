"""Elasticsearch binding."""

from esbench.db.elasticsearch.adapter import ElasticsearchDB

__all__ = ["ElasticsearchDB"]
