"""esbench: Elasticsearch binding for YCSB-style benchmark harnesses."""

__version__ = "0.1.0"
