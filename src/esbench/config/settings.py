"""Binding settings: Pydantic-based configuration with properties, YAML and env var support.

The harness passes configuration as flat YCSB-style properties
(``es.index.key=es.ycsb``).  They are parsed once into an explicit
:class:`ElasticsearchSettings` object handed to the binding's constructor.

Configuration is loaded from (in order of precedence):
  1. Properties (``-p key=value`` overrides, then a ``.properties`` file)
  2. YAML config file (if specified)
  3. Environment variables (ESBENCH_ prefix)
  4. Default values
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

DEFAULT_CLUSTER_NAME = "es.ycsb.cluster"
DEFAULT_INDEX_KEY = "es.ycsb"
DEFAULT_REMOTE_HOST = "localhost:9300"

# Property name -> ElasticsearchSettings field
PROPERTY_KEYS: dict[str, str] = {
    "es.remote": "remote",
    "path.home": "path_home",
    "es.index.key": "index_key",
    "es.number_of_shards": "number_of_shards",
    "es.number_of_replicas": "number_of_replicas",
    "es.newdb": "newdb",
    "es.hosts.list": "hosts_list",
    "cluster.name": "cluster_name",
    "es.scheme": "scheme",
    "es.request_timeout": "request_timeout",
    "es.health_timeout": "health_timeout",
    "es.document_id": "document_id",
}


class ElasticsearchSettings(BaseModel):
    """Configuration for the Elasticsearch binding."""

    remote: bool = Field(default=False, description="Connect to remote nodes over HTTP")
    path_home: str | None = Field(default=None, description="Local home path, required when not remote")
    index_key: str = Field(default=DEFAULT_INDEX_KEY, description="Index provisioned on startup")
    number_of_shards: int = Field(default=1, ge=1, description="Shards for a newly created index")
    number_of_replicas: int = Field(default=0, ge=0, description="Replicas for a newly created index")
    newdb: bool = Field(default=False, description="Delete and recreate the index on startup")
    hosts_list: str = Field(default=DEFAULT_REMOTE_HOST, description="Comma-separated host:port list")
    cluster_name: str = Field(default=DEFAULT_CLUSTER_NAME, description="Cluster name, informational")
    scheme: Literal["http", "https"] = Field(default="http", description="Scheme for every endpoint")
    request_timeout: float = Field(default=30.0, gt=0, description="Client request timeout in seconds")
    health_timeout: str = Field(default="30s", description="Server-side wait for green cluster health")
    document_id: Literal["key", "index_key"] = Field(
        default="key",
        description="Document id used by insert/delete: the per-call key, or the index name",
    )
    extra: dict[str, str] = Field(default_factory=dict, description="Unrecognised properties")

    @field_validator("remote", "newdb", mode="before")
    @classmethod
    def _parse_flag(cls, v: Any) -> Any:
        """Only a case-insensitive ``"true"`` is true, anything else is false."""
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @field_validator("hosts_list", mode="before")
    @classmethod
    def _join_hosts(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return ",".join(str(h) for h in v)
        return v

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> ElasticsearchSettings:
        """Build settings from flat dotted property names.

        Field names are accepted as well as property names.  Keys the
        binding does not know about are kept in ``extra``.

        Raises:
            ConfigurationError: If a value does not validate.
        """
        data: dict[str, Any] = {}
        extra: dict[str, str] = {}
        for key, value in properties.items():
            field = PROPERTY_KEYS.get(key, key)
            if field in cls.model_fields and field != "extra":
                data[field] = value
            else:
                extra[key] = str(value)
        from esbench.db.base.exceptions import ConfigurationError

        try:
            return cls(**data, extra=extra)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid binding configuration: {e}") from e

    def to_properties(self) -> dict[str, str]:
        """Render the settings back into property form."""
        props = dict(self.extra)
        for key, field in PROPERTY_KEYS.items():
            value = getattr(self, field)
            if value is None:
                continue
            props[key] = str(value).lower() if isinstance(value, bool) else str(value)
        return props


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="console", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the ESBENCH_ prefix.
    Nested settings use double underscores: ESBENCH_ELASTICSEARCH__INDEX_KEY=bench

    Example:
        ESBENCH_DB=elasticsearch
        ESBENCH_ELASTICSEARCH__REMOTE=true
        ESBENCH_ELASTICSEARCH__HOSTS_LIST=es1:9200,es2:9200
        ESBENCH_OBSERVABILITY__LOG_FORMAT=json
    """

    model_config = {
        "env_prefix": "ESBENCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    db: str = Field(default="elasticsearch", description="Binding name")
    elasticsearch: ElasticsearchSettings = Field(default_factory=ElasticsearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def with_properties(self, properties: Mapping[str, Any]) -> Settings:
        """Return a copy with YCSB-style properties layered over the binding settings."""
        merged = self.elasticsearch.to_properties()
        merged.update({k: str(v) for k, v in properties.items()})
        return self.model_copy(update={"elasticsearch": ElasticsearchSettings.from_properties(merged)})

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file take precedence over environment variables.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        from esbench.db.base.exceptions import ConfigurationError

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_properties_file(cls, path: str | Path) -> Settings:
        """Load settings from a Java-style ``.properties`` workload file."""
        return cls().with_properties(load_properties(path))


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java ``.properties`` text.

    Supports ``#``/``!`` comments, ``=``, ``:`` or whitespace separators,
    backslash line continuations and the ``\\t \\n \\r \\f \\uXXXX`` escapes;
    any other escaped character stands for itself.  A line without a
    separator defines a key with an empty value.  Trailing whitespace on a
    value is dropped.
    """
    props: dict[str, str] = {}
    lines = iter(text.splitlines())
    for raw in lines:
        line = raw.lstrip()
        if not line or line[0] in "#!":
            continue
        while _continues(line):
            line = line[:-1] + next(lines, "").lstrip()
        key, value = _split_entry(line)
        trimmed = value.rstrip()
        if _continues(trimmed) and len(trimmed) < len(value):
            # keep an escaped trailing space
            trimmed = value[: len(trimmed) + 1]
        props[_unescape(key)] = _unescape(trimmed)
    return props


def _continues(line: str) -> bool:
    """A line continues when it ends in an odd number of backslashes."""
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:" or ch.isspace():
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return key, rest


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 == len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and len(text) >= i + 6:
            try:
                out.append(chr(int(text[i + 2 : i + 6], 16)))
                i += 6
                continue
            except ValueError:
                pass
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def load_properties(path: str | Path) -> dict[str, str]:
    """Read a properties file from disk."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Properties file not found: {config_path}")
    return parse_properties(config_path.read_text(encoding="utf-8"))
