"""Binding Registry: Maps binding names to :class:`DB` classes.

The harness selects a binding by name (``--db elasticsearch``) and creates
one instance per worker thread from the same settings object.
"""

from __future__ import annotations

import logging
from typing import Any

from esbench.db.base.adapter import DB

logger = logging.getLogger(__name__)


class DBNotFoundError(Exception):
    """Raised when a requested binding is not registered."""


class DBRegistry:
    """Registry of binding classes.

    Example:
        >>> registry = DBRegistry()
        >>> registry.register("elasticsearch", ElasticsearchDB)
        >>> db = registry.create("elasticsearch", settings)
        >>> db.init()
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[DB]] = {}

    def register(self, name: str, db_class: type[DB]) -> None:
        """Register a binding class.

        Args:
            name: Unique name for this binding.
            db_class: The binding class to register.
        """
        if name in self._classes:
            logger.warning("Overwriting existing binding registration: %s", name)
        self._classes[name] = db_class
        logger.debug("Registered binding: %s", name)

    def get(self, name: str) -> type[DB]:
        """Look up a binding class by name.

        Raises:
            DBNotFoundError: If no binding is registered under this name.
        """
        if name not in self._classes:
            raise DBNotFoundError(
                f"No binding registered with name '{name}'. "
                f"Available bindings: {self.registered}"
            )
        return self._classes[name]

    def create(self, name: str, settings: Any = None) -> DB:
        """Create an uninitialized binding instance.

        The caller owns the instance and must run ``init()`` and
        ``cleanup()`` on it.
        """
        return self.get(name)(settings)

    @property
    def registered(self) -> list[str]:
        """List all registered binding names."""
        return sorted(self._classes)
