"""Registry that builds indexes by name."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from knowhere.errors import KnowhereError, Status

logger = logging.getLogger("knowhere")

IndexBuilder = Callable[[Any], Any]


class IndexFactory:
    """Maps index names to the callables that build them."""

    def __init__(self) -> None:
        self._builders: dict[str, IndexBuilder] = {}

    def register(self, name: str, func: IndexBuilder) -> IndexFactory:
        """Register ``func`` under ``name``, replacing any earlier one."""
        self._builders[name] = func
        return self

    def create(self, name: str, obj: Any = None) -> Any:
        """Build the index registered as ``name``, passing it ``obj``."""
        try:
            builder = self._builders[name]
        except KeyError:
            raise KnowhereError(f"index type {name} is not registered", Status.INVALID_INDEX_ERROR) from None
        logger.info("create knowhere index %s", name)
        return builder(obj)

    def __contains__(self, name: object) -> bool:
        return name in self._builders


_FACTORY = IndexFactory()


def get_factory() -> IndexFactory:
    """The process-wide factory."""
    return _FACTORY