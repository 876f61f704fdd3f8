"""
Query catalog for the PUDO Dimensions backend.

Holds the named base queries served by the API. The catalog is built once at
import time and exposed through a read-only mapping, so concurrent lookups
need no locking.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Tuple

from pudo_dimensions.core.exceptions import QueryNotFoundError
from pudo_dimensions.models.schemas import QueryDefinition
from pudo_dimensions.sql.pudo_queries import (
    PUDOS_ATIVOS_QUERY,
    PUDOS_ATIVOS_COLUMNS,
    RECENT_HISTORY_QUERY,
    RECENT_HISTORY_COLUMNS,
    LIVE_DATA_QUERY,
    LIVE_DATA_COLUMNS,
)


logger = logging.getLogger(__name__)


# Catalog keys
PUDOS_ATIVOS: str = "pudosAtivos"
RECENT_HISTORY: str = "recentHistory"
LIVE_DATA: str = "liveData"


class QueryCatalog:
    """
    Immutable name → QueryDefinition mapping.

    Args:
        definitions: Query definitions to register. Names must be unique.

    Raises:
        ValueError: If two definitions share a name.
    """

    def __init__(self, definitions: Iterable[QueryDefinition]) -> None:
        entries = {}
        for definition in definitions:
            if definition.name in entries:
                raise ValueError(f"Duplicate query name '{definition.name}'")
            entries[definition.name] = definition
        self._entries: Mapping[str, QueryDefinition] = MappingProxyType(entries)

    def lookup(self, name: str) -> QueryDefinition:
        """
        Return the definition registered under ``name``.

        Raises:
            QueryNotFoundError: If no query has that name.
        """
        try:
            return self._entries[name]
        except KeyError:
            logger.warning(f"Lookup of unknown query '{name}'")
            raise QueryNotFoundError(name) from None

    def names(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[QueryDefinition]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def build_default_catalog() -> QueryCatalog:
    """Build the catalog of queries served by the API."""
    return QueryCatalog([
        QueryDefinition(
            name=PUDOS_ATIVOS,
            template=PUDOS_ATIVOS_QUERY,
            expected_columns=PUDOS_ATIVOS_COLUMNS,
        ),
        QueryDefinition(
            name=RECENT_HISTORY,
            template=RECENT_HISTORY_QUERY,
            expected_columns=RECENT_HISTORY_COLUMNS,
        ),
        QueryDefinition(
            name=LIVE_DATA,
            template=LIVE_DATA_QUERY,
            expected_columns=LIVE_DATA_COLUMNS,
        ),
    ])


DEFAULT_CATALOG: QueryCatalog = build_default_catalog()
