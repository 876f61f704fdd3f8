"""
PUDO metrics service.

Orchestrates one API operation: catalog lookup, optional filter composition,
and the gateway call. Input validation happens here, before any engine call,
so invalid requests never reach Presto.

An optional overall timeout wraps the gateway call; when it expires the call
is cancelled and reported as a transport failure.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

from pudo_dimensions.core.exceptions import ExecutionError
from pudo_dimensions.models.enums import ExecutionPhase
from pudo_dimensions.models.schemas import FilterSet, ResultSet
from pudo_dimensions.services.gateway import ExecutionGateway
from pudo_dimensions.sql.catalog import QueryCatalog
from pudo_dimensions.sql.filter_queries import build_filtered_query


logger = logging.getLogger(__name__)


async def _with_timeout(call: Awaitable[Any], timeout: Optional[float]) -> Any:
    if timeout is None:
        return await call
    try:
        return await asyncio.wait_for(call, timeout)
    except asyncio.TimeoutError:
        logger.error(f"Engine call exceeded {timeout}s and was cancelled")
        raise ExecutionError(
            ExecutionPhase.TRANSPORT,
            f"Query did not complete within {timeout} seconds",
        ) from None


async def run_catalog_query(
    gateway: ExecutionGateway,
    catalog: QueryCatalog,
    name: str,
    timeout: Optional[float] = None,
) -> ResultSet:
    """
    Run a catalog query unchanged.

    Raises:
        QueryNotFoundError: If ``name`` is not in the catalog.
        ExecutionError: If the engine call fails.
    """
    definition = catalog.lookup(name)
    logger.info(f"Running catalog query {name}")
    return await _with_timeout(
        gateway.execute(definition.template, (), definition.expected_columns),
        timeout,
    )


async def run_filtered_query(
    gateway: ExecutionGateway,
    catalog: QueryCatalog,
    filters: FilterSet,
    timeout: Optional[float] = None,
) -> ResultSet:
    """
    Compose the filtered query for ``filters`` and run it.

    Raises:
        InvalidRequestError: Unknown data type or malformed filter value.
        ExecutionError: If the engine call fails.
    """
    composed = build_filtered_query(catalog, filters)
    logger.info(
        f"Running filtered query over {composed.base_name} "
        f"with {len(composed.params)} bound filters"
    )
    return await _with_timeout(
        gateway.execute(composed.text, composed.params),
        timeout,
    )
