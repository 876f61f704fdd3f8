"""
FastAPI router module for PUDO metric endpoints.

Key Endpoints:
- GET /pudos-ativos: Active PUDO points (dop_id, estado, cidade)
- GET /recent-history: 28-day peak backlog volume and package size mix
- GET /live-data: Current backlog volume against the historical peak
- GET /filter: recent-history or live metrics restricted by location filters

Every endpoint returns the full result set as a JSON array of row objects.
Failures are mapped by api.errors to ``{"error", "details"}`` bodies.
"""

import logging
from typing import Any, Awaitable, Dict, List, Optional, Union

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from pudo_dimensions.api.errors import error_response
from pudo_dimensions.core.config import Settings
from pudo_dimensions.core.dependencies import CatalogDep, GatewayDep, SettingsDep
from pudo_dimensions.models.schemas import ErrorResponse, FilterSet, ResultSet
from pudo_dimensions.services.gateway import ExecutionGateway
from pudo_dimensions.services.metrics import run_catalog_query, run_filtered_query
from pudo_dimensions.sql.catalog import LIVE_DATA, PUDOS_ATIVOS, RECENT_HISTORY, QueryCatalog


# =============================================================================
# Module Configuration
# =============================================================================

logger = logging.getLogger(__name__)

router = APIRouter()

Rows = List[Dict[str, Any]]

ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {'model': ErrorResponse, 'description': 'Invalid request'},
    500: {'model': ErrorResponse, 'description': 'Unexpected error'},
    502: {'model': ErrorResponse, 'description': 'Analytics engine unreachable or query rejected'},
    504: {'model': ErrorResponse, 'description': 'Analytics engine communication failed'},
}


async def _respond(call: Awaitable[ResultSet], settings: Settings) -> Union[Rows, JSONResponse]:
    try:
        result = await call
    except Exception as e:
        return error_response(e, settings)
    return result.as_records()


async def _run_named(
    name: str,
    gateway: ExecutionGateway,
    catalog: QueryCatalog,
    settings: Settings,
) -> Union[Rows, JSONResponse]:
    return await _respond(
        run_catalog_query(gateway, catalog, name, settings.query_timeout_seconds),
        settings,
    )


# =============================================================================
# Catalog Endpoints
# =============================================================================

@router.get('/pudos-ativos', response_model=Rows, responses=ERROR_RESPONSES)
async def get_pudos_ativos(
    gateway: GatewayDep,
    catalog: CatalogDep,
    settings: SettingsDep,
):
    """Active PUDO points with their state and city."""
    return await _run_named(PUDOS_ATIVOS, gateway, catalog, settings)


@router.get('/recent-history', response_model=Rows, responses=ERROR_RESPONSES)
async def get_recent_history(
    gateway: GatewayDep,
    catalog: CatalogDep,
    settings: SettingsDep,
):
    """
    Peak cumulative backlog volume over the last 28 days per point.

    Includes the time of the peak and package counts by size class (P/M/G/GG).
    """
    return await _run_named(RECENT_HISTORY, gateway, catalog, settings)


@router.get('/live-data', response_model=Rows, responses=ERROR_RESPONSES)
async def get_live_data(
    gateway: GatewayDep,
    catalog: CatalogDep,
    settings: SettingsDep,
):
    """Current backlog (shipment count and volume in m³) and historical peak per point."""
    return await _run_named(LIVE_DATA, gateway, catalog, settings)


# =============================================================================
# Filtered Endpoint
# =============================================================================

@router.get('/filter', response_model=Rows, responses=ERROR_RESPONSES)
async def get_filtered(
    gateway: GatewayDep,
    catalog: CatalogDep,
    settings: SettingsDep,
    state: Optional[str] = Query(default=None, description="State (estado) or 'All'"),
    city: Optional[str] = Query(default=None, description="City (cidade) or 'All'"),
    dop_id: Optional[str] = Query(default=None, alias='dopId', description="PUDO id or 'All'"),
    data_type: Optional[str] = Query(
        default=None,
        alias='dataType',
        description="'recent-history' or 'live'",
    ),
):
    """
    Recent-history or live metrics joined to the active points.

    Rows carry every metric column plus ``estado`` and ``cidade``.
    """
    filters = FilterSet(state=state, city=city, dop_id=dop_id, data_type=data_type)
    return await _respond(
        run_filtered_query(gateway, catalog, filters, settings.query_timeout_seconds),
        settings,
    )
