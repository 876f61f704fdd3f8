"""
FastAPI dependency injection module for the PUDO Dimensions backend.

Provides reusable dependencies for configuration, the query catalog and the
execution gateway, so endpoint handlers receive their collaborators
explicitly instead of reading global state.

Key Dependencies Provided:
- get_settings_dependency / SettingsDep: the cached Settings instance
- get_catalog / CatalogDep: the immutable query catalog
- get_gateway / GatewayDep: an ExecutionGateway bound to the engine pool

Tests replace collaborators through FastAPI's override mechanism:

    app.dependency_overrides[get_gateway] = lambda: fake_gateway
"""

from typing import Annotated

from fastapi import Depends

from pudo_dimensions.core.config import Settings, get_settings
from pudo_dimensions.core.engine import get_engine_pool
from pudo_dimensions.services.gateway import ExecutionGateway
from pudo_dimensions.sql.catalog import DEFAULT_CATALOG, QueryCatalog


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """Return the Settings singleton; overridable in tests."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]


# =============================================================================
# Catalog Dependency
# =============================================================================

def get_catalog() -> QueryCatalog:
    return DEFAULT_CATALOG


CatalogDep = Annotated[QueryCatalog, Depends(get_catalog)]


# =============================================================================
# Gateway Dependency
# =============================================================================

async def get_gateway(settings: SettingsDep) -> ExecutionGateway:
    """
    Build a gateway over the shared engine pool.

    The gateway itself is stateless; a new one per request costs nothing and
    keeps the credentials used for log scrubbing tied to the active settings.
    """
    pool = await get_engine_pool()
    return ExecutionGateway(
        pool,
        secrets=(settings.presto_password.get_secret_value(),),
    )


GatewayDep = Annotated[ExecutionGateway, Depends(get_gateway)]
