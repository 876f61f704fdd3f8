"""
Core infrastructure package for the FastAPI backend.

Provides:
- Configuration management via pydantic-settings
- Presto engine connection pool
- Project-wide exceptions

FastAPI dependencies live in pudo_dimensions.core.dependencies and are not
re-exported here, since they pull in the service layer.

Usage Examples:
    from pudo_dimensions.core import get_settings, init_engine, close_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_engine()
        yield
        await close_engine()
"""

from pudo_dimensions.core.config import Settings, get_settings
from pudo_dimensions.core.engine import EnginePool, init_engine, close_engine, get_engine_pool
from pudo_dimensions.core.exceptions import (
    PudoApiError,
    InvalidRequestError,
    QueryNotFoundError,
    ExecutionError,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Engine pool lifecycle (from engine.py)
    'EnginePool',
    'init_engine',
    'close_engine',
    'get_engine_pool',
    # Exceptions (from exceptions.py)
    'PudoApiError',
    'InvalidRequestError',
    'QueryNotFoundError',
    'ExecutionError',
]
