"""
Package initialization file for backend models.

Re-exports the enums and Pydantic schemas so other modules can import them
from pudo_dimensions.models directly.
"""

from pudo_dimensions.models.enums import (
    DataType,
    ExecutionPhase,
    PackageSize,
)
from pudo_dimensions.models.schemas import (
    ALL_SENTINEL,
    QueryDefinition,
    ComposedQuery,
    FilterSet,
    ResultSet,
    ErrorResponse,
)

__all__ = [
    # Enums
    'DataType',
    'ExecutionPhase',
    'PackageSize',
    # Schemas
    'ALL_SENTINEL',
    'QueryDefinition',
    'ComposedQuery',
    'FilterSet',
    'ResultSet',
    'ErrorResponse',
]
