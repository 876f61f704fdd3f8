"""
Pydantic models for the PUDO Dimensions backend.

This module provides the data contracts that flow between the query catalog,
the filter compositor, the execution gateway and the HTTP layer:

- QueryDefinition: a named, immutable query template
- FilterSet: caller-supplied location filters for one request
- ComposedQuery: a single-use query text plus its bound parameters
- ResultSet: the normalized engine response
- ErrorResponse: the JSON body returned on failure

All models use Pydantic v2 syntax.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Sentinel meaning "no restriction" for a location filter
ALL_SENTINEL = "All"


# =============================================================================
# Query Catalog Models
# =============================================================================


class QueryDefinition(BaseModel):
    """
    Named base query template.

    Defined once at import time and never mutated. An empty
    ``expected_columns`` means the column list is inferred from the engine.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Catalog key")
    template: str = Field(..., min_length=1, description="Presto SQL text")
    expected_columns: Tuple[str, ...] = Field(
        default=(),
        description="Documented output columns, in order"
    )


class ComposedQuery(BaseModel):
    """
    Query text built for one request.

    ``params`` holds the bound values for the ``?`` placeholders in ``text``,
    in placeholder order. Never cached or reused across requests.
    """
    model_config = ConfigDict(frozen=True)

    base_name: str
    text: str
    params: Tuple[str, ...] = ()


# =============================================================================
# Request Models
# =============================================================================


class FilterSet(BaseModel):
    """
    Location filters for the filtered endpoint.

    Each location field is either absent, the "All" sentinel, or a concrete
    value. Blank strings count as absent. ``data_type`` is kept raw here and
    validated by the compositor so that bad values become an invalid request
    rather than a schema error.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    state: Optional[str] = None
    city: Optional[str] = None
    dop_id: Optional[str] = Field(default=None, alias="dopId")
    data_type: Optional[str] = Field(default=None, alias="dataType")

    @staticmethod
    def is_restricting(value: Optional[str]) -> bool:
        """True when ``value`` narrows the result (present, non-blank, not "All")."""
        return value is not None and value.strip() != "" and value != ALL_SENTINEL


# =============================================================================
# Result Models
# =============================================================================


def _json_safe(value: Any) -> Any:
    # NaN/inf doubles from the engine are not valid JSON
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class ResultSet(BaseModel):
    """
    Normalized engine response.

    Invariant: every row has exactly ``len(columns)`` values.
    """
    model_config = ConfigDict(frozen=True)

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[Any, ...], ...] = ()

    @model_validator(mode="after")
    def _check_row_arity(self) -> "ResultSet":
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} values, expected {width}"
                )
        return self

    def __len__(self) -> int:
        return len(self.rows)

    def as_records(self) -> List[Dict[str, Any]]:
        """Return rows as column-name → value objects, in row order."""
        return [
            {column: _json_safe(value) for column, value in zip(self.columns, row)}
            for row in self.rows
        ]


class ErrorResponse(BaseModel):
    """
    JSON body for failed requests.

    ``details`` carries the internal message outside production only.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Could not connect to the analytics engine",
                "details": "[connect] Connection refused",
            }
        }
    )

    error: str
    details: Optional[str] = None
