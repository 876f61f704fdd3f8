"""
Filter Queries Module for PUDO Dimensions Backend.

Builds the query behind the filtered endpoint: a base metric query from the
catalog is wrapped as the ``filtered_data`` CTE and joined to the active PUDO
dimension table, restricted by the caller's location filters.

Filter values are never written into the query text. Each active filter adds
a ``column = ?`` predicate and its value is appended to the bound parameter
list, which the Presto client sends as a prepared statement.

Everything in this module is pure: no I/O, no engine errors.
"""

import logging
import unicodedata
from typing import List, Optional, Tuple

from pudo_dimensions.core.exceptions import InvalidRequestError
from pudo_dimensions.models.enums import DataType
from pudo_dimensions.models.schemas import ComposedQuery, FilterSet, QueryDefinition
from pudo_dimensions.sql.catalog import LIVE_DATA, RECENT_HISTORY, QueryCatalog
from pudo_dimensions.sql.pudo_queries import DOP_ID_COLUMN, PUDOS_ACTIVE_TABLE


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Base query for each selectable data type
DATA_TYPE_QUERIES = {
    DataType.RECENT_HISTORY: RECENT_HISTORY,
    DataType.LIVE: LIVE_DATA,
}

# Filter field → dimension column, in predicate order
FILTER_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("state", "estado"),
    ("city", "cidade"),
    ("dop_id", "dop_id"),
)

MAX_FILTER_LENGTH: int = 128

PLACEHOLDER: str = "?"

_FILTERED_QUERY_TEMPLATE: str = """
    WITH filtered_data AS (
{base_query}
    ),
    pudos_active AS (
      SELECT dop_id, estado, cidade
      FROM {dimension_table}{where_clause}
    )
    SELECT fd.*, pa.estado, pa.cidade
    FROM filtered_data fd
    JOIN pudos_active pa ON fd.{key} = pa.{key}
"""


# =============================================================================
# VALIDATION
# =============================================================================


def parse_data_type(value: Optional[str]) -> DataType:
    """
    Validate the ``dataType`` request value.

    Raises:
        InvalidRequestError: If the value is absent or not a known data type.
    """
    try:
        return DataType(value)
    except ValueError:
        logger.warning(f"Rejected data type {value!r}")
        allowed = ", ".join(member.value for member in DataType)
        raise InvalidRequestError(
            f"Invalid data type; expected one of: {allowed}"
        ) from None


def _check_filter_value(field: str, value: str) -> str:
    if len(value) > MAX_FILTER_LENGTH:
        raise InvalidRequestError(
            f"Filter '{field}' exceeds {MAX_FILTER_LENGTH} characters"
        )
    if any(unicodedata.category(char) == "Cc" for char in value):
        raise InvalidRequestError(f"Filter '{field}' contains control characters")
    return value


def select_base_query(catalog: QueryCatalog, data_type: Optional[str]) -> QueryDefinition:
    """
    Pick the catalog query for a ``dataType`` value.

    The value is validated before the catalog is consulted.

    Raises:
        InvalidRequestError: Unknown data type, or the mapped query is missing
            from ``catalog`` (QueryNotFoundError).
    """
    return catalog.lookup(DATA_TYPE_QUERIES[parse_data_type(data_type)])


# =============================================================================
# COMPOSITION
# =============================================================================


def build_predicates(filters: FilterSet) -> Tuple[List[str], List[str]]:
    """
    Return the predicate clauses and their bound values for ``filters``.

    Order is always state, city, dopId. Absent, blank and "All" values
    contribute nothing.

    Raises:
        InvalidRequestError: If a filter value is malformed.
    """
    clauses: List[str] = []
    params: List[str] = []
    for field, column in FILTER_COLUMNS:
        value = getattr(filters, field)
        if not FilterSet.is_restricting(value):
            continue
        params.append(_check_filter_value(field, value))
        clauses.append(f"{column} = {PLACEHOLDER}")
    return clauses, params


def compose_filtered_query(base: QueryDefinition, filters: FilterSet) -> ComposedQuery:
    """
    Wrap ``base`` as a derived table and join it to the active PUDO dimension.

    Args:
        base: Catalog query producing a ``dop_id`` column.
        filters: Location filters; ``data_type`` is ignored here.

    Returns:
        ComposedQuery whose text contains one ``?`` per entry in ``params``.
        With no active filters the join is unconditional.

    Raises:
        InvalidRequestError: If a filter value is malformed.
    """
    clauses, params = build_predicates(filters)
    where_clause = ""
    if clauses:
        where_clause = "\n      WHERE " + "\n      AND ".join(clauses)

    text = _FILTERED_QUERY_TEMPLATE.format(
        base_query=base.template.strip(),
        dimension_table=PUDOS_ACTIVE_TABLE,
        where_clause=where_clause,
        key=DOP_ID_COLUMN,
    )
    logger.debug(f"Composed filtered query over {base.name} with {len(params)} predicates")
    return ComposedQuery(base_name=base.name, text=text, params=tuple(params))


def build_filtered_query(catalog: QueryCatalog, filters: FilterSet) -> ComposedQuery:
    """Select the base query for ``filters.data_type`` and compose it."""
    base = select_base_query(catalog, filters.data_type)
    return compose_filtered_query(base, filters)
