"""
SQL Query Module for PUDO Dimensions Backend.

Provides the query layer served by the API:
- Presto query templates for the metric families (pudo_queries)
- The immutable query catalog (catalog)
- The filter compositor producing parameterized joined queries (filter_queries)

Example usage:
    from pudo_dimensions.sql import DEFAULT_CATALOG, build_filtered_query
    from pudo_dimensions.models import FilterSet

    composed = build_filtered_query(
        DEFAULT_CATALOG,
        FilterSet(state='SP', dataType='live'),
    )
    # composed.text contains "estado = ?", composed.params == ('SP',)
"""

# =============================================================================
# TEMPLATES
# =============================================================================

from pudo_dimensions.sql.pudo_queries import (
    PUDOS_ACTIVE_TABLE,
    SHIPMENTS_TABLE,
    RECENT_HISTORY_WINDOW_DAYS,
    LOCAL_TIMEZONE,
    PUDOS_ATIVOS_QUERY,
    RECENT_HISTORY_QUERY,
    LIVE_DATA_QUERY,
)

# =============================================================================
# CATALOG
# =============================================================================

from pudo_dimensions.sql.catalog import (
    QueryCatalog,
    build_default_catalog,
    DEFAULT_CATALOG,
    PUDOS_ATIVOS,
    RECENT_HISTORY,
    LIVE_DATA,
)

# =============================================================================
# COMPOSITOR
# =============================================================================

from pudo_dimensions.sql.filter_queries import (
    parse_data_type,
    select_base_query,
    build_predicates,
    compose_filtered_query,
    build_filtered_query,
    DATA_TYPE_QUERIES,
)

__all__ = [
    # Templates
    'PUDOS_ACTIVE_TABLE',
    'SHIPMENTS_TABLE',
    'RECENT_HISTORY_WINDOW_DAYS',
    'LOCAL_TIMEZONE',
    'PUDOS_ATIVOS_QUERY',
    'RECENT_HISTORY_QUERY',
    'LIVE_DATA_QUERY',
    # Catalog
    'QueryCatalog',
    'build_default_catalog',
    'DEFAULT_CATALOG',
    'PUDOS_ATIVOS',
    'RECENT_HISTORY',
    'LIVE_DATA',
    # Compositor
    'parse_data_type',
    'select_base_query',
    'build_predicates',
    'compose_filtered_query',
    'build_filtered_query',
    'DATA_TYPE_QUERIES',
]
