"""
Services package for the PUDO Dimensions backend.

Modules:
    gateway: ExecutionGateway, running queries on Presto with classified failures
    metrics: Per-operation orchestration used by the API handlers
"""

from pudo_dimensions.services.gateway import ExecutionGateway
from pudo_dimensions.services.metrics import run_catalog_query, run_filtered_query

__all__ = [
    'ExecutionGateway',
    'run_catalog_query',
    'run_filtered_query',
]
