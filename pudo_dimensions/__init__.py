"""
PUDO Packages Dimensions API Package.

FastAPI service exposing precomputed PUDO (pick-up/drop-off point) metrics
computed by a remote Presto analytics engine.

Subpackages:
    - api: FastAPI route handlers and error-to-HTTP mapping
    - core: Configuration, engine connection pool, dependencies, exceptions
    - models: Pydantic schemas and enums
    - services: Execution gateway and per-operation orchestration
    - sql: Query catalog, Presto query templates and the filter compositor
"""

__version__ = "1.0.0"
