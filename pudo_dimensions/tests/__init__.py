'''
PUDO Dimensions Backend Test Suite

Test Modules:
-------------
- test_catalog.py: Query catalog lookups and the bundled query texts
- test_filter_queries.py: Filtered query composition
  - dataType → base query, invalid values rejected before any engine call
  - Predicates bound as parameters, ordered state → city → dopId
  - "All" and blank values contribute no predicate
- test_gateway.py: Execution Gateway against fake Presto cursors
  - Result normalization and parameter binding
  - Failure phases (connect, submit, engine-reject, transport)
  - Credential scrubbing and cancellation
- test_engine.py: Bounded Presto connection pool
- test_models.py: Schemas, error types and settings
- test_api.py: HTTP endpoints through httpx with dependency overrides

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
