"""
Pytest Configuration and Shared Fixtures for PUDO Dimensions Backend Tests.

This module provides fixtures for all backend tests, supporting:
- Async test execution with pytest-asyncio
- Fake Presto connections/cursors (unittest.mock) so no engine is needed
- A fake engine pool with the same ``acquire()`` contract as EnginePool
- A recording gateway for API tests that must prove no engine call happened
- An httpx AsyncClient bound to the FastAPI app with dependency overrides
"""

import os

# Required settings must exist before the application module is imported
os.environ.setdefault('PRESTO_USERNAME', 'svc_pudo')
os.environ.setdefault('PRESTO_PASSWORD', 'test-password-123')

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence, Tuple
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pudo_dimensions.core.config import Settings
from pudo_dimensions.core.dependencies import get_gateway, get_settings_dependency
from pudo_dimensions.main import app
from pudo_dimensions.models.schemas import ResultSet
from pudo_dimensions.services.gateway import ExecutionGateway


PASSWORD = 'test-password-123'


# ============================================================
# SETTINGS FIXTURES
# ============================================================

def make_settings(**overrides: Any) -> Settings:
    values = {
        'presto_username': 'svc_pudo',
        'presto_password': PASSWORD,
        'app_env': 'development',
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    """Development settings (error details exposed)."""
    return make_settings()


@pytest.fixture
def production_settings() -> Settings:
    """Production settings (error details hidden)."""
    return make_settings(app_env='production')


# ============================================================
# PRESTO FAKES
# ============================================================

def make_cursor(
    columns: Sequence[str] = (),
    rows: Sequence[Sequence[Any]] = (),
) -> MagicMock:
    """
    Create a fake Presto DB-API cursor.

    ``description`` follows the DB-API shape: one tuple per column with the
    name first.
    """
    cursor = MagicMock(name='cursor')
    cursor.execute.return_value = None
    cursor.fetchall.return_value = [list(row) for row in rows]
    cursor.description = [(column, 'varchar') for column in columns] if columns else None
    return cursor


def make_connection(cursor: MagicMock) -> MagicMock:
    conn = MagicMock(name='connection')
    conn.cursor.return_value = cursor
    return conn


class FakePool:
    """
    Stand-in for EnginePool.

    Hands out ``connection`` (or raises ``acquire_error``) and records how each
    checkout ended.
    """

    def __init__(self, connection: Optional[MagicMock] = None, acquire_error: Optional[Exception] = None):
        self.connection = connection
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released_ok = 0
        self.released_failed = 0

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[MagicMock]:
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        try:
            yield self.connection
        except BaseException:
            self.released_failed += 1
            raise
        self.released_ok += 1


@pytest.fixture
def pudo_cursor() -> MagicMock:
    """Cursor returning three active PUDO points."""
    return make_cursor(
        columns=('dop_id', 'estado', 'cidade'),
        rows=[
            ('DOP001', 'SP', 'São Paulo'),
            ('DOP002', 'SP', 'Campinas'),
            ('DOP003', 'RJ', 'Rio de Janeiro'),
        ],
    )


@pytest.fixture
def fake_pool(pudo_cursor: MagicMock) -> FakePool:
    return FakePool(make_connection(pudo_cursor))


@pytest.fixture
def gateway(fake_pool: FakePool) -> ExecutionGateway:
    return ExecutionGateway(fake_pool, secrets=(PASSWORD,))


# ============================================================
# RECORDING GATEWAY
# ============================================================

class RecordingGateway:
    """
    Gateway double for API tests.

    Records every (query_text, params, expected_columns) call and returns
    ``result`` or raises ``error``.
    """

    def __init__(self, result: Optional[ResultSet] = None, error: Optional[Exception] = None):
        self.result = result if result is not None else ResultSet(columns=(), rows=())
        self.error = error
        self.calls: List[Tuple[str, Tuple[Any, ...], Tuple[str, ...]]] = []

    async def execute(self, query_text: str, params: Sequence[Any] = (), expected_columns: Sequence[str] = ()) -> ResultSet:
        self.calls.append((query_text, tuple(params), tuple(expected_columns)))
        if self.error is not None:
            raise self.error
        return self.result


# ============================================================
# HTTP CLIENT
# ============================================================

@pytest.fixture
def app_overrides(settings: Settings):
    """
    Install dependency overrides on the app and clear them afterwards.

    Yields a function ``install(gateway, settings=None)``.
    """
    def install(gateway: Any, override_settings: Optional[Settings] = None) -> None:
        active = override_settings or settings
        app.dependency_overrides[get_gateway] = lambda: gateway
        app.dependency_overrides[get_settings_dependency] = lambda: active

    yield install
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url='http://test'
    ) as ac:
        yield ac
