"""
Pytest test module for the Presto engine pool.

Patches prestodb's dbapi.connect so no network access happens.
"""

import asyncio
from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest

from pudo_dimensions.core import engine
from pudo_dimensions.core.config import Settings
from pudo_dimensions.core.engine import EnginePool, close_engine, get_engine_pool, init_engine
from pudo_dimensions.tests.conftest import PASSWORD, make_settings


@pytest.fixture
def mock_connect() -> Iterator[MagicMock]:
    with patch('pudo_dimensions.core.engine.presto_dbapi.connect') as connect:
        connect.side_effect = lambda **kwargs: MagicMock(name='connection')
        yield connect


@pytest.fixture
def reset_engine_singleton() -> Iterator[None]:
    engine._pool = None
    yield
    engine._pool = None


@pytest.mark.asyncio
class TestEnginePool:

    async def test_connection_uses_settings(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        async with pool.acquire():
            pass

        kwargs = mock_connect.call_args.kwargs
        assert kwargs['host'] == 'us.presto-secure.data-infra.shopee.io'
        assert kwargs['port'] == 443
        assert kwargs['http_scheme'] == 'https'
        assert kwargs['user'] == 'svc_pudo'
        assert kwargs['source'] == '(49)-(brbi-adhoc)-(svc_pudo)-(jdbc)-(svc_pudo)-(USEast)'
        assert kwargs['catalog'] == 'hive'
        assert kwargs['schema'] == 'dev_brbi_opslgc'
        assert kwargs['auth'] is not None

    async def test_client_does_not_retry_requests(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        async with pool.acquire():
            pass

        assert mock_connect.call_args.kwargs['max_attempts'] == 1

    async def test_successful_connection_is_reused(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        async with pool.acquire() as first:
            pass
        async with pool.acquire() as second:
            pass

        assert first is second
        assert mock_connect.call_count == 1
        assert pool.idle_count == 1

    async def test_failed_connection_is_closed_not_reused(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        with pytest.raises(ValueError):
            async with pool.acquire() as conn:
                raise ValueError('query failed')

        conn.close.assert_called_once()
        assert pool.idle_count == 0

    async def test_concurrency_is_bounded(self, mock_connect: MagicMock) -> None:
        pool = EnginePool(make_settings(engine_max_connections=2))
        active = 0
        peak = 0

        async def use() -> None:
            nonlocal active, peak
            async with pool.acquire():
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(use() for _ in range(6)))

        assert peak == 2
        assert pool.max_size == 2

    async def test_closed_pool_rejects_acquire(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)
        async with pool.acquire() as conn:
            pass

        pool.close()

        conn.close.assert_called_once()
        with pytest.raises(RuntimeError, match='closed'):
            async with pool.acquire():
                pass

    async def test_connection_released_after_close_is_closed(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        async with pool.acquire() as conn:
            pool.close()

        conn.close.assert_called_once()
        assert pool.idle_count == 0


@pytest.mark.asyncio
class TestEngineSingleton:

    async def test_init_is_idempotent(self, settings: Settings, reset_engine_singleton) -> None:
        first = await init_engine(settings)
        second = await init_engine(settings)

        assert first is second
        assert await get_engine_pool() is first

    async def test_close_resets_singleton(self, settings: Settings, reset_engine_singleton) -> None:
        pool = await init_engine(settings)

        await close_engine()

        assert engine._pool is None
        assert await get_engine_pool() is not pool

    async def test_close_without_init_is_noop(self, reset_engine_singleton) -> None:
        await close_engine()

        assert engine._pool is None

    async def test_password_is_passed_only_to_auth(self, settings: Settings, mock_connect: MagicMock) -> None:
        pool = EnginePool(settings)

        async with pool.acquire():
            pass

        kwargs = mock_connect.call_args.kwargs
        assert PASSWORD not in {value for value in kwargs.values() if isinstance(value, str)}
