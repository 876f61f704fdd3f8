"""
Execution Gateway Service for PUDO Dimensions Backend.

Runs a query against the Presto analytics engine and returns a normalized
ResultSet, or raises ExecutionError classified by the phase that failed:

    Idle → Connecting → Submitted → Succeeded
                    ↘           ↘
                     Failed(connect | submit | engine-reject | transport)

- connect: no connection could be obtained, or the coordinator refused the
  first request
- submit: the client library could not accept the query or its parameters
- engine-reject: Presto answered with a query error (syntax, permissions,
  runtime failure)
- transport: the HTTP exchange failed after submission, or the payload was
  malformed

The gateway never retries, caches results, or keeps session state between
calls. Blocking DB-API calls run in worker threads so the event loop stays
free; if the awaiting task is cancelled the Presto query is cancelled too.
"""

import asyncio
import logging
from typing import Any, List, Sequence, Tuple

import requests
from prestodb import exceptions as presto_exceptions
from pydantic import ValidationError

from pudo_dimensions.core.exceptions import ExecutionError, redact
from pudo_dimensions.models.enums import ExecutionPhase
from pudo_dimensions.models.schemas import ResultSet


logger = logging.getLogger(__name__)


def _classify_submit_error(exc: Exception) -> ExecutionPhase:
    # ConnectTimeout is a subclass of ConnectionError
    if isinstance(exc, requests.exceptions.ConnectionError):
        return ExecutionPhase.CONNECT
    if isinstance(exc, presto_exceptions.PrestoQueryError):
        return ExecutionPhase.ENGINE_REJECT
    if isinstance(exc, (presto_exceptions.HttpError, requests.exceptions.RequestException)):
        return ExecutionPhase.TRANSPORT
    return ExecutionPhase.SUBMIT


def _classify_fetch_error(exc: Exception) -> ExecutionPhase:
    if isinstance(exc, presto_exceptions.PrestoQueryError):
        return ExecutionPhase.ENGINE_REJECT
    return ExecutionPhase.TRANSPORT


def _fetch_result(cursor: Any) -> Tuple[List[str], List[Sequence[Any]]]:
    rows = cursor.fetchall()
    # description is only known once the engine has sent the column list
    columns = [column[0] for column in (cursor.description or [])]
    return columns, rows


class ExecutionGateway:
    """
    Sends queries to Presto through an EnginePool.

    Args:
        pool: Connection source (EnginePool or compatible ``acquire()``).
        secrets: Strings scrubbed from every error message (credentials).
    """

    def __init__(self, pool: Any, secrets: Sequence[str] = ()) -> None:
        self._pool = pool
        self._secrets = tuple(secret for secret in secrets if secret)

    def _fail(self, phase: ExecutionPhase, exc: BaseException) -> ExecutionError:
        message = redact(f"{type(exc).__name__}: {exc}", self._secrets)
        logger.error(f"Engine call failed in {phase.value} phase: {message}")
        if phase is ExecutionPhase.ENGINE_REJECT:
            logger.warning("Engine rejected a query; check the query composition if this recurs")
        return ExecutionError(phase, message)

    def _log_cancel_result(self, future: "asyncio.Future[Any]") -> None:
        # prestodb raises OperationalError while the query id is not known yet
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            message = redact(f"{type(exc).__name__}: {exc}", self._secrets)
            logger.warning(f"Could not cancel the Presto query: {message}")

    async def execute(
        self,
        query_text: str,
        params: Sequence[Any] = (),
        expected_columns: Sequence[str] = (),
    ) -> ResultSet:
        """
        Run ``query_text`` with bound ``params`` and return all rows.

        Args:
            query_text: Presto SQL, with one ``?`` per entry in ``params``.
            params: Bound parameter values, in placeholder order.
            expected_columns: Documented column list; a mismatch is only logged.

        Returns:
            ResultSet built from the engine's column list.

        Raises:
            ExecutionError: With the phase in which the call failed.
        """
        # Connecting
        try:
            async with self._pool.acquire() as conn:
                return await self._run(conn, query_text, list(params), tuple(expected_columns))
        except ExecutionError:
            raise
        except Exception as e:
            raise self._fail(ExecutionPhase.CONNECT, e) from e

    async def _run(
        self,
        conn: Any,
        query_text: str,
        params: List[Any],
        expected_columns: Tuple[str, ...],
    ) -> ResultSet:
        try:
            cursor = conn.cursor()
        except Exception as e:
            raise self._fail(ExecutionPhase.CONNECT, e) from e

        try:
            # Submitted
            try:
                if params:
                    await asyncio.to_thread(cursor.execute, query_text, params)
                else:
                    await asyncio.to_thread(cursor.execute, query_text)
            except Exception as e:
                raise self._fail(_classify_submit_error(e), e) from e

            try:
                columns, rows = await asyncio.to_thread(_fetch_result, cursor)
            except Exception as e:
                raise self._fail(_classify_fetch_error(e), e) from e
        except asyncio.CancelledError:
            logger.info("Engine call cancelled; cancelling the Presto query")
            cancel = asyncio.get_running_loop().run_in_executor(None, cursor.cancel)
            cancel.add_done_callback(self._log_cancel_result)
            raise

        try:
            result = ResultSet(columns=columns, rows=rows)
        except ValidationError as e:
            raise self._fail(ExecutionPhase.TRANSPORT, e) from e

        if expected_columns and result.columns != expected_columns:
            logger.warning(
                f"Engine returned columns {list(result.columns)}, "
                f"expected {list(expected_columns)}"
            )

        logger.info(f"Engine call returned {len(result)} rows")
        return result
