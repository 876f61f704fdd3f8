"""
Error-to-HTTP mapping for the PUDO Dimensions API.

Every failure is returned as ``{"error": ..., "details": ...}``:

| Failure                               | Status |
|---------------------------------------|--------|
| InvalidRequestError / QueryNotFound   | 400    |
| ExecutionError(connect)               | 502    |
| ExecutionError(engine-reject)         | 502    |
| ExecutionError(transport)             | 504    |
| ExecutionError(submit)                | 500    |
| anything else                         | 500    |

``details`` holds the internal message and is omitted in production.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from pudo_dimensions.core.config import Settings, get_settings
from pudo_dimensions.core.exceptions import ExecutionError, InvalidRequestError
from pudo_dimensions.models.schemas import ErrorResponse


logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = 'An unexpected error occurred'


def error_response(exc: Exception, settings: Settings) -> JSONResponse:
    """Build the JSON error response for ``exc``."""
    if isinstance(exc, InvalidRequestError):
        logger.warning(f"Rejected request: {exc}")
        status_code, error = exc.status_code, str(exc)
    elif isinstance(exc, ExecutionError):
        status_code, error = exc.status_code, exc.summary
    else:
        logger.exception("Unhandled error while serving request", exc_info=exc)
        status_code, error = 500, UNEXPECTED_ERROR

    body = ErrorResponse(
        error=error,
        details=None if settings.is_production else str(exc),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler registered on the app.

    Catches failures raised outside the endpoint bodies (e.g. while resolving
    dependencies). Settings may be unavailable here, so details are withheld
    if they cannot be loaded.
    """
    try:
        settings = get_settings()
    except Exception:
        logger.exception("Settings unavailable while reporting an error", exc_info=exc)
        return JSONResponse(status_code=500, content={'error': UNEXPECTED_ERROR})
    return error_response(exc, settings)
