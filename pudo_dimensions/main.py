"""
FastAPI application entry point for the PUDO Dimensions API.

Configures logging and CORS, manages the Presto engine pool over the
application lifespan, registers the API routers and error handlers, and
starts the ASGI server when executed directly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pudo_dimensions import __version__
from pudo_dimensions.api import api_router
from pudo_dimensions.api.errors import unhandled_exception_handler
from pudo_dimensions.core.config import get_settings
from pudo_dimensions.core.engine import init_engine, close_engine
from pudo_dimensions.core.exceptions import PudoApiError


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    On startup:
        - Create the Presto engine pool (no network I/O happens here)

    On shutdown:
        - Close idle engine connections
    """
    logger.info("PUDO Packages Dimensions API starting")
    await init_engine(settings)

    yield

    logger.info("PUDO Packages Dimensions API shutting down")
    await close_engine()


# Create FastAPI application
app = FastAPI(
    title="PUDO Packages Dimensions API",
    version=__version__,
    description=(
        "Precomputed PUDO metrics served from the Presto analytics engine: "
        "active points, recent volume history, live backlog and filtered views."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(PudoApiError, unhandled_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Does not contact the analytics engine.
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """API name, version and documentation links."""
    return {
        "name": "PUDO Packages Dimensions API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    logger.info(f"PUDO Packages Dimensions API running on port {settings.port}")
    uvicorn.run(
        "pudo_dimensions.main:app",
        host=settings.host,
        port=settings.port,
    )
