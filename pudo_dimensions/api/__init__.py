"""
Backend API package initialization.

This package contains the FastAPI router modules for the PUDO Dimensions API:
- metrics: active points, recent history, live data and filtered metrics
- errors: mapping of service failures to HTTP error responses
"""

from fastapi import APIRouter

from pudo_dimensions.api.metrics import router as metrics_router

# Create main API router
api_router = APIRouter()

api_router.include_router(metrics_router, prefix="/api", tags=["metrics"])

__all__ = [
    "api_router",
    "metrics_router",
]
