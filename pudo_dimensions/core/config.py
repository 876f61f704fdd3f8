"""
Settings and environment management module for the PUDO Dimensions backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Presto analytics engine connection parameters (host, credentials, protocol)
- Singleton pattern via @lru_cache so the configuration is built once per process
- Credentials held as SecretStr so they never end up in logs or reprs

Environment Variables:
- PRESTO_USERNAME: Presto user (Required)
- PRESTO_PASSWORD: Presto password (Required)
- PRESTO_HOST / PRESTO_PORT / PRESTO_PROTOCOL: Engine endpoint
- PRESTO_CATALOG / PRESTO_SCHEMA: Session catalog and schema
- PRESTO_SOURCE: Client source tag reported to the engine
- APP_ENV: 'production' hides internal error details from API responses
- PORT: HTTP port for uvicorn (default: 3000)

Usage:
    from pudo_dimensions.core.config import get_settings

    settings = get_settings()
    host = settings.presto_host
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Source tag layout expected by the data platform's query accounting
SOURCE_TEMPLATE = "(49)-(brbi-adhoc)-({user})-(jdbc)-({user})-(USEast)"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The instance is immutable once built and is passed explicitly to the
    engine pool and, through FastAPI dependencies, to the request handlers.

    Attributes:
        presto_host: Presto coordinator hostname.
        presto_port: Presto coordinator port.
        presto_protocol: HTTP scheme used to reach the coordinator.
        presto_username: Presto user, also used in the source tag.
        presto_password: Presto password for basic authentication.
        presto_catalog: Session catalog for unqualified table references.
        presto_schema: Session schema for unqualified table references.
        presto_source: Optional explicit source tag; derived from the user when unset.
        engine_max_connections: Upper bound on concurrent engine calls.
        engine_request_timeout: Timeout in seconds for each HTTP request to Presto.
        query_timeout_seconds: Optional overall timeout for one query, applied by callers.
        app_env: Deployment environment name.
        host: Bind address for uvicorn.
        port: Bind port for uvicorn.
        cors_allow_origins: Origins allowed by the CORS middleware.
        log_level: Root logging level.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
        frozen=True,
    )

    # =========================================================================
    # Presto Analytics Engine
    # =========================================================================

    presto_host: str = 'us.presto-secure.data-infra.shopee.io'
    presto_port: int = 443
    presto_protocol: str = 'https'

    # Required - the engine rejects anonymous queries
    presto_username: str
    presto_password: SecretStr

    presto_catalog: str = 'hive'
    presto_schema: str = 'dev_brbi_opslgc'
    presto_source: Optional[str] = None

    # =========================================================================
    # Engine Pool and Timeouts
    # =========================================================================

    engine_max_connections: int = Field(default=10, ge=1)
    engine_request_timeout: float = Field(default=60.0, gt=0)

    # None means no overall limit; a query runs until the engine answers
    query_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # =========================================================================
    # HTTP Server
    # =========================================================================

    app_env: str = 'development'
    host: str = '0.0.0.0'
    port: int = 3000
    cors_allow_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]
    log_level: str = 'INFO'

    @field_validator('presto_protocol')
    @classmethod
    def _check_protocol(cls, value: str) -> str:
        value = value.lower()
        if value not in ('http', 'https'):
            raise ValueError("presto_protocol must be 'http' or 'https'")
        return value

    @property
    def engine_source(self) -> str:
        """Source tag sent with every query."""
        if self.presto_source:
            return self.presto_source
        return SOURCE_TEMPLATE.format(user=self.presto_username)

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == 'production'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If required environment variables are missing
            (PRESTO_USERNAME, PRESTO_PASSWORD) or have invalid values.

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
