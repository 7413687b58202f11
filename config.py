# ============================================================================
# MODULE CONTEXT - APPLICATION CONFIGURATION
# ============================================================================
# STATUS: Core Infrastructure - Configuration Management
# PURPOSE: Centralized configuration for the SQL Server content database and API key
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AppConfig, SqlConnectionDescriptor, get_app_config, build_sql_connection_descriptor
# DEPENDENCIES: pydantic-settings, sqlalchemy
# SOURCE: Environment variables (.env supported for local development)
# PATTERNS: Singleton pattern for config, lazy descriptor construction
# ============================================================================

"""
Application Configuration Module

Provides centralized configuration management for the AFE bridge including:
- SQL Server connection descriptor generation
- Named instance resolution ("host\\instance" notation)
- Optional Windows domain (NTLM) logins
- Bearer token secret for request authorization
- Connection pool tuning

Server Resolution:
    SQL_SERVER_HOST (or the legacy SQL_SERVER) may carry a named instance:

        SQL_SERVER_HOST=db01\\SQLEXPRESS  ->  host=db01, instance=SQLEXPRESS

    An explicit SQL_INSTANCE_NAME always wins over the instance parsed from
    the host string.

Usage:
    from config import build_sql_connection_descriptor

    descriptor = build_sql_connection_descriptor()
    engine = create_engine(descriptor.to_url())
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when required data-source settings are missing."""


# ============================================================================
# Application Configuration
# ============================================================================

class AppConfig(BaseSettings):
    """
    Application-wide configuration loaded from environment variables.

    SQL settings are optional at load time so the liveness route keeps
    working on a half-configured host; they are validated when the
    connection descriptor is built.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # SQL Server Connection
    sql_server_host: Optional[str] = Field(default=None, description="Host or host\\instance")
    sql_server: Optional[str] = Field(default=None, description="Legacy alias for SQL_SERVER_HOST")
    sql_instance_name: Optional[str] = Field(default=None, description="Named instance")
    sql_port: Optional[int] = Field(default=None, description="TCP port (driver default if unset)")
    sql_user: Optional[str] = Field(default=None, description="Database username")
    sql_password: Optional[str] = Field(default=None, description="Database password")
    sql_database: Optional[str] = Field(default=None, description="Database name")
    sql_domain: Optional[str] = Field(default=None, description="Windows domain for NTLM logins")

    # Connection Pool
    sql_pool_size: int = Field(default=5, ge=1, description="Pooled connections kept open")
    sql_max_overflow: int = Field(default=10, ge=0, description="Extra connections beyond pool size")
    sql_pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    sql_pool_recycle: int = Field(default=1800, description="Recycle connections older than N seconds")
    sql_login_timeout: int = Field(default=15, ge=1, description="Driver login timeout (seconds)")
    sql_query_timeout: int = Field(default=30, ge=0, description="Driver query timeout (seconds, 0 = none)")

    # API
    api_key: Optional[str] = Field(default=None, description="Bearer token secret")
    port: int = Field(default=4000, description="Listen port for the local Functions host")


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    Get singleton application configuration instance.

    Returns:
        AppConfig: Validated configuration object
    """
    return AppConfig()


# ============================================================================
# SQL Server Connection Descriptor
# ============================================================================

@dataclass(frozen=True)
class SqlConnectionDescriptor:
    """Resolved SQL Server connection settings."""

    host: str
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    instance_name: Optional[str] = None
    port: Optional[int] = None
    domain: Optional[str] = None

    @property
    def server(self) -> str:
        """Driver-facing server string ("host\\instance" for named instances)."""
        if self.instance_name:
            return f"{self.host}\\{self.instance_name}"
        return self.host

    @property
    def login(self) -> Optional[str]:
        """Login name, prefixed with the domain for NTLM authentication."""
        if self.user and self.domain:
            return f"{self.domain}\\{self.user}"
        return self.user

    def to_url(self, drivername: str = "mssql+pymssql") -> URL:
        """
        Build a SQLAlchemy URL for this descriptor.

        Named instances are resolved by the SQL Browser service, so the
        port is only used when no instance is set.
        """
        return URL.create(
            drivername,
            username=self.login,
            password=self.password,
            host=self.server,
            port=None if self.instance_name else self.port,
            database=self.database
        )

    def describe(self) -> dict:
        """Loggable summary (no secrets)."""
        return {
            "host": self.host,
            "instance_name": self.instance_name,
            "port": self.port,
            "database": self.database,
            "user": self.login,
            "auth_mode": "ntlm" if self.domain else "sql"
        }


def resolve_server(raw_server: Optional[str], instance_name: Optional[str] = None):
    """
    Split "host\\instance" notation into (host, instance).

    Args:
        raw_server: Host string, optionally carrying a named instance
        instance_name: Explicit instance name (takes precedence)

    Returns:
        Tuple of (host, instance_name or None)
    """
    server = (raw_server or "").strip()
    instance = (instance_name or "").strip()

    host = server
    if "\\" in server:
        host, _, parsed_instance = server.partition("\\")
        if not instance:
            instance = parsed_instance.strip()

    return host.strip(), (instance or None)


def build_sql_connection_descriptor(config: Optional[AppConfig] = None) -> SqlConnectionDescriptor:
    """
    Build the SQL Server connection descriptor from configuration.

    Args:
        config: Application configuration (uses singleton if not provided)

    Returns:
        SqlConnectionDescriptor

    Raises:
        ConfigurationError: If no server host is configured
    """
    config = config or get_app_config()

    host, instance = resolve_server(
        config.sql_server_host or config.sql_server,
        config.sql_instance_name
    )
    if not host:
        raise ConfigurationError("SQL_SERVER_HOST or SQL_SERVER is required")

    descriptor = SqlConnectionDescriptor(
        host=host,
        database=config.sql_database,
        user=config.sql_user,
        password=config.sql_password,
        instance_name=instance,
        port=config.sql_port,
        domain=(config.sql_domain or "").strip() or None
    )

    logger.debug(f"Resolved SQL Server descriptor: {descriptor.describe()}")
    return descriptor
