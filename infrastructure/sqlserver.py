# ============================================================================
# MODULE CONTEXT - SQL SERVER CLIENT
# ============================================================================
# STATUS: Core Infrastructure - SQL Server connection management
# PURPOSE: Pooled, read-only access to the content-management database
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SqlServerClient, DataSourceError, get_sql_client, reset_sql_client
# DEPENDENCIES: sqlalchemy, pymssql, config, util_logger
# SCOPE: Read-only database operations for API serving
# PATTERNS: Pooled engine, Scoped connections, Lazy singleton
# ============================================================================

"""
SQL Server Client - Pooled Read-Only Database Access

One SQLAlchemy engine per process, backed by a QueuePool. Each request
acquires a pooled connection through `connection()`, runs its statement and
hands the connection back when the block exits.

Usage:
    from infrastructure.sqlserver import get_sql_client

    client = get_sql_client()
    rows = client.fetch_all(select(content.c.Name))

Tests inject an engine directly:

    client = SqlServerClient(engine=create_engine("sqlite://"))
"""

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool
from sqlalchemy.sql import Executable

from config import AppConfig, build_sql_connection_descriptor, get_app_config
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.ADAPTER, "SqlServerClient")


class DataSourceError(RuntimeError):
    """Connectivity or query failure in the content database."""


class SqlServerClient:
    """
    Pooled SQL Server client.

    Connection Strategy:
    -------------------
    The engine is created on first use, so a process with incomplete SQL
    settings still starts. Connections are borrowed from the pool for the
    duration of one `connection()` block and are always returned, including
    when the statement fails.
    """

    def __init__(self, config: Optional[AppConfig] = None, engine: Optional[Engine] = None):
        """
        Initialize client.

        Args:
            config: Application configuration (uses singleton if not provided)
            engine: Pre-built engine (skips descriptor resolution)
        """
        self.config = config or get_app_config()
        self._engine = engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        descriptor = build_sql_connection_descriptor(self.config)

        connect_args = {"login_timeout": self.config.sql_login_timeout}
        if self.config.sql_query_timeout:
            connect_args["timeout"] = self.config.sql_query_timeout

        engine = create_engine(
            descriptor.to_url(),
            poolclass=QueuePool,
            pool_size=self.config.sql_pool_size,
            max_overflow=self.config.sql_max_overflow,
            pool_timeout=self.config.sql_pool_timeout,
            pool_recycle=self.config.sql_pool_recycle,
            pool_pre_ping=True,
            connect_args=connect_args
        )

        logger.info(
            f"✅ SQL Server engine created for {descriptor.server}/{descriptor.database}",
            extra={'custom_dimensions': descriptor.describe()}
        )
        return engine

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """
        Borrow a pooled connection for the duration of the block.

        Yields:
            sqlalchemy Connection

        Raises:
            DataSourceError: On connection or statement failures
        """
        try:
            with self.engine.connect() as conn:
                logger.debug("🔗 Pooled connection acquired")
                yield conn
            logger.debug("🔒 Pooled connection released")
        except SQLAlchemyError as e:
            logger.error(f"❌ SQL Server error: {e}")
            logger.error(f"  Error type: {type(e).__name__}")
            raise DataSourceError(f"Database query failed: {type(e).__name__}") from e

    def fetch_all(self, statement: Executable) -> List[Dict[str, Any]]:
        """
        Execute one statement and return every row as a dict.

        Args:
            statement: SQLAlchemy Core statement with bound parameters

        Returns:
            List of row dicts keyed by column label
        """
        with self.connection() as conn:
            result = conn.execute(statement)
            return [dict(row) for row in result.mappings()]

    def ping(self) -> float:
        """
        Run SELECT 1 and return the round-trip latency in milliseconds.

        Raises:
            DataSourceError: If the database is unreachable
        """
        start_time = time.perf_counter()
        with self.connection() as conn:
            conn.execute(text("SELECT 1")).scalar()
        return (time.perf_counter() - start_time) * 1000

    def pool_status(self) -> Dict[str, Any]:
        """Pool counters, or an empty dict before the engine exists."""
        if self._engine is None:
            return {}

        pool = self._engine.pool
        status = {"description": pool.status()}
        for counter in ("size", "checkedin", "checkedout", "overflow"):
            method = getattr(pool, counter, None)
            if callable(method):
                status[counter] = method()
        return status

    def dispose(self) -> None:
        """Close every pooled connection."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("SQL Server connection pool disposed")


@lru_cache(maxsize=1)
def get_sql_client() -> SqlServerClient:
    """
    Get the process-wide SQL Server client.

    Returns:
        Shared SqlServerClient (engine created lazily on first query)
    """
    return SqlServerClient()


def reset_sql_client() -> None:
    """Dispose the shared client's pool and drop the cached instance."""
    if get_sql_client.cache_info().currsize:
        get_sql_client().dispose()
    get_sql_client.cache_clear()
