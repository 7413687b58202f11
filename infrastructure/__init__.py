# ============================================================================
# MODULE CONTEXT - INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Core Infrastructure - Database access
# PURPOSE: Shared infrastructure components for the AFE API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: SqlServerClient, DataSourceError, get_sql_client, reset_sql_client
# DEPENDENCIES: sqlalchemy, config
# ============================================================================

"""
Infrastructure Module

Provides the pooled SQL Server client used by the AFE API and the health
checks. Read-only access only.
"""

from .sqlserver import (
    SqlServerClient,
    DataSourceError,
    get_sql_client,
    reset_sql_client
)

__version__ = "1.0.0"
__all__ = [
    "SqlServerClient",
    "DataSourceError",
    "get_sql_client",
    "reset_sql_client"
]
