# ============================================================================
# MODULE CONTEXT - HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core Infrastructure - Health Monitoring
# PURPOSE: Liveness payload and detailed content-database health check
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: get_liveness, get_detailed_health, get_app_identity, HealthStatus
# DEPENDENCIES: infrastructure.sqlserver, config, util_logger
# PATTERNS: Two-tier health checks (liveness/detailed)
# ============================================================================

"""
Health Check Module

1. Liveness (GET /afe):
   - Static message, never touches the database

2. Detailed Health (GET /afe/health):
   - SQL Server round-trip latency
   - Connection pool counters
   - Resolved connection settings (no secrets)
   - Caller maps UNHEALTHY to 503

Usage:
    from health import get_detailed_health

    result = get_detailed_health()
    # {"status": "healthy", "checks": {"database": {...}}, ...}
"""

import time
from enum import Enum
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Optional, Dict, Any

from config import build_sql_connection_descriptor, get_app_config
from infrastructure.sqlserver import SqlServerClient, get_sql_client
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "HealthService")

LIVENESS_MESSAGE = "AFE route is working!"


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""
    status: str              # "pass" or "fail"
    latency_ms: float        # Time taken for check
    message: str             # Human-readable status message
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        result = {
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


def get_app_identity() -> Dict[str, str]:
    """Name and description used in startup logs and health payloads."""
    return {
        "name": "afe-bridge",
        "description": "Read-only AFE query API over the content-management database"
    }


def get_liveness() -> Dict[str, str]:
    """Liveness message for GET /afe."""
    return {"message": LIVENESS_MESSAGE}


def check_database_connectivity(client: Optional[SqlServerClient] = None) -> CheckResult:
    """
    Check SQL Server connectivity with SELECT 1.

    This is a critical check - failure means UNHEALTHY status.
    """
    client = client or get_sql_client()
    start_time = time.perf_counter()

    try:
        latency_ms = client.ping()
        details = {"pool": client.pool_status()}
        try:
            details["connection"] = build_sql_connection_descriptor(client.config).describe()
        except ValueError:
            # Injected engines (tests, tooling) may have no server settings
            pass

        return CheckResult(
            status="pass",
            latency_ms=latency_ms,
            message="SQL Server connection successful",
            details=details
        )

    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Database health check failed: {e}")
        return CheckResult(
            status="fail",
            latency_ms=latency_ms,
            message=f"SQL Server connection failed: {type(e).__name__}"
        )


def get_detailed_health(client: Optional[SqlServerClient] = None) -> Dict[str, Any]:
    """
    Full health payload.

    Returns:
        Dict with status, timestamp, identity and per-check results
    """
    database = check_database_connectivity(client)
    status = HealthStatus.HEALTHY if database.status == "pass" else HealthStatus.UNHEALTHY

    return {
        "status": status.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": get_app_identity()["name"],
        "checks": {
            "database": database.to_dict()
        },
        "config": {
            "api_key_configured": bool(get_app_config().api_key)
        }
    }
