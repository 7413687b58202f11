# ============================================================================
# MODULE CONTEXT - AFE API CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - AFE API
# PURPOSE: Pagination and request-size limits for the AFE endpoints
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFEApiConfig, get_afe_config
# DEPENDENCIES: pydantic, os
# SOURCE: Environment variables
# ============================================================================

"""
AFE API Configuration

Environment Variables:
    Optional:
    - AFE_DEFAULT_LIMIT: Page size when `limit` is not supplied (default: 50)
    - AFE_MAX_LIMIT: Largest accepted `limit` (default: 1000)
    - AFE_MAX_BULK_NUMBERS: Most AFE numbers accepted by POST /afe/search (default: 1000)

Date: 19 OCT 2026
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class AFEApiConfig(BaseModel):
    """AFE API module configuration."""

    default_limit: int = Field(
        default_factory=lambda: int(os.getenv("AFE_DEFAULT_LIMIT", "50")),
        ge=1,
        description="Default number of AFEs per page"
    )
    max_limit: int = Field(
        default_factory=lambda: int(os.getenv("AFE_MAX_LIMIT", "1000")),
        ge=1,
        description="Maximum number of AFEs per page"
    )
    max_bulk_numbers: int = Field(
        default_factory=lambda: int(os.getenv("AFE_MAX_BULK_NUMBERS", "1000")),
        ge=1,
        le=2000,
        description="Maximum AFE numbers per bulk detail request (SQL Server allows 2100 parameters)"
    )

    @model_validator(mode="after")
    def check_limits(self) -> "AFEApiConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("AFE_DEFAULT_LIMIT cannot exceed AFE_MAX_LIMIT")
        return self


# Singleton instance cache
_afe_config_cache: Optional[AFEApiConfig] = None


def get_afe_config() -> AFEApiConfig:
    """
    Get AFE API configuration (singleton pattern).

    Returns:
        Cached configuration instance
    """
    global _afe_config_cache

    if _afe_config_cache is None:
        _afe_config_cache = AFEApiConfig()

    return _afe_config_cache
