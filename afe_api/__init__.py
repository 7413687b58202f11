# ============================================================================
# MODULE CONTEXT - AFE API MODULE
# ============================================================================
# STATUS: Standalone Module - AFE query API
# PURPOSE: Read-only AFE endpoints over the content-management database EAV schema
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFEService, AFEApiConfig, get_afe_config, trigger classes
# DEPENDENCIES: sqlalchemy, pydantic, azure-functions
# SOURCE: tblContent / tblProperty_Strings
# PATTERNS: Service Layer, Repository Pattern, Standalone Module
# ENTRY_POINTS: from afe_api.triggers import AFEListTrigger
# ============================================================================

"""
AFE API - Standalone Module

Architecture:
    afe_api/
    ├── config.py        # Pagination / request-size limits
    ├── property_map.py  # Attribute GUID -> field name tables
    ├── models.py        # Pydantic request/response models
    ├── queries.py       # SQLAlchemy Core query builders
    ├── repository.py    # Query execution (pooled SQL Server client)
    ├── service.py       # EAV flattening, numeric coercion, pagination
    └── triggers.py      # Azure Functions HTTP handlers

Integration:
    # In function_app.py
    from afe_api.triggers import AFEListTrigger

    _afe_list = AFEListTrigger()

    @app.route(route="afe/list", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    def afe_list(req: func.HttpRequest) -> func.HttpResponse:
        return _afe_list.handle(req)

Date: 19 OCT 2026
"""

from .config import AFEApiConfig, get_afe_config
from .service import AFEService
from .triggers import (
    AFELivenessTrigger,
    AFESearchTextTrigger,
    AFEListTrigger,
    AFEBulkSearchTrigger,
    AFEHealthTrigger
)

__version__ = "1.0.0"
__all__ = [
    "AFEApiConfig",
    "AFEService",
    "get_afe_config",
    "AFELivenessTrigger",
    "AFESearchTextTrigger",
    "AFEListTrigger",
    "AFEBulkSearchTrigger",
    "AFEHealthTrigger"
]
