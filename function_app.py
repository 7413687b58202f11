# ============================================================================
# MODULE CONTEXT - AZURE FUNCTIONS ENTRY POINT
# ============================================================================
# STATUS: Core Infrastructure - Function App Entry Point
# PURPOSE: Main entry point for Azure Functions runtime with the AFE API
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: app (FunctionApp instance)
# DEPENDENCIES: azure-functions, afe_api
# ============================================================================

"""
Azure Functions Entry Point for the AFE bridge

Registers the HTTP triggers of the AFE API. host.json sets an empty route
prefix, so routes are served at /afe/... rather than /api/afe/...

Architecture:
    - AFE API: 4 endpoints over the content-management database
    - Health: 1 endpoint for data-source monitoring

Every endpoint requires `Authorization: Bearer <API_KEY>`; the function-level
auth of the host is left ANONYMOUS because the triggers check the token.

Deployment:
    - Local: func start --port $PORT
    - Azure: func azure functionapp publish <app-name> --python --build remote
"""

import azure.functions as func
import logging

from afe_api.triggers import (
    AFELivenessTrigger,
    AFESearchTextTrigger,
    AFEListTrigger,
    AFEBulkSearchTrigger,
    AFEHealthTrigger
)
from config import get_app_config
from health import get_app_identity

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = func.FunctionApp()

# ============================================================================
# AFE API - 4 Endpoints
# ============================================================================

_afe_liveness = AFELivenessTrigger()
_afe_search_text = AFESearchTextTrigger()
_afe_list = AFEListTrigger()
_afe_bulk_search = AFEBulkSearchTrigger()


@app.route(route="afe", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def afe_root(req: func.HttpRequest) -> func.HttpResponse:
    return _afe_liveness.handle(req)


@app.route(route="afe/search-text", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def afe_search_text(req: func.HttpRequest) -> func.HttpResponse:
    return _afe_search_text.handle(req)


@app.route(route="afe/list", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def afe_list(req: func.HttpRequest) -> func.HttpResponse:
    return _afe_list.handle(req)


@app.route(route="afe/search", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def afe_search(req: func.HttpRequest) -> func.HttpResponse:
    return _afe_bulk_search.handle(req)


# ============================================================================
# Health Check - 1 Endpoint
# ============================================================================

_afe_health = AFEHealthTrigger()


@app.route(route="afe/health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def afe_health(req: func.HttpRequest) -> func.HttpResponse:
    return _afe_health.handle(req)


# ============================================================================
# Application Startup
# ============================================================================

_app_identity = get_app_identity()
_app_config = get_app_config()

logger.info("=" * 60)
logger.info(f"{_app_identity['name']} - {_app_identity['description']}")
logger.info("=" * 60)
logger.info(f"Configured listen port: {_app_config.port} (func start --port)")
if not _app_config.api_key:
    logger.warning("⚠️ API_KEY is not set - every request will be rejected with 403")
logger.info("Available endpoints:")
logger.info("  - GET  /afe - Liveness")
logger.info("  - GET  /afe/search-text - Free-text AFE search")
logger.info("  - GET  /afe/list - AFE list with optional status filter")
logger.info("  - POST /afe/search - Bulk AFE detail")
logger.info("  - GET  /afe/health - Data-source health")
logger.info("=" * 60)
