# ============================================================================
# MODULE CONTEXT - AFE API TRIGGERS
# ============================================================================
# STATUS: Standalone HTTP Triggers - AFE API endpoints
# PURPOSE: Azure Functions HTTP handlers for the AFE query endpoints
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: BaseAFETrigger, AFELivenessTrigger, AFESearchTextTrigger, AFEListTrigger,
#          AFEBulkSearchTrigger, AFEHealthTrigger
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# PYDANTIC_MODELS: AFEListParameters, AFESearchTextParameters, AFEBulkSearchRequest
# DEPENDENCIES: azure.functions, pydantic, json, hmac, uuid
# SOURCE: HTTP requests from the AFE front end
# VALIDATION: Bearer token check, Pydantic request validation
# PATTERNS: Trigger Pattern, Template Method (handle -> _process)
# ============================================================================

"""
AFE API HTTP Triggers - Azure Functions Handlers

Endpoints:
- GET  /afe              - Liveness message
- GET  /afe/search-text  - Free-text AFE search (q, limit, offset)
- GET  /afe/list         - AFE list (limit, offset, status)
- POST /afe/search       - Bulk AFE detail ({"afeNumbers": [...]})
- GET  /afe/health       - Detailed data-source health

Each trigger:
1. Rejects requests without the configured bearer token (403), before any
   database access
2. Parses and validates inputs (400 with {"error": message})
3. Calls the service layer
4. Maps data-source and unexpected failures to a generic 500

Date: 19 OCT 2026
"""

import hmac
import json
import uuid
from typing import Any, Dict, Optional

import azure.functions as func
from pydantic import ValidationError

from config import AppConfig, get_app_config
from health import HealthStatus, get_detailed_health, get_liveness
from infrastructure.sqlserver import SqlServerClient
from util_logger import LoggerFactory, ComponentType, LogContext

from .config import AFEApiConfig, get_afe_config
from .models import AFEBulkSearchRequest, AFEListParameters, AFESearchTextParameters
from .service import AFEService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "AFETriggers")


class BadRequestError(ValueError):
    """Request input the caller has to fix (400)."""


def _validation_message(error: ValidationError) -> str:
    """Collapse a pydantic ValidationError into one readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseAFETrigger:
    """
    Base class for AFE API triggers.

    Provides common functionality:
    - Bearer token authorization
    - Request correlation for logs
    - JSON response formatting
    - Error mapping (400 / 403 / 500)
    """

    route = "afe"

    def __init__(
        self,
        service: Optional[AFEService] = None,
        app_config: Optional[AppConfig] = None,
        api_config: Optional[AFEApiConfig] = None
    ):
        """Initialize trigger with service and configuration."""
        self._service = service
        self._app_config = app_config
        self.api_config = api_config or get_afe_config()

    @property
    def app_config(self) -> AppConfig:
        return self._app_config or get_app_config()

    @property
    def service(self) -> AFEService:
        # Created on first use so importing the triggers never opens a pool
        if self._service is None:
            self._service = AFEService()
        return self._service

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """
        Authorize, then process the request with error mapping.

        Args:
            req: Azure Functions HTTP request

        Returns:
            HttpResponse with JSON body
        """
        context = self._log_context(req)

        forbidden = self._check_authorization(req, context)
        if forbidden:
            return forbidden

        try:
            return self._process(req, context)

        except BadRequestError as e:
            logger.warning(f"Bad request: {e}", extra=context.as_extra(status_code=400))
            return self._error_response(str(e), status_code=400)
        except ValidationError as e:
            message = _validation_message(e)
            logger.warning(f"Invalid request parameters: {message}", extra=context.as_extra(status_code=400))
            return self._error_response(message, status_code=400)
        except Exception as e:
            logger.error(
                f"Error handling {req.method} /{self.route}: {e}",
                exc_info=True,
                extra=context.as_extra(status_code=500)
            )
            return self._error_response("Internal server error", status_code=500)

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        raise NotImplementedError

    def _log_context(self, req: func.HttpRequest) -> LogContext:
        return LogContext(
            request_id=req.headers.get("x-request-id") or str(uuid.uuid4()),
            correlation_id=req.headers.get("x-correlation-id"),
            route=self.route,
            method=req.method
        )

    def _check_authorization(self, req: func.HttpRequest, context: LogContext) -> Optional[func.HttpResponse]:
        """
        Check the bearer token.

        Returns:
            None if authorized, 403 HttpResponse otherwise
        """
        secret = self.app_config.api_key
        supplied = req.headers.get("Authorization") or ""

        if secret and hmac.compare_digest(supplied.encode("utf-8"), f"Bearer {secret}".encode("utf-8")):
            return None

        if not secret:
            logger.error("API_KEY is not configured; rejecting request", extra=context.as_extra(status_code=403))
        else:
            logger.warning("Rejected request with missing or invalid bearer token", extra=context.as_extra(status_code=403))
        return self._error_response("Forbidden", status_code=403)

    def _query_params(self, req: func.HttpRequest, *names: str) -> Dict[str, Any]:
        """Named query parameters that are present and non-blank."""
        params = {}
        for name in names:
            value = req.params.get(name)
            if value is not None and value.strip():
                params[name] = value.strip()
        return params

    def _page_params(self, req: func.HttpRequest) -> Dict[str, Any]:
        params = {"limit": self.api_config.default_limit, "offset": 0}
        params.update(self._query_params(req, "limit", "offset"))
        return params

    @property
    def _validation_context(self) -> Dict[str, Any]:
        return {
            "max_limit": self.api_config.max_limit,
            "max_bulk_numbers": self.api_config.max_bulk_numbers
        }

    def _json_response(self, data: Any, status_code: int = 200) -> func.HttpResponse:
        """
        Create JSON HTTP response.

        Args:
            data: Data to serialize (dict, list or Pydantic model)
            status_code: HTTP status code

        Returns:
            Azure Functions HttpResponse
        """
        # Nulls stay in the payload: absent attributes are part of the contract
        if hasattr(data, 'model_dump'):
            data = data.model_dump(mode='json')

        return func.HttpResponse(
            body=json.dumps(data, indent=2, default=str),
            status_code=status_code,
            mimetype="application/json"
        )

    def _error_response(self, message: str, status_code: int = 400) -> func.HttpResponse:
        """Create {"error": message} response."""
        return func.HttpResponse(
            body=json.dumps({"error": message}),
            status_code=status_code,
            mimetype="application/json"
        )


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class AFELivenessTrigger(BaseAFETrigger):
    """
    Liveness trigger.

    Endpoint: GET /afe

    Static response, no database needed.
    """

    route = "afe"

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        return self._json_response(get_liveness())


class AFESearchTextTrigger(BaseAFETrigger):
    """
    Free-text search trigger.

    Endpoint: GET /afe/search-text

    Query Parameters:
    - q: Search text (required, non-blank)
    - limit: Page size (default 50)
    - offset: Rows to skip (default 0)
    """

    route = "afe/search-text"

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        search_text = req.params.get("q")
        if not search_text or not search_text.strip():
            raise BadRequestError('Search query parameter "q" is required')

        raw = self._page_params(req)
        raw["q"] = search_text
        params = AFESearchTextParameters.model_validate(raw, context=self._validation_context)

        result = self.service.search_text(params)

        logger.info(
            f"Text search: q='{params.q}', returned={result.pagination.count}",
            extra=context.as_extra(count=result.pagination.count)
        )
        return self._json_response(result)


class AFEListTrigger(BaseAFETrigger):
    """
    AFE list trigger.

    Endpoint: GET /afe/list

    Query Parameters:
    - limit: Page size (default 50)
    - offset: Rows to skip (default 0)
    - status: Exact status filter (optional)
    """

    route = "afe/list"

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        raw = self._page_params(req)
        raw.update(self._query_params(req, "status"))
        params = AFEListParameters.model_validate(raw, context=self._validation_context)

        result = self.service.list_afes(params)

        logger.info(
            f"AFE list: status={params.status!r}, returned={result.pagination.count}",
            extra=context.as_extra(count=result.pagination.count)
        )
        return self._json_response(result)


class AFEBulkSearchTrigger(BaseAFETrigger):
    """
    Bulk AFE detail trigger.

    Endpoint: POST /afe/search

    Body: {"afeNumbers": ["AFE-001", ...]}
    """

    route = "afe/search"

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        try:
            body = req.get_json()
        except ValueError:
            raise BadRequestError("Request body must be valid JSON") from None

        if not isinstance(body, dict):
            raise BadRequestError("Request body must be a JSON object")

        afe_numbers = body.get("afeNumbers")
        if not isinstance(afe_numbers, list) or not afe_numbers:
            raise BadRequestError("afeNumbers array required")

        request = AFEBulkSearchRequest.model_validate(
            {"afeNumbers": afe_numbers},
            context=self._validation_context
        )

        records = self.service.get_afe_details(request)

        logger.info(
            f"Bulk detail: requested={len(request.afe_numbers)}, returned={len(records)}",
            extra=context.as_extra(count=len(records))
        )
        return self._json_response(records)


class AFEHealthTrigger(BaseAFETrigger):
    """
    Detailed health trigger.

    Endpoint: GET /afe/health

    Returns 503 when the content database is unreachable.
    """

    route = "afe/health"

    def __init__(self, client: Optional[SqlServerClient] = None, **kwargs):
        super().__init__(**kwargs)
        self.client = client

    def _process(self, req: func.HttpRequest, context: LogContext) -> func.HttpResponse:
        result = get_detailed_health(self.client)
        status_code = 503 if result["status"] == HealthStatus.UNHEALTHY.value else 200
        return self._json_response(result, status_code=status_code)
