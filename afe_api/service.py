# ============================================================================
# MODULE CONTEXT - AFE SERVICE
# ============================================================================
# STATUS: Standalone Service - AFE projection logic
# PURPOSE: Reshape EAV rows into flat AFE records and pagination envelopes
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFEService, to_float, format_summary, flatten_property_rows
# PYDANTIC_MODELS: AFESummary, AFEPagination, AFEListResponse, AFESearchTextResponse
# DEPENDENCIES: afe_api.repository, afe_api.property_map, util_logger
# SOURCE: Repository layer (AFERepository)
# PATTERNS: Service Layer, Facade Pattern
# ============================================================================

"""
AFE Service - Projection Layer

Turns repository rows into API records:

- Summary rows (one per AFE, attributes already pivoted by the query) become
  `AFESummary` models with numeric text converted to floats.
- Detail rows (one per attribute) are grouped by content id and flattened
  into one record per AFE, keyed by the static property map. Every mapped
  field starts as None; attribute ids outside the map are dropped.

Date: 19 OCT 2026
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from util_logger import LoggerFactory, ComponentType

from .models import (
    AFEBulkSearchRequest,
    AFEListParameters,
    AFEListResponse,
    AFEPagination,
    AFESearchTextParameters,
    AFESearchTextResponse,
    AFESummary,
)
from .property_map import (
    NUMERIC_FIELDS,
    PROPERTY_FIELD_MAP,
    SUMMARY_FIELDS,
    field_for_property,
    normalize_guid,
)
from .repository import AFERepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "AFEService")


# ============================================================================
# VALUE CONVERSION
# ============================================================================

def to_float(value: Any) -> Optional[float]:
    """
    Decimal text to float.

    None, blank and unparsable text give None, as do NaN and infinity
    (they have no JSON representation).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = float(text)
        except ValueError:
            logger.debug(f"Non-numeric value in numeric field: {text[:50]!r}")
            return None

    if math.isnan(result) or math.isinf(result):
        return None
    return result


def format_summary(row: Dict[str, Any]) -> AFESummary:
    """Project one summary row onto the table-view fields."""
    record = {field: row.get(field) for field in SUMMARY_FIELDS}
    for field in ("gross_budget", "net_budget", "working_interest_pct"):
        record[field] = to_float(record[field])
    return AFESummary(**record)


def _empty_detail(afe_number: Optional[str]) -> Dict[str, Any]:
    record: Dict[str, Any] = {"afe_number": afe_number}
    record.update(dict.fromkeys(PROPERTY_FIELD_MAP.values()))
    return record


def flatten_property_rows(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Group attribute rows by content id and flatten each group.

    Later non-null values overwrite earlier ones for the same field; a null
    value never clears a field. Records come back in first-seen order.

    Args:
        rows: Dicts with content_guid, afe_number, property_guid, field_value

    Returns:
        One dict per content id with `afe_number` plus every mapped field
    """
    records: Dict[str, Dict[str, Any]] = {}

    for row in rows:
        content_id = normalize_guid(row.get("content_guid"))
        record = records.get(content_id)
        if record is None:
            record = records[content_id] = _empty_detail(row.get("afe_number"))

        field = field_for_property(row.get("property_guid"))
        value = row.get("field_value")
        if field and value is not None:
            record[field] = value

    for record in records.values():
        for field in NUMERIC_FIELDS:
            record[field] = to_float(record[field])

    return list(records.values())


def _pagination(limit: int, offset: int, count: int) -> AFEPagination:
    return AFEPagination(
        limit=limit,
        offset=offset,
        count=count,
        has_more=count == limit
    )


# ============================================================================
# SERVICE
# ============================================================================

class AFEService:
    """
    Business logic service for the AFE API.

    Responsibilities:
    - Run repository queries for validated request models
    - Build the response envelopes (pagination echo, has_more)
    - Flatten bulk detail rows
    """

    def __init__(self, repository: Optional[AFERepository] = None):
        """
        Initialize service.

        Args:
            repository: AFE repository (created against the shared client if not provided)
        """
        self.repository = repository or AFERepository()

    def list_afes(self, params: AFEListParameters) -> AFEListResponse:
        """Page of AFE summaries, optionally filtered by status."""
        rows = self.repository.list_afes(
            limit=params.limit,
            offset=params.offset,
            status=params.status
        )
        return AFEListResponse(
            afes=[format_summary(row) for row in rows],
            pagination=_pagination(params.limit, params.offset, len(rows))
        )

    def search_text(self, params: AFESearchTextParameters) -> AFESearchTextResponse:
        """Page of AFE summaries matching free text."""
        rows = self.repository.search_afes_text(
            params.q,
            limit=params.limit,
            offset=params.offset
        )
        return AFESearchTextResponse(
            afes=[format_summary(row) for row in rows],
            search_query=params.q,
            pagination=_pagination(params.limit, params.offset, len(rows))
        )

    def get_afe_details(self, request: AFEBulkSearchRequest) -> List[Dict[str, Any]]:
        """Flattened detail records for the requested AFE numbers."""
        afe_numbers = request.unique_afe_numbers
        rows = self.repository.fetch_afe_properties(afe_numbers)
        records = flatten_property_rows(rows)

        logger.info(f"Flattened {len(rows)} property rows into {len(records)} AFE records")
        return records
