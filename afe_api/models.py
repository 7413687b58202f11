# ============================================================================
# MODULE CONTEXT - AFE API MODELS
# ============================================================================
# STATUS: Standalone Models - AFE API Pydantic models
# PURPOSE: Request parameter validation and response shapes for the AFE endpoints
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AFEPageParameters, AFEListParameters, AFESearchTextParameters, AFEBulkSearchRequest,
#          AFESummary, AFEPagination, AFEListResponse, AFESearchTextResponse
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, typing
# VALIDATION: Pydantic v2 validation (limits passed through validation context)
# PATTERNS: Data Transfer Objects (DTOs)
# ============================================================================

"""
AFE API Pydantic Models

Request models accept raw query-string values and coerce them; anything
that fails validation becomes a 400 at the trigger layer. Upper bounds that
come from configuration (`max_limit`, `max_bulk_numbers`) are supplied via
the validation context:

    AFEListParameters.model_validate(raw, context={"max_limit": 1000})

Date: 19 OCT 2026
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationInfo, field_validator


# ============================================================================
# REQUEST MODELS
# ============================================================================

class AFEPageParameters(BaseModel):
    """
    Offset/limit pagination shared by the list and text-search endpoints.
    """
    limit: int = Field(
        default=50,
        ge=1,
        description="Maximum number of AFEs to return"
    )
    offset: int = Field(
        default=0,
        ge=0,
        description="Number of AFEs to skip (pagination)"
    )

    @field_validator("limit")
    @classmethod
    def check_max_limit(cls, v: int, info: ValidationInfo) -> int:
        max_limit = (info.context or {}).get("max_limit")
        if max_limit and v > max_limit:
            raise ValueError(f"limit cannot exceed {max_limit}")
        return v


class AFEListParameters(AFEPageParameters):
    """
    Query parameters for GET /afe/list.
    """
    status: Optional[str] = Field(
        default=None,
        description="Exact AFE status text filter"
    )

    @field_validator("status")
    @classmethod
    def blank_status_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class AFESearchTextParameters(AFEPageParameters):
    """
    Query parameters for GET /afe/search-text.
    """
    q: str = Field(
        min_length=1,
        description="Text matched against AFE number, name, area and creator"
    )

    @field_validator("q")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Search query parameter "q" is required')
        return v


class AFEBulkSearchRequest(BaseModel):
    """
    JSON body for POST /afe/search.
    """
    model_config = ConfigDict(populate_by_name=True)

    afe_numbers: List[StrictStr] = Field(
        alias="afeNumbers",
        min_length=1,
        description="AFE numbers (content names) to fetch"
    )

    @field_validator("afe_numbers")
    @classmethod
    def check_max_numbers(cls, v: List[str], info: ValidationInfo) -> List[str]:
        max_numbers = (info.context or {}).get("max_bulk_numbers")
        if max_numbers and len(v) > max_numbers:
            raise ValueError(f"afeNumbers cannot contain more than {max_numbers} entries")
        return v

    @property
    def unique_afe_numbers(self) -> List[str]:
        """AFE numbers with duplicates removed, first occurrence order kept."""
        return list(dict.fromkeys(self.afe_numbers))


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class AFESummary(BaseModel):
    """
    Table-view projection of one AFE.
    """
    afe_number: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    area: Optional[str] = None
    name: Optional[str] = None
    surface_location: Optional[str] = None
    gross_budget: Optional[float] = None
    net_budget: Optional[float] = None
    working_interest_pct: Optional[float] = None


class AFEPagination(BaseModel):
    """Echo of the requested page plus what came back."""
    limit: int
    offset: int
    count: int
    has_more: bool


class AFEListResponse(BaseModel):
    """
    Response for GET /afe/list.
    """
    afes: List[AFESummary]
    pagination: AFEPagination


class AFESearchTextResponse(BaseModel):
    """
    Response for GET /afe/search-text.
    """
    afes: List[AFESummary]
    search_query: str
    pagination: AFEPagination
