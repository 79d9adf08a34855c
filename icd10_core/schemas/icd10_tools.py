from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from icd10_core.core.search_config import hierarchy_tuning, search_tuning
from icd10_core.services.hierarchy import HierarchyDirection


def _required_text(value: object) -> str:
    if value is None:
        raise ValueError("field is required")
    cleaned = str(value).strip()
    if not cleaned:
        raise ValueError("field must not be empty")
    return cleaned


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class LookupRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=10)
    include_hierarchy: bool = False
    effective_date: date | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _normalize_code(cls, value: object) -> str:
        return _required_text(value).upper()


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(default=search_tuning.default_limit, ge=1, le=search_tuning.max_limit)
    category_filter: list[str] | None = None
    billable_only: bool = False
    effective_date: date | None = None

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, value: object) -> str:
        return _required_text(value)

    @field_validator("category_filter", mode="before")
    @classmethod
    def _normalize_categories(cls, value: object) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        cleaned = [str(v).strip().upper() for v in value if str(v).strip()]
        return cleaned or None


class ValidateBatchRequest(BaseModel):
    codes: list[str] = Field(..., min_length=1)
    check_billable: bool = False
    effective_date: date | None = None

    @field_validator("codes", mode="before")
    @classmethod
    def _strip_codes(cls, value: object) -> list[str]:
        if value is None:
            raise ValueError("codes is required")
        if isinstance(value, str):
            value = [value]
        return [_required_text(v) for v in value]


class HierarchyRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=10)
    direction: HierarchyDirection = HierarchyDirection.CHILDREN
    max_depth: int = Field(default=hierarchy_tuning.default_max_depth, ge=1, le=hierarchy_tuning.max_depth_limit)

    @field_validator("code", mode="before")
    @classmethod
    def _normalize_code(cls, value: object) -> str:
        return _required_text(value).upper()


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ICD10CodeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    description: str
    category: str = ""
    subcategory: str = ""
    chapter_code: str = ""
    chapter_name: str = ""
    is_billable: bool = False
    is_valid_primary: bool = True
    effective_date: date | None = None
    end_date: date | None = None
    revision_year: int | None = None


class HierarchyBlock(BaseModel):
    parents: list[ICD10CodeSchema] = Field(default_factory=list)
    children: list[ICD10CodeSchema] = Field(default_factory=list)
    siblings: list[ICD10CodeSchema] = Field(default_factory=list)


class LookupResponse(BaseModel):
    found: bool
    code: ICD10CodeSchema | None = None
    hierarchy: HierarchyBlock | None = None
    error: str | None = None


class SearchFilters(BaseModel):
    category_filter: list[str] | None = None
    billable_only: bool = False
    effective_date: date | None = None


class SearchResponse(BaseModel):
    query: str
    search_expression: str
    total_results: int
    results: list[ICD10CodeSchema]
    filters: SearchFilters


class ValidationResultSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    valid: bool
    billable: bool
    description: str | None = None
    effective_date: date | None = None
    end_date: date | None = None
    warning: str | None = None
    error: str | None = None


class ValidationResponse(BaseModel):
    total_codes: int
    valid_codes: int
    billable_codes: int
    invalid_codes: int
    validation_results: dict[str, ValidationResultSchema]
    effective_date: date | None = None


class HierarchyResponse(BaseModel):
    base_code: ICD10CodeSchema
    direction: HierarchyDirection
    max_depth: int
    total_results: int
    results: list[ICD10CodeSchema]


class StatsResponse(BaseModel):
    total_codes: int
    billable_codes: int
    chapters: int
    latest_revision: int | None = None
