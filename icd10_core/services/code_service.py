"""ICD-10 tool operations for ICD-10 Core.

Each operation takes an already validated request schema and returns a plain
response schema.  Store failures (``SQLAlchemyError``) are not caught here;
they reach the caller unchanged.
"""

from __future__ import annotations

import logging

from icd10_core.core.search_config import HierarchyTuning, hierarchy_tuning
from icd10_core.models.icd10 import ICD10Code
from icd10_core.repositories.code_store import CodeStoreRepository
from icd10_core.schemas.icd10_tools import (
    HierarchyBlock,
    HierarchyRequest,
    HierarchyResponse,
    ICD10CodeSchema,
    LookupRequest,
    LookupResponse,
    SearchFilters,
    SearchRequest,
    SearchResponse,
    StatsResponse,
    ValidateBatchRequest,
    ValidationResponse,
    ValidationResultSchema,
)
from icd10_core.services.hierarchy import HierarchyDirection, HierarchyNavigator
from icd10_core.services.query_expansion import QueryExpansionEngine
from icd10_core.services.validation import NOT_FOUND_ERROR, BatchValidator, summarize

logger = logging.getLogger(__name__)


class HierarchyNotFoundError(LookupError):
    """Base code is not stored and nothing can be derived from it."""


def _to_schema(rows: list[ICD10Code]) -> list[ICD10CodeSchema]:
    return [ICD10CodeSchema.model_validate(row) for row in rows]


class ICD10CodeService:
    def __init__(
        self,
        store: CodeStoreRepository,
        expansion_engine: QueryExpansionEngine,
        *,
        tuning: HierarchyTuning = hierarchy_tuning,
    ) -> None:
        self.store = store
        self.expansion_engine = expansion_engine
        self.navigator = HierarchyNavigator(store)
        self.validator = BatchValidator(store)
        self._tuning = tuning

    def lookup(self, request: LookupRequest) -> LookupResponse:
        row = self.store.get_by_exact_id(request.code, effective_date=request.effective_date)
        if row is None:
            return LookupResponse(found=False, error=NOT_FOUND_ERROR)

        response = LookupResponse(found=True, code=ICD10CodeSchema.model_validate(row))
        if request.include_hierarchy:
            siblings = self.navigator.navigate(request.code, HierarchyDirection.SIBLINGS)
            response.hierarchy = HierarchyBlock(
                parents=_to_schema(
                    self.navigator.navigate(
                        request.code, HierarchyDirection.PARENTS, self._tuning.lookup_parent_depth
                    )
                ),
                children=_to_schema(
                    self.navigator.navigate(
                        request.code, HierarchyDirection.CHILDREN, self._tuning.lookup_children_depth
                    )
                ),
                siblings=_to_schema(siblings[: self._tuning.lookup_sibling_limit]),
            )
        return response

    def search(self, request: SearchRequest) -> SearchResponse:
        expression = self.expansion_engine.expand(request.query)
        rows = self.store.search_ranked(
            expression,
            request.limit,
            category_filter=request.category_filter,
            billable_only=request.billable_only,
            effective_date=request.effective_date,
        )
        logger.info(
            "icd10 search query=%r expression=%r results=%s",
            request.query,
            expression,
            len(rows),
        )
        return SearchResponse(
            query=request.query,
            search_expression=expression,
            total_results=len(rows),
            results=_to_schema(rows),
            filters=SearchFilters(
                category_filter=request.category_filter,
                billable_only=request.billable_only,
                effective_date=request.effective_date,
            ),
        )

    def validate_batch(self, request: ValidateBatchRequest) -> ValidationResponse:
        results = self.validator.validate(
            request.codes,
            check_billable=request.check_billable,
            effective_date=request.effective_date,
        )
        summary = summarize(results)
        return ValidationResponse(
            total_codes=summary.total_codes,
            valid_codes=summary.valid_codes,
            billable_codes=summary.billable_codes,
            invalid_codes=summary.invalid_codes,
            validation_results={
                code: ValidationResultSchema.model_validate(result) for code, result in results.items()
            },
            effective_date=request.effective_date,
        )

    def hierarchy(self, request: HierarchyRequest) -> HierarchyResponse:
        results = self.navigator.navigate(request.code, request.direction, request.max_depth)

        base = self.store.get_by_exact_id(request.code)
        if base is not None:
            base_code = ICD10CodeSchema.model_validate(base)
        elif results:
            base_code = self._virtual_base_code(request.code, results[0])
        else:
            raise HierarchyNotFoundError(
                f"No codes found for '{request.code}' and no hierarchy available"
            )

        return HierarchyResponse(
            base_code=base_code,
            direction=request.direction,
            max_depth=request.max_depth,
            total_results=len(results),
            results=_to_schema(results),
        )

    def stats(self) -> StatsResponse:
        s = self.store.stats()
        return StatsResponse(
            total_codes=s.total_codes,
            billable_codes=s.billable_codes,
            chapters=s.chapters,
            latest_revision=s.latest_revision,
        )

    def _virtual_base_code(self, code: str, first: ICD10Code) -> ICD10CodeSchema:
        """Stand-in for a category that is not itself stored (e.g. ``E1``)."""
        return ICD10CodeSchema(
            code=code,
            description=f"{code} category codes",
            category=code[:3] if len(code) >= 3 else code,
            subcategory=code,
            chapter_code=first.chapter_code or "",
            chapter_name=first.chapter_name or "",
            is_billable=False,
            is_valid_primary=True,
            effective_date=first.effective_date,
            revision_year=first.revision_year or self._tuning.virtual_base_revision_year,
        )
