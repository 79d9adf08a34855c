"""Tests for the ICD-10 tool service layer and request schemas."""

import pytest
from pydantic import ValidationError

from icd10_core.core.search_config import HierarchyTuning
from icd10_core.schemas.icd10_tools import (
    HierarchyRequest,
    LookupRequest,
    SearchRequest,
    ValidateBatchRequest,
)
from icd10_core.services.code_service import HierarchyNotFoundError, ICD10CodeService
from icd10_core.services.hierarchy import HierarchyDirection


@pytest.fixture
def service(store, expansion_engine):
    return ICD10CodeService(store=store, expansion_engine=expansion_engine)


class TestRequestSchemas:
    """Test request validation before any store access."""

    def test_lookup_code_uppercased(self):
        assert LookupRequest(code=" e11.9 ").code == "E11.9"

    def test_lookup_code_too_long(self):
        with pytest.raises(ValidationError):
            LookupRequest(code="E11.9999999X")

    def test_search_defaults(self):
        request = SearchRequest(query="fever")
        assert request.limit == 20
        assert request.billable_only is False
        assert request.category_filter is None

    def test_search_single_category_string(self):
        assert SearchRequest(query="fever", category_filter="r50").category_filter == ["R50"]

    def test_validate_blank_code_rejected(self):
        with pytest.raises(ValidationError):
            ValidateBatchRequest(codes=["E11", " "])

    def test_hierarchy_defaults(self):
        request = HierarchyRequest(code="e11")
        assert request.direction is HierarchyDirection.CHILDREN
        assert request.max_depth == 2


class TestLookup:
    """Test lookup with embedded hierarchy."""

    def test_sibling_limit(self, store, expansion_engine):
        tuning = HierarchyTuning(lookup_sibling_limit=1)
        service = ICD10CodeService(store=store, expansion_engine=expansion_engine, tuning=tuning)
        response = service.lookup(LookupRequest(code="E11.9", include_hierarchy=True))
        assert [c.code for c in response.hierarchy.siblings] == ["E11.21"]

    def test_lookup_outside_effective_window(self, service):
        response = service.lookup(LookupRequest(code="E11.9", effective_date="2019-01-01"))
        assert response.found is False


class TestSearch:
    """Test search orchestration."""

    def test_expression_is_reported(self, service):
        response = service.search(SearchRequest(query="chest pain"))
        assert response.search_expression == "angina OR thoracic pain OR cardiac pain"
        assert [r.code for r in response.results] == ["I20.9"]
        assert response.query == "chest pain"


class TestHierarchy:
    """Test hierarchy responses."""

    def test_parents_of_stored_code(self, service):
        response = service.hierarchy(HierarchyRequest(code="E11.9", direction="parents"))
        assert response.base_code.code == "E11.9"
        assert [r.code for r in response.results] == ["E11"]

    def test_virtual_base_uses_first_result(self, service):
        response = service.hierarchy(HierarchyRequest(code="J4", direction="children"))
        assert response.base_code.chapter_code == "J00-J99"
        assert response.base_code.category == "J4"
        assert response.base_code.revision_year == 2024

    def test_not_found(self, service):
        with pytest.raises(HierarchyNotFoundError):
            service.hierarchy(HierarchyRequest(code="Q99"))


class TestStats:
    def test_stats(self, service):
        assert service.stats().total_codes == 27
