"""Tests for the SQLAlchemy Code Store."""

from datetime import date

import pytest

from icd10_core.repositories.code_store import CodeStoreRepository, split_search_expression


def _codes(rows):
    return [row.code for row in rows]


class TestSplitSearchExpression:
    """Test OR-expression splitting."""

    def test_splits_on_or(self):
        assert split_search_expression("angina OR thoracic pain") == ["angina", "thoracic pain"]

    def test_lowercase_or_is_a_word(self):
        assert split_search_expression("heart or lung") == ["heart or lung"]

    def test_duplicates_and_empties_removed(self):
        assert split_search_expression("OR pain OR Pain OR") == ["pain"]

    def test_empty_expression(self):
        assert split_search_expression("") == []


class TestLookups:
    """Test exact, prefix and bulk reads."""

    def test_exact_lookup_normalizes(self, store):
        row = store.get_by_exact_id(" e11.9 ")
        assert row is not None
        assert row.description == "Type 2 diabetes mellitus without complications"

    def test_exact_lookup_is_literal(self, store):
        assert store.get_by_exact_id("E119") is None

    def test_prefix_scan_is_ordered(self, store):
        assert _codes(store.get_by_id_prefix("E11")) == ["E11", "E11.21", "E11.22", "E11.9"]

    def test_prefix_is_not_a_pattern(self, store):
        assert store.get_by_id_prefix("E1_") == []

    def test_bulk_lookup(self, store):
        rows = store.get_many_by_exact_id(["I10", "fake", "i10", "J44.1"])
        assert sorted(_codes(rows)) == ["I10", "J44.1"]

    def test_effective_date_filter(self, store):
        assert store.get_by_exact_id("I10", effective_date=date(2024, 10, 1)) is not None
        assert store.get_by_exact_id("I10", effective_date=date(2024, 9, 30)) is None


class TestSearchRanked:
    """Test ranked search over OR expressions."""

    def test_single_alternative(self, store):
        codes = _codes(store.search_ranked("diabetes", 20))
        assert codes == ["E10", "E10.9", "E11", "E11.21", "E11.22", "E11.9"]

    def test_multiword_alternative_requires_all_words(self, store):
        assert _codes(store.search_ranked("fracture arm", 20)) == ["S52.90"]

    def test_more_matched_alternatives_rank_first(self, store):
        codes = _codes(store.search_ranked("kidney OR diabetes", 20))
        assert codes[0] == "E11.22"

    def test_exact_code_match_ranks_first(self, store):
        codes = _codes(store.search_ranked("i10 OR hypertensive", 20))
        assert codes[0] == "I10"
        assert set(codes[1:]) == {"I11", "I11.0"}

    def test_description_prefix_ranks_before_other_matches(self, store):
        codes = _codes(store.search_ranked("pain", 20))
        assert codes[0] == "M79.60"

    def test_limit(self, store):
        assert len(store.search_ranked("diabetes", 2)) == 2

    def test_billable_only(self, store):
        codes = _codes(store.search_ranked("diabetes", 20, billable_only=True))
        assert codes == ["E10.9", "E11.21", "E11.22", "E11.9"]

    def test_category_filter(self, store):
        codes = _codes(store.search_ranked("diabetes", 20, category_filter=["e11"]))
        assert codes == ["E11", "E11.21", "E11.22", "E11.9"]

    def test_matches_chapter_name(self, store):
        codes = _codes(store.search_ranked("circulatory", 20))
        assert "I10" in codes

    def test_no_match(self, store):
        assert store.search_ranked("zebra", 20) == []

    def test_empty_expression(self, store):
        assert store.search_ranked("", 20) == []


class TestEffectiveWindow:
    """Test the in-effect rule applied by every store read."""

    @pytest.fixture
    def windowed_store(self, db_session):
        store = CodeStoreRepository(db_session)
        store.insert_or_replace({"code": "A00", "description": "Cholera"})
        store.insert_or_replace(
            {"code": "A01", "description": "Typhoid fever", "effective_date": "2024-10-01"}
        )
        store.insert_or_replace(
            {"code": "A02", "description": "Salmonella", "effective_date": "2020-10-01", "end_date": "2025-01-01"}
        )
        return store

    def test_open_window_is_always_in_effect(self, windowed_store):
        assert windowed_store.get_by_exact_id("A00", effective_date=date(1990, 1, 1)) is not None

    def test_effective_date_is_inclusive(self, windowed_store):
        assert windowed_store.get_by_exact_id("A01", effective_date=date(2024, 10, 1)) is not None
        assert windowed_store.get_by_exact_id("A01", effective_date=date(2024, 9, 30)) is None

    def test_end_date_is_exclusive(self, windowed_store):
        assert windowed_store.get_by_exact_id("A02", effective_date=date(2024, 12, 31)) is not None
        assert windowed_store.get_by_exact_id("A02", effective_date=date(2025, 1, 1)) is None

    def test_bulk_and_search_apply_window(self, windowed_store):
        on = date(2025, 1, 1)
        rows = windowed_store.get_many_by_exact_id(["A00", "A01", "A02"], effective_date=on)
        assert sorted(_codes(rows)) == ["A00", "A01"]
        assert "A02" not in _codes(windowed_store.search_ranked("salmonella", 20, effective_date=on))


class TestInsertOrReplace:
    """Test catalog writes."""

    def test_derives_structural_fields(self, db_session):
        store = CodeStoreRepository(db_session)
        assert store.insert_or_replace({"code": "e11.65", "description": "Type 2 diabetes with hyperglycemia"})

        row = store.get_by_exact_id("E11.65")
        assert row.category == "E11"
        assert row.subcategory == "E11.65"
        assert row.chapter_code == "E00-E89"
        assert row.is_billable is True
        assert row.is_valid_primary is True

    def test_replaces_existing_row(self, store):
        assert store.insert_or_replace({"code": "I10", "description": "Hypertension", "is_billable": False})
        row = store.get_by_exact_id("I10")
        assert row.description == "Hypertension"
        assert row.is_billable is False
        assert store.stats().total_codes == 27

    def test_rejects_empty_description(self, db_session):
        assert CodeStoreRepository(db_session).insert_or_replace({"code": "A00", "description": " "}) is False

    def test_rejects_invalid_date(self, db_session):
        store = CodeStoreRepository(db_session)
        assert store.insert_or_replace({"code": "A00", "description": "Cholera", "effective_date": "soon"}) is False
        assert store.get_by_exact_id("A00") is None

    def test_end_date_excludes_code(self, db_session):
        store = CodeStoreRepository(db_session)
        store.insert_or_replace(
            {"code": "A00", "description": "Cholera", "effective_date": "2020-10-01", "end_date": "2023-10-01"}
        )
        assert store.get_by_exact_id("A00", effective_date=date(2022, 1, 1)) is not None
        assert store.get_by_exact_id("A00", effective_date=date(2024, 1, 1)) is None


class TestStats:
    """Test catalog statistics."""

    def test_sample_catalog_stats(self, store):
        stats = store.stats()
        assert stats.total_codes == 27
        assert stats.billable_codes == 19
        assert stats.chapters == 8
        assert stats.latest_revision == 2024

    def test_empty_catalog(self, db_session):
        stats = CodeStoreRepository(db_session).stats()
        assert (stats.total_codes, stats.billable_codes, stats.chapters, stats.latest_revision) == (0, 0, 0, None)
