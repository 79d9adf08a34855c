"""Tests for code-string structural rules."""

import pytest

from icd10_core.clinical.icd10.structure import (
    NO_CHAPTER,
    category_for,
    chapter_for,
    code_in_range,
    infer_billable,
    normalize_code,
    subcategory_for,
)


class TestNormalization:
    """Test code id normalization and derived parts."""

    def test_normalize_trims_and_uppercases(self):
        assert normalize_code("  e11.9 ") == "E11.9"

    def test_normalize_none_is_empty(self):
        assert normalize_code(None) == ""

    def test_category_is_first_three_characters(self):
        assert category_for("E11.21") == "E11"
        assert category_for("e119") == "E11"

    def test_subcategory_keeps_decimal_code(self):
        assert subcategory_for("E11.21") == "E11.21"

    def test_subcategory_of_undotted_code(self):
        assert subcategory_for("E1121") == "E112"


class TestChapters:
    """Test chapter range lookup."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("E11.9", "E00-E89"),
            ("E119", "E00-E89"),
            ("A00", "A00-B99"),
            ("B99.8", "A00-B99"),
            ("D50", "D50-D89"),
            ("D49.9", "C00-D49"),
            ("H65.01", "H60-H95"),
            ("O9A.1", "O00-O9A"),
            ("O10.0", "O00-O9A"),
            ("T36.0X1A", "S00-T88"),
            ("Z51.11", "Z00-Z99"),
        ],
    )
    def test_chapter_for(self, code, expected):
        assert chapter_for(code).code == expected

    def test_chapter_name_is_returned(self):
        assert chapter_for("I10").name == "Diseases of the circulatory system"

    def test_code_without_digits_has_no_chapter(self):
        assert chapter_for("XYZ") == NO_CHAPTER

    def test_letter_between_ranges_has_no_chapter(self):
        assert chapter_for("U07.1") == NO_CHAPTER

    def test_code_in_range_respects_upper_bound(self):
        assert code_in_range("E90", "E00", "E89") is False
        assert code_in_range("E89", "E00", "E89") is True


class TestInferBillable:
    """Test the structural billability guess."""

    def test_category_is_not_billable(self):
        assert infer_billable("E11") is False

    def test_dotted_code_is_billable(self):
        assert infer_billable("E11.9") is True

    def test_undotted_long_code_is_billable(self):
        assert infer_billable("E119") is True

    def test_placeholder_x_is_not_billable(self):
        assert infer_billable("T36.0X") is False

