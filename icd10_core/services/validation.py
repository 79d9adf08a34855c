from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence

from icd10_core.clinical.icd10.structure import normalize_code
from icd10_core.repositories.code_store import CodeStoreRepository

logger = logging.getLogger(__name__)

NOT_BILLABLE_WARNING = "Code exists but is not billable"
NOT_FOUND_ERROR = "Code not found"


@dataclass
class ValidationResult:
    valid: bool
    billable: bool
    description: Optional[str] = None
    effective_date: Optional[date] = None
    end_date: Optional[date] = None
    warning: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ValidationSummary:
    total_codes: int
    valid_codes: int
    billable_codes: int
    invalid_codes: int


def summarize(results: Mapping[str, ValidationResult]) -> ValidationSummary:
    """Counts over a validation mapping; one entry per distinct normalized code."""
    total = len(results)
    valid = sum(1 for r in results.values() if r.valid)
    billable = sum(1 for r in results.values() if r.billable)
    return ValidationSummary(
        total_codes=total,
        valid_codes=valid,
        billable_codes=billable,
        invalid_codes=total - valid,
    )


class BatchValidator:
    """Literal-id validation of many codes with a single bulk store read.

    No hierarchy-aware matching happens: ``E119`` is not ``E11.9``.
    """

    def __init__(self, store: CodeStoreRepository) -> None:
        self.store = store

    def validate(
        self,
        codes: Sequence[str],
        check_billable: bool = False,
        effective_date: Optional[date] = None,
    ) -> dict[str, ValidationResult]:
        if not codes:
            return {}

        normalized_codes = [normalize_code(code) for code in codes]
        found = {
            row.code: row
            for row in self.store.get_many_by_exact_id(normalized_codes, effective_date=effective_date)
        }

        results: dict[str, ValidationResult] = {}
        for code in normalized_codes:
            row = found.get(code)
            if row is None:
                results[code] = ValidationResult(valid=False, billable=False, error=NOT_FOUND_ERROR)
                continue

            billable = bool(row.is_billable)
            results[code] = ValidationResult(
                valid=True,
                billable=billable,
                description=row.description,
                effective_date=row.effective_date,
                end_date=row.end_date,
                warning=NOT_BILLABLE_WARNING if check_billable and not billable else None,
            )

        logger.debug(
            "validated codes=%s distinct=%s found=%s effective_date=%s",
            len(codes),
            len(results),
            len(found),
            effective_date,
        )
        return results
