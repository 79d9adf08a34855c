from __future__ import annotations

import argparse
import logging
import statistics
import time
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import Session

from icd10_core.db.session import SessionLocal
from icd10_core.repositories.code_store import CodeStoreRepository
from icd10_core.schemas.icd10_tools import (
    HierarchyRequest,
    LookupRequest,
    SearchRequest,
    ValidateBatchRequest,
)
from icd10_core.services.code_service import HierarchyNotFoundError, ICD10CodeService
from icd10_core.services.hierarchy import HierarchyDirection
from icd10_core.services.icd10_state import build_synonym_dictionary
from icd10_core.services.query_expansion import QueryExpansionEngine

logger = logging.getLogger(__name__)

LOOKUP_CODES = ["E11.9", "I10", "J44.1", "F32.9", "Z51.11", "E10.9", "I11.0"]
SEARCH_QUERIES = [
    "diabetes",
    "diabetes complications",
    "hypertension",
    "pneumonia",
    "depression",
    "chronic kidney disease",
    "heart failure",
    "respiratory infection",
]
HIERARCHY_CODES = ["E11", "I11", "J44", "F32", "Z51"]
VALIDATION_BATCH = [
    "E11.9", "I10", "J44.1", "F32.9", "Z51.11",
    "E10.9", "I11.0", "INVALID1", "E11.21", "J44.0",
    "FAKE123", "E11.22", "F32", "Z51", "I11",
] * 7

# Milliseconds.
TARGETS = {
    "exact_lookup": 10.0,
    "search": 50.0,
    "hierarchy_traversal": 25.0,
    "bulk_validation": 100.0,
}


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@dataclass
class TimingStats:
    operation: str
    iterations: int
    mean: float
    median: float
    min: float
    max: float
    p95: float

    @property
    def passed(self) -> bool:
        return self.mean < TARGETS.get(self.operation, float("inf"))


def compute_stats(operation: str, times_ms: list[float]) -> TimingStats:
    ordered = sorted(times_ms)
    if not ordered:
        raise ValueError("compute_stats needs at least one timing")
    p95_index = min(len(ordered) - 1, int(len(ordered) * 0.95))
    return TimingStats(
        operation=operation,
        iterations=len(ordered),
        mean=statistics.fmean(ordered),
        median=ordered[len(ordered) // 2],
        min=ordered[0],
        max=ordered[-1],
        p95=ordered[p95_index],
    )


def _time_calls(operation: str, iterations: int, call: Callable[[int], object]) -> TimingStats:
    times: list[float] = []
    for i in range(iterations):
        start = time.perf_counter()
        call(i)
        times.append((time.perf_counter() - start) * 1000.0)
    return compute_stats(operation, times)


def _hierarchy_call(service: ICD10CodeService, i: int) -> None:
    directions = list(HierarchyDirection)
    request = HierarchyRequest(
        code=HIERARCHY_CODES[i % len(HIERARCHY_CODES)],
        direction=directions[i % len(directions)],
        max_depth=2,
    )
    try:
        service.hierarchy(request)
    except HierarchyNotFoundError:
        pass


def run_benchmarks(db: Session, *, iterations: int = 50) -> list[TimingStats]:
    service = ICD10CodeService(
        store=CodeStoreRepository(db),
        expansion_engine=QueryExpansionEngine(build_synonym_dictionary(db)),
    )

    return [
        _time_calls(
            "exact_lookup",
            iterations * 2,
            lambda i: service.lookup(LookupRequest(code=LOOKUP_CODES[i % len(LOOKUP_CODES)])),
        ),
        _time_calls(
            "search",
            iterations,
            lambda i: service.search(SearchRequest(query=SEARCH_QUERIES[i % len(SEARCH_QUERIES)])),
        ),
        _time_calls("hierarchy_traversal", iterations, lambda i: _hierarchy_call(service, i)),
        _time_calls(
            "bulk_validation",
            max(1, iterations // 2),
            lambda i: service.validate_batch(ValidateBatchRequest(codes=VALIDATION_BATCH, check_billable=True)),
        ),
    ]


def benchmark(iterations: int = 50) -> bool:
    _configure_logging()

    db: Session = SessionLocal()
    try:
        stats = CodeStoreRepository(db).stats()
        logger.info("Database contains %s codes (%s billable)", stats.total_codes, stats.billable_codes)

        results = run_benchmarks(db, iterations=iterations)
    finally:
        db.close()

    all_passed = True
    for r in results:
        all_passed = all_passed and r.passed
        logger.info(
            "%s iterations=%s mean=%.2fms median=%.2fms min=%.2fms max=%.2fms p95=%.2fms target=%.0fms %s",
            r.operation,
            r.iterations,
            r.mean,
            r.median,
            r.min,
            r.max,
            r.p95,
            TARGETS[r.operation],
            "PASS" if r.passed else "FAIL",
        )
    return all_passed


def main() -> None:
    parser = argparse.ArgumentParser(description="Time lookup, search, hierarchy and validation")
    parser.add_argument("--iterations", type=int, default=50)
    args = parser.parse_args()

    if not benchmark(iterations=args.iterations):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
