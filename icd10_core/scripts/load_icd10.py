from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from icd10_core.core.config import settings
from icd10_core.db.session import SessionLocal
from icd10_core.repositories.code_store import CodeStoreRepository
from icd10_core.services.icd10_state import check_icd10_loaded

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "t"}
_FALSE_VALUES = {"0", "false", "no", "n", "f"}


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _default_csv_path() -> Path:
    # Resolve relative to the package, not the current working directory.
    return Path(__file__).resolve().parents[1] / "data" / "icd10_sample.csv"


def _parse_bool(value: str | None) -> bool | None:
    text = (value or "").strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _parse_int(value: str | None) -> int | None:
    text = (value or "").strip()
    try:
        return int(text) if text else None
    except ValueError:
        return None


def row_to_code_data(row: dict[str, str]) -> dict[str, Any]:
    """Map one CSV row to Code Store fields; missing flags are inferred later."""
    return {
        "code": (row.get("code") or "").strip(),
        "description": (row.get("description") or "").strip(),
        "is_billable": _parse_bool(row.get("is_billable")),
        "is_valid_primary": _parse_bool(row.get("is_valid_primary")),
        "effective_date": (row.get("effective_date") or "").strip() or None,
        "end_date": (row.get("end_date") or "").strip() or None,
        "revision_year": _parse_int(row.get("revision_year")),
    }


def load_icd10_into_session(db: Session, path: Path, *, force: bool = False) -> int:
    """Load codes from ``path``; returns how many rows were stored."""
    # Idempotent: only load if table is empty.
    if not force and check_icd10_loaded(db):
        logger.info("ICD10 already loaded")
        return 0

    logger.info("Starting ICD10 load from %s", path.as_posix())
    store = CodeStoreRepository(db)

    loaded_total = 0
    skipped_total = 0
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for index, row in enumerate(reader, start=1):
            if store.insert_or_replace(row_to_code_data(row)):
                loaded_total += 1
            else:
                skipped_total += 1

            if index % 1000 == 0:
                logger.info("Processed %s rows (%s codes loaded)", index, loaded_total)

    logger.info("Done. loaded=%s skipped=%s", loaded_total, skipped_total)
    return loaded_total


def load_icd10(csv_path: str | None = None, *, force: bool = False) -> None:
    _configure_logging()

    path = Path(csv_path or settings.icd10_csv_path or _default_csv_path())
    if not path.exists():
        raise FileNotFoundError(f"ICD10 CSV file not found: {path}")

    db: Session = SessionLocal()
    try:
        load_icd10_into_session(db, path, force=force)
        stats = CodeStoreRepository(db).stats()
        logger.info(
            "Database stats total=%s billable=%s chapters=%s latest_revision=%s",
            stats.total_codes,
            stats.billable_codes,
            stats.chapters,
            stats.latest_revision,
        )
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Load ICD-10 codes from a CSV file")
    parser.add_argument("--csv", default=None, help="Path to a code,description[,...] CSV file")
    parser.add_argument("--force", action="store_true", help="Load even if codes already exist")
    args = parser.parse_args()

    load_icd10(csv_path=args.csv, force=args.force)


if __name__ == "__main__":
    main()
