from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from icd10_core.db.base import Base
from icd10_core.db.models import ICD10Code, MedicalSynonym, SearchPattern
from icd10_core.db.session import SessionLocal, engine
from icd10_core.scripts.load_icd10 import load_icd10
from icd10_core.services.icd10_state import build_synonym_dictionary, check_icd10_loaded

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    ICD10Code.__tablename__,
    MedicalSynonym.__tablename__,
    SearchPattern.__tablename__,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _missing_tables() -> list[str]:
    inspector = inspect(engine)
    return [name for name in REQUIRED_TABLES if not inspector.has_table(name)]


def ensure_schema() -> None:
    missing = _missing_tables()
    if not missing:
        logger.info("ICD10 schema already up to date")
        return

    logger.info("Creating missing tables: %s", ", ".join(missing))
    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
    Base.metadata.create_all(bind=engine)


def bootstrap() -> None:
    _configure_logging()

    ensure_schema()

    # Idempotent: load_icd10 skips when the catalog already has rows.
    load_icd10()

    db: Session = SessionLocal()
    try:
        if not check_icd10_loaded(db):
            logger.warning("ICD10 not loaded after bootstrap load")

        dictionary = build_synonym_dictionary(db)
        logger.info(
            "Bootstrap complete synonyms=%s patterns=%s",
            dictionary.synonym_count,
            dictionary.pattern_count,
        )
    finally:
        db.close()


def main() -> None:
    try:
        bootstrap()
    except (SQLAlchemyError, OSError):
        # Never crash startup process due to bootstrap tasks.
        logger.exception("Startup bootstrap terminated with unexpected error")


if __name__ == "__main__":
    main()
