from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from icd10_core.models.medical_synonym import MedicalSynonym
from icd10_core.models.search_pattern import SearchPattern

logger = logging.getLogger(__name__)


class DictionaryRepository:
    """Persistence for synonym entries and search patterns (append-only)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def count_synonyms(self) -> int:
        return int(self.db.execute(select(func.count()).select_from(MedicalSynonym)).scalar_one() or 0)

    def list_synonyms(self) -> list[MedicalSynonym]:
        stmt = select(MedicalSynonym).order_by(MedicalSynonym.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def list_patterns(self) -> list[SearchPattern]:
        stmt = select(SearchPattern).order_by(SearchPattern.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def seed(
        self,
        synonyms: Iterable[tuple[str, str, float, Optional[str]]],
        patterns: Iterable[tuple[str, str, int]],
    ) -> None:
        """Insert the base dictionary in a single transaction."""
        try:
            self.db.add_all(
                MedicalSynonym(term=term, synonym=synonym, weight=weight, context=context)
                for term, synonym, weight, context in synonyms
            )
            self.db.add_all(
                SearchPattern(pattern=pattern, expansion=expansion, priority=priority)
                for pattern, expansion, priority in patterns
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def add_synonym(self, term: str, synonym: str, weight: float, context: Optional[str]) -> bool:
        try:
            self.db.add(MedicalSynonym(term=term, synonym=synonym, weight=weight, context=context))
            self.db.commit()
            return True
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error adding synonym %r -> %r", term, synonym)
            return False

    def add_pattern(self, pattern: str, expansion: str, priority: int) -> bool:
        try:
            self.db.add(SearchPattern(pattern=pattern, expansion=expansion, priority=priority))
            self.db.commit()
            return True
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error adding search pattern %r", pattern)
            return False
