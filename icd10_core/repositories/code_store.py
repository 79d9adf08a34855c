"""Code Store: SQLAlchemy access to the ``icd10_codes`` catalog.

The store answers existence and content questions (exact, prefix and bulk
lookups), runs ranked search over a search expression built by the query
expansion engine, and writes codes for the loaders.  It never derives
hierarchy relationships itself.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import and_, case, func, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from icd10_core.clinical.icd10.structure import (
    category_for,
    chapter_for,
    infer_billable,
    normalize_code,
    subcategory_for,
)
from icd10_core.core.search_config import expansion_config, search_tuning
from icd10_core.models.icd10 import ICD10Code

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[\w.]+")


@dataclass
class CodeStoreStats:
    total_codes: int
    billable_codes: int
    chapters: int
    latest_revision: int | None


def _as_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def in_effect_clause(effective_date: date):
    return and_(
        or_(ICD10Code.effective_date.is_(None), ICD10Code.effective_date <= effective_date),
        or_(ICD10Code.end_date.is_(None), ICD10Code.end_date > effective_date),
    )


def split_search_expression(expression: str) -> list[str]:
    """Break an expansion result back into its OR-ed alternatives."""
    operator = expansion_config.or_operator.strip()
    alternatives: list[str] = []
    current: list[str] = []
    for word in (expression or "").split():
        if word == operator:
            if current:
                alternatives.append(" ".join(current))
            current = []
            continue
        current.append(word)
    if current:
        alternatives.append(" ".join(current))

    unique: list[str] = []
    for alternative in alternatives:
        lowered = alternative.lower()
        if lowered and lowered not in unique:
            unique.append(lowered)
    return unique


class CodeStoreRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    @property
    def is_postgres(self) -> bool:
        dialect = getattr(getattr(self.db, "bind", None), "dialect", None)
        return getattr(dialect, "name", "") == "postgresql"

    def get_by_exact_id(self, code: str, effective_date: Optional[date] = None) -> ICD10Code | None:
        c = normalize_code(code)
        if not c:
            return None

        stmt = select(ICD10Code).where(ICD10Code.code == c)
        if effective_date is not None:
            stmt = stmt.where(in_effect_clause(effective_date))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_id_prefix(self, prefix: str) -> list[ICD10Code]:
        p = normalize_code(prefix)
        if not p:
            return []

        stmt = (
            select(ICD10Code)
            .where(ICD10Code.code.startswith(p, autoescape=True))
            .order_by(ICD10Code.code.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_many_by_exact_id(
        self,
        codes: Sequence[str],
        effective_date: Optional[date] = None,
    ) -> list[ICD10Code]:
        normalized = sorted({normalize_code(c) for c in codes if normalize_code(c)})
        if not normalized:
            return []

        stmt = select(ICD10Code).where(ICD10Code.code.in_(normalized))
        if effective_date is not None:
            stmt = stmt.where(in_effect_clause(effective_date))
        return list(self.db.execute(stmt).scalars().all())

    def search_ranked(
        self,
        expression: str,
        limit: int,
        *,
        category_filter: Optional[Sequence[str]] = None,
        billable_only: bool = False,
        effective_date: Optional[date] = None,
    ) -> list[ICD10Code]:
        alternatives = split_search_expression(expression)[: search_tuning.max_alternatives]
        if not alternatives:
            return []

        code_l = func.lower(ICD10Code.code)
        desc_l = func.lower(ICD10Code.description)
        category_l = func.lower(func.coalesce(ICD10Code.category, ""))
        chapter_l = func.lower(func.coalesce(ICD10Code.chapter_name, ""))

        def word_match(word: str):
            return or_(
                code_l.contains(word, autoescape=True),
                desc_l.contains(word, autoescape=True),
                category_l.contains(word, autoescape=True),
                chapter_l.contains(word, autoescape=True),
            )

        # Full-text semantics: an alternative matches when all of its words do.
        alternative_matches = [
            and_(*([word_match(word) for word in _WORD_RE.findall(term)] or [literal(False)]))
            for term in alternatives
        ]
        matched_count = sum(
            (case((match, literal(1)), else_=literal(0)) for match in alternative_matches),
            literal(0),
        )
        exact_code_match = or_(*[code_l == term for term in alternatives])
        description_prefix = or_(*[desc_l.startswith(term, autoescape=True) for term in alternatives])

        if self.is_postgres:
            sim_components = [func.similarity(desc_l, term) for term in alternatives if len(term) >= 3]
            similarity_score = func.greatest(*sim_components) if len(sim_components) > 1 else (
                sim_components[0] if sim_components else literal(0.0)
            )
            similarity_filter = similarity_score > search_tuning.similarity_threshold
        else:
            similarity_score = literal(0.0)
            similarity_filter = literal(False)

        stmt = select(ICD10Code).where(or_(*alternative_matches, similarity_filter))

        if category_filter:
            categories = [normalize_code(c) for c in category_filter if normalize_code(c)]
            if categories:
                stmt = stmt.where(ICD10Code.category.in_(categories))
        if billable_only:
            stmt = stmt.where(ICD10Code.is_billable.is_(True))
        if effective_date is not None:
            stmt = stmt.where(in_effect_clause(effective_date))

        stmt = stmt.order_by(
            case((exact_code_match, literal(0)), else_=literal(1)).asc(),
            matched_count.desc(),
            case((description_prefix, literal(0)), else_=literal(1)).asc(),
            similarity_score.desc(),
            ICD10Code.code.asc(),
        ).limit(limit)

        return list(self.db.execute(stmt).scalars().all())

    def insert_or_replace(self, code_data: Mapping[str, Any]) -> bool:
        """Upsert one code, deriving the structural fields the source omits.

        Returns False (and rolls back) instead of raising so batch loaders can
        keep going after a bad row.
        """
        code = normalize_code(str(code_data.get("code") or ""))
        description = str(code_data.get("description") or "").strip()
        if not code or not description:
            logger.warning("Skipping ICD10 code with empty code/description: %r", code_data.get("code"))
            return False

        chapter = chapter_for(code)
        billable = code_data.get("is_billable")
        valid_primary = code_data.get("is_valid_primary")
        values = {
            "code": code,
            "description": description,
            "category": code_data.get("category") or category_for(code),
            "subcategory": code_data.get("subcategory") or subcategory_for(code),
            "chapter_code": code_data.get("chapter_code") or chapter.code,
            "chapter_name": code_data.get("chapter_name") or chapter.name,
            "is_billable": infer_billable(code) if billable is None else bool(billable),
            "is_valid_primary": True if valid_primary is None else bool(valid_primary),
            "revision_year": code_data.get("revision_year"),
        }
        try:
            values["effective_date"] = _as_date(code_data.get("effective_date"))
            values["end_date"] = _as_date(code_data.get("end_date"))
        except ValueError:
            logger.warning("Skipping ICD10 code %s with invalid date window", code)
            return False

        try:
            existing = self.db.get(ICD10Code, code)
            if existing is None:
                self.db.add(ICD10Code(**values))
            else:
                for key, value in values.items():
                    setattr(existing, key, value)
            self.db.commit()
            return True
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error inserting ICD10 code %s", code)
            return False

    def stats(self) -> CodeStoreStats:
        row = self.db.execute(
            select(
                func.count().label("total"),
                func.coalesce(func.sum(case((ICD10Code.is_billable.is_(True), 1), else_=0)), 0).label("billable"),
                func.count(func.distinct(ICD10Code.chapter_code)).label("chapters"),
                func.max(ICD10Code.revision_year).label("latest_revision"),
            ).select_from(ICD10Code)
        ).one()

        return CodeStoreStats(
            total_codes=int(row.total or 0),
            billable_codes=int(row.billable or 0),
            chapters=int(row.chapters or 0),
            latest_revision=int(row.latest_revision) if row.latest_revision is not None else None,
        )
