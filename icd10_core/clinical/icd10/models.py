"""ICD-10 SQLAlchemy models for ICD-10 Core.

One row per catalog code.  Parent/child/sibling relationships are never stored
here: they are derived from the code string at query time (see
``icd10_core.services.hierarchy``).
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Index, Integer, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from icd10_core.db.base import Base


class ICD10Code(Base):
    __tablename__ = "icd10_codes"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(3), nullable=False, default="", index=True)
    subcategory: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    chapter_code: Mapped[str] = mapped_column(String(10), nullable=False, default="", index=True)
    chapter_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_billable: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_valid_primary: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    revision_year: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_icd10_codes_billable", "is_billable"),
    )

    def __repr__(self) -> str:
        return f"ICD10Code(code={self.code!r}, billable={self.is_billable!r})"
