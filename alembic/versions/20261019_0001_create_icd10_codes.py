"""Create ICD-10 catalog and synonym dictionary tables.

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "icd10_codes",
        sa.Column("code", sa.String(length=10), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=3), nullable=False, server_default=""),
        sa.Column("subcategory", sa.String(length=10), nullable=False, server_default=""),
        sa.Column("chapter_code", sa.String(length=10), nullable=False, server_default=""),
        sa.Column("chapter_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_billable", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_valid_primary", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("revision_year", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_icd10_codes_category"), "icd10_codes", ["category"], unique=False)
    op.create_index(op.f("ix_icd10_codes_chapter_code"), "icd10_codes", ["chapter_code"], unique=False)
    op.create_index(op.f("ix_icd10_codes_effective_date"), "icd10_codes", ["effective_date"], unique=False)
    op.create_index(op.f("ix_icd10_codes_revision_year"), "icd10_codes", ["revision_year"], unique=False)
    op.create_index("idx_icd10_codes_billable", "icd10_codes", ["is_billable"], unique=False)

    op.create_table(
        "medical_synonyms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("term", sa.Text(), nullable=False),
        sa.Column("synonym", sa.Text(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False, server_default=sa.text("1.0")),
        sa.Column("context", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_medical_synonyms_term"), "medical_synonyms", ["term"], unique=False)
    op.create_index(op.f("ix_medical_synonyms_synonym"), "medical_synonyms", ["synonym"], unique=False)

    op.create_table(
        "search_patterns",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("pattern", sa.Text(), nullable=False),
        sa.Column("expansion", sa.Text(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("search_patterns")
    op.drop_index(op.f("ix_medical_synonyms_synonym"), table_name="medical_synonyms")
    op.drop_index(op.f("ix_medical_synonyms_term"), table_name="medical_synonyms")
    op.drop_table("medical_synonyms")
    op.drop_index("idx_icd10_codes_billable", table_name="icd10_codes")
    op.drop_index(op.f("ix_icd10_codes_revision_year"), table_name="icd10_codes")
    op.drop_index(op.f("ix_icd10_codes_effective_date"), table_name="icd10_codes")
    op.drop_index(op.f("ix_icd10_codes_chapter_code"), table_name="icd10_codes")
    op.drop_index(op.f("ix_icd10_codes_category"), table_name="icd10_codes")
    op.drop_table("icd10_codes")
