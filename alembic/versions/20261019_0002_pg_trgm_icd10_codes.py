"""Enable pg_trgm and add trigram index for ICD-10 description search.

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op


revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != "postgresql":
        return

    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_icd10_codes_description_trgm "
        "ON icd10_codes USING gin (lower(description) gin_trgm_ops)"
    )


def downgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != "postgresql":
        return

    op.execute("DROP INDEX IF EXISTS ix_icd10_codes_description_trgm")
