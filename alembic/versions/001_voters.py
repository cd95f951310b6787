"""Create voters table.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "voters",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("original_id", sa.Integer, nullable=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("father_name", sa.String(200), nullable=True),
        sa.Column("mother_name", sa.String(200), nullable=True),
        sa.Column("family_name", sa.String(200), nullable=True),
        sa.Column("register_number", sa.String(50), nullable=True),
        sa.Column("register_number_clean", sa.String(50), nullable=True),
        sa.Column("religion", sa.String(100), nullable=True),
        sa.Column("family", sa.String(200), nullable=True),
        sa.Column("classification", sa.String(100), nullable=True),
        sa.Column("has_voted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("voted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_voters_original_id", "voters", ["original_id"])
    op.create_index("ix_voters_register_number", "voters", ["register_number"])
    op.create_index("ix_voters_religion", "voters", ["religion"])
    op.create_index("ix_voters_name_pair", "voters", ["full_name", "father_name"])
    op.create_index("ix_voters_has_voted", "voters", ["has_voted"])


def downgrade() -> None:
    op.drop_index("ix_voters_has_voted", table_name="voters")
    op.drop_index("ix_voters_name_pair", table_name="voters")
    op.drop_index("ix_voters_religion", table_name="voters")
    op.drop_index("ix_voters_register_number", table_name="voters")
    op.drop_index("ix_voters_original_id", table_name="voters")
    op.drop_table("voters")
