"""Create personal_info and dependents.

Revision ID: 0001
Revises:
Create Date: 2025-01-01
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create the profile tables."""
    op.create_table(
        "personal_info",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("tin", sa.String(length=50), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("birth_place", sa.String(length=255), nullable=True),
        sa.Column("citizenship", sa.String(length=100), nullable=True),
        sa.Column("civil_status", sa.String(length=50), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("spouse_name", sa.String(length=255), nullable=True),
        sa.Column("spouse_tin", sa.String(length=50), nullable=True),
        sa.Column(
            "employment_status",
            sa.String(length=20),
            server_default="employed",
            nullable=True,
        ),
        sa.Column("philhealth_number", sa.String(length=20), nullable=True),
        sa.Column("sss_number", sa.String(length=20), nullable=True),
        sa.Column("pagibig_number", sa.String(length=20), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_personal_info")),
    )
    op.create_index(
        op.f("ix_personal_info_user_id"), "personal_info", ["user_id"], unique=True
    )

    op.create_table(
        "dependents",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("dep_name", sa.String(length=255), nullable=False),
        sa.Column("dep_birth_date", sa.Date(), nullable=True),
        sa.Column("dep_relationship", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_dependents")),
    )
    op.create_index(
        op.f("ix_dependents_user_id"), "dependents", ["user_id"], unique=False
    )


def downgrade() -> None:
    """Drop the profile tables."""
    op.drop_index(op.f("ix_dependents_user_id"), table_name="dependents")
    op.drop_table("dependents")
    op.drop_index(op.f("ix_personal_info_user_id"), table_name="personal_info")
    op.drop_table("personal_info")
