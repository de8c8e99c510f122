"""Create signup (user) table

Revision ID: 001
Revises:
Create Date: 2026-10-17

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
        "signup",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=256), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("reset_token", sa.String(length=256), nullable=True),
        sa.Column("reset_expires_at", sa.DateTime(), nullable=True),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_signup_email"), "signup", ["email"], unique=True)
    op.create_index(op.f("ix_signup_username"), "signup", ["username"], unique=True)
    op.create_index(op.f("ix_signup_reset_token"), "signup", ["reset_token"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_signup_reset_token"), table_name="signup")
    op.drop_index(op.f("ix_signup_username"), table_name="signup")
    op.drop_index(op.f("ix_signup_email"), table_name="signup")
    op.drop_table("signup")
