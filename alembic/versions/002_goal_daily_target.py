"""Persist goals.daily_target; backfill from target_words / 50.

Revision ID: 002
Revises: 001
Create Date: 2025-11-10

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("goals") as batch_op:
        batch_op.add_column(sa.Column("daily_target", sa.Integer(), nullable=True))

    # scalar MAX in SQLite, GREATEST elsewhere
    greatest = "MAX" if op.get_bind().dialect.name == "sqlite" else "GREATEST"
    op.execute(sa.text(
        f"UPDATE goals SET daily_target = {greatest}(target_words / 50, 1) WHERE daily_target IS NULL"
    ))

    with op.batch_alter_table("goals") as batch_op:
        batch_op.alter_column("daily_target", existing_type=sa.Integer(), nullable=False)


def downgrade() -> None:
    with op.batch_alter_table("goals") as batch_op:
        batch_op.drop_column("daily_target")
