"""At most one active total_words goal per project.

Revision ID: 003
Revises: 002
Create Date: 2025-11-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # keep only the newest active goal per project before adding the index
    op.execute(sa.text(
        "UPDATE goals SET is_active = false "
        "WHERE goal_type = 'total_words' AND is_active = true AND id NOT IN ("
        "  SELECT MAX(id) FROM goals WHERE goal_type = 'total_words' AND is_active = true GROUP BY project_id"
        ")"
    ))
    op.create_index(
        "uq_goals_active_total_words",
        "goals",
        ["project_id"],
        unique=True,
        sqlite_where=sa.text("is_active = 1 AND goal_type = 'total_words'"),
        postgresql_where=sa.text("is_active AND goal_type = 'total_words'"),
    )


def downgrade() -> None:
    op.drop_index("uq_goals_active_total_words", table_name="goals")
