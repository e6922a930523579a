"""matches

Revision ID: 0002
Revises: 0001
Create Date: 2024-06-15

Adds the matches table holding played results for the leaderboard.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "matches",
        sa.Column("match_id", sa.String(36), primary_key=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("score_team1", sa.Integer, nullable=False),
        sa.Column("score_team2", sa.Integer, nullable=False),
        sa.Column("team1_names", sa.JSON, nullable=False),
        sa.Column("team2_names", sa.JSON, nullable=False),
        sa.Column("recorded_by", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_matches_date", "matches", ["date"])


def downgrade() -> None:
    op.drop_index("ix_matches_date", table_name="matches")
    op.drop_table("matches")
