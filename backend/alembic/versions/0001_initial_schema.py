"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2024-06-01

Creates all tables for the pickup planner:
users, provider_accounts, calls, call_responses, availabilities,
slot_statuses.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("custom_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("is_banned", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- provider_accounts ---
    op.create_table(
        "provider_accounts",
        sa.Column("account_id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("provider_account_id", sa.String(100), nullable=False),
        sa.UniqueConstraint("provider", "provider_account_id", name="uq_provider_account"),
    )

    # --- calls ---
    op.create_table(
        "calls",
        sa.Column("call_id", sa.String(36), primary_key=True),
        sa.Column("creator_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("start_hour", sa.Integer, nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False, server_default="60"),
        sa.Column("price", sa.String(50), nullable=True),
        sa.Column("comment", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_calls_date", "calls", ["date"])

    # --- call_responses ---
    op.create_table(
        "call_responses",
        sa.Column("call_id", sa.String(36), sa.ForeignKey("calls.call_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("status", sa.Enum("accepted", "declined", name="responsestatus"), nullable=False),
        sa.Column("responded_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- availabilities ---
    op.create_table(
        "availabilities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("hour", sa.Integer, nullable=False),
        sa.Column(
            "source_call_id",
            sa.String(36),
            sa.ForeignKey("calls.call_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "date", "hour", name="uq_availability_user_date_hour"),
    )
    op.create_index("ix_availabilities_user_id", "availabilities", ["user_id"])
    op.create_index("ix_availabilities_date", "availabilities", ["date"])

    # --- slot_statuses ---
    op.create_table(
        "slot_statuses",
        sa.Column("date", sa.Date, primary_key=True),
        sa.Column("start_hour", sa.Integer, primary_key=True),
        sa.Column("notified", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("slot_statuses")
    op.drop_index("ix_availabilities_date", table_name="availabilities")
    op.drop_index("ix_availabilities_user_id", table_name="availabilities")
    op.drop_table("availabilities")
    op.drop_table("call_responses")
    op.drop_index("ix_calls_date", table_name="calls")
    op.drop_table("calls")
    op.drop_table("provider_accounts")
    op.drop_table("users")
