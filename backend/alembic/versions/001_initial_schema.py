"""Initial schema: hang_requests, availability_windows, plans, responses, claims.

responses is unique on (plan_id, user_key): RSVPs are upserts. claims is unique on
(plan_id, item): default potluck items are seeded with ON CONFLICT DO NOTHING.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "hang_requests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("slug", sa.String(32), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_hang_requests_slug", "hang_requests", ["slug"], unique=True)

    op.create_table(
        "availability_windows",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("request_id", sa.Integer(), sa.ForeignKey("hang_requests.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_key", sa.String(64), nullable=False),
        sa.Column("user_name", sa.String(128), nullable=True),
        sa.Column("start_ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("start_ts < end_ts", name="ck_availability_windows_chronological"),
    )
    op.create_index("ix_availability_windows_request_id", "availability_windows", ["request_id"])

    op.create_table(
        "plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("slug", sa.String(32), nullable=False),
        sa.Column("request_id", sa.Integer(), sa.ForeignKey("hang_requests.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("start_ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_ts", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("start_ts < end_ts", name="ck_plans_chronological"),
    )
    op.create_index("ix_plans_slug", "plans", ["slug"], unique=True)

    op.create_table(
        "responses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_key", sa.String(64), nullable=False),
        sa.Column("user_name", sa.String(128), nullable=True),
        sa.Column("status", sa.String(8), nullable=False),
        sa.Column("arrival", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("plan_id", "user_key", name="uq_responses_plan_user"),
        sa.CheckConstraint("status IN ('in', 'maybe', 'out')", name="ck_responses_status"),
    )
    op.create_index("ix_responses_plan_id", "responses", ["plan_id"])

    op.create_table(
        "claims",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item", sa.String(128), nullable=False),
        sa.Column("claimed_by", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("plan_id", "item", name="uq_claims_plan_item"),
    )
    op.create_index("ix_claims_plan_id", "claims", ["plan_id"])


def downgrade() -> None:
    op.drop_index("ix_claims_plan_id", table_name="claims")
    op.drop_table("claims")
    op.drop_index("ix_responses_plan_id", table_name="responses")
    op.drop_table("responses")
    op.drop_index("ix_plans_slug", table_name="plans")
    op.drop_table("plans")
    op.drop_index("ix_availability_windows_request_id", table_name="availability_windows")
    op.drop_table("availability_windows")
    op.drop_index("ix_hang_requests_slug", table_name="hang_requests")
    op.drop_table("hang_requests")
