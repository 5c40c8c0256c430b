"""create observation tracker tables

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2025-08-25 09:12:40.118302
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "4f1c2a9e7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("department", sa.String(200), nullable=False),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('admin','coordinator','observer','teacher')", name="ck_users_role"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "frameworks",
        sa.Column("id", sa.String(120), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("version", sa.String(40), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("last_modified", sa.String(10), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("sections", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active','inactive','draft')", name="ck_frameworks_status"),
    )
    op.create_index("ix_frameworks_name", "frameworks", ["name"])

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("department", sa.String(200), nullable=False),
        sa.Column("grade", sa.String(50), nullable=True),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("current_class", sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_teachers_name", "teachers", ["name"])
    op.create_index("ix_teachers_email", "teachers", ["email"])

    op.create_table(
        "observations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("teacher_id", sa.String(120), nullable=False),
        sa.Column("teacher_name", sa.String(200), nullable=False),
        sa.Column("observer_id", sa.String(120), nullable=False),
        sa.Column("observer_name", sa.String(200), nullable=False),
        sa.Column("framework_id", sa.String(120), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(20), nullable=False),
        sa.Column("end_time", sa.String(20), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("responses", sa.JSON(), nullable=False),
        sa.Column("comments", sa.JSON(), nullable=False),
        sa.Column("overall_comment", sa.Text(), nullable=False),
        sa.Column("class_info", sa.JSON(), nullable=False),
        sa.Column("crp_evidence_count", sa.Integer(), nullable=True),
        sa.Column("total_look_fors", sa.Integer(), nullable=True),
        sa.Column("observation_metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft','in-progress','completed','submitted')",
            name="ck_observations_status",
        ),
    )
    op.create_index("ix_observations_teacher_id", "observations", ["teacher_id"])
    op.create_index("ix_observations_observer_id", "observations", ["observer_id"])
    op.create_index("ix_observations_date", "observations", ["date"])

    op.create_table(
        "scheduled_observations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("teacher_id", sa.String(120), nullable=False),
        sa.Column("observer_id", sa.String(120), nullable=False),
        sa.Column("framework_id", sa.String(120), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.String(20), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reminders_sent", sa.Boolean(), nullable=False),
        sa.Column("observation_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('scheduled','confirmed','cancelled','completed')",
            name="ck_scheduled_observations_status",
        ),
    )
    op.create_index("ix_scheduled_observations_teacher_id", "scheduled_observations", ["teacher_id"])
    op.create_index("ix_scheduled_observations_observer_id", "scheduled_observations", ["observer_id"])
    op.create_index("ix_scheduled_observations_scheduled_date", "scheduled_observations", ["scheduled_date"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("actor_user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(120), nullable=False),
        sa.Column("event_metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("scheduled_observations")
    op.drop_table("observations")
    op.drop_table("teachers")
    op.drop_table("frameworks")
    op.drop_table("users")
