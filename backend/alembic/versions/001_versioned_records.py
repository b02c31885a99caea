"""Versioned records — the seven managed tables, each with version and updated_at.

Revision ID: 001_versioned_records
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001_versioned_records"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _versioned_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        *_versioned_columns(),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="teacher"),
        sa.Column("department", sa.String(100), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("reset_password_token", sa.String(255), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verification_code", sa.String(20), nullable=True),
    )

    op.create_table(
        "classrooms",
        *_versioned_columns(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("equipment", JSONB, nullable=False, server_default="[]"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default="true"),
    )

    op.create_table(
        "schedules",
        *_versioned_columns(),
        sa.Column("teacher_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("classroom_id", sa.Uuid, sa.ForeignKey("classrooms.id"), nullable=True),
        sa.Column("subject", sa.String(200), nullable=False),
        sa.Column("course_code", sa.String(50), nullable=True),
        sa.Column("day_of_week", sa.String(10), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("semester", sa.String(20), nullable=True),
        sa.Column("academic_year", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )

    op.create_table(
        "instructors",
        *_versioned_columns(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("unavailable", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("unavailable_reason", sa.String(500), nullable=True),
    )

    op.create_table(
        "attendance_events",
        *_versioned_columns(),
        sa.Column("student_id", sa.Uuid, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("classroom_id", sa.Uuid, sa.ForeignKey("classrooms.id"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("remarks", sa.Text, nullable=True),
        sa.Column("verified_by", sa.Uuid, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "usage_records",
        *_versioned_columns(),
        sa.Column("classroom_id", sa.Uuid, sa.ForeignKey("classrooms.id"), nullable=True),
        sa.Column("time_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("time_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("utilization_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
    )

    op.create_table(
        "reports",
        *_versioned_columns(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("report_type", sa.String(50), nullable=False, server_default="usage"),
        sa.Column("generated_by", sa.Uuid, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
        sa.Column("shared_with", JSONB, nullable=False, server_default="[]"),
    )


def downgrade() -> None:
    for table in (
        "reports", "usage_records", "attendance_events", "instructors",
        "schedules", "classrooms", "users",
    ):
        op.drop_table(table)
