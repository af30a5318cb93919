"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONList = sa.JSON().with_variant(JSONB, "postgresql")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- patients ---
    op.create_table(
        "patients",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True),
        sa.Column("instructor_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("medical_conditions", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- therapy_types ---
    op.create_table(
        "therapy_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("target_condition", sa.String(100), nullable=False),
    )

    # --- postures ---
    op.create_table(
        "postures",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sanskrit_name", sa.String(100), nullable=False),
        sa.Column("spanish_name", sa.String(100), nullable=False, index=True),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("video_url", sa.Text, nullable=True),
        sa.Column("instructions", sa.Text, nullable=False),
        sa.Column("benefits", sa.Text, nullable=False),
        sa.Column("modifications", sa.Text, nullable=True),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("therapy_type_ids", JSONList, nullable=False),
    )

    # --- series ---
    op.create_table(
        "series",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("instructor_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("therapy_type_id", sa.Integer, sa.ForeignKey("therapy_types.id"), nullable=False),
        sa.Column("recommended_sessions", sa.Integer, nullable=False),
        sa.Column("estimated_duration", sa.Integer, nullable=False),
        sa.Column("posture_ids", JSONList, nullable=False),
        sa.Column("posture_durations", JSONList, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- patient_series ---
    op.create_table(
        "patient_series",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("series_id", sa.String(36), sa.ForeignKey("series.id"), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("completed_sessions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- sessions ---
    op.create_table(
        "sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("patient_id", sa.String(36), sa.ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("series_id", sa.String(36), sa.ForeignKey("series.id"), nullable=False, index=True),
        sa.Column("pre_intensity", sa.String(20), nullable=False),
        sa.Column("post_intensity", sa.String(20), nullable=False),
        sa.Column("comments", sa.Text, nullable=False),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("sessions")
    op.drop_table("patient_series")
    op.drop_table("series")
    op.drop_table("postures")
    op.drop_table("therapy_types")
    op.drop_table("patients")
    op.drop_table("users")
