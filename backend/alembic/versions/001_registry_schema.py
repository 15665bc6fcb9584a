"""Initial schema — registry_settings, transcript_records, operation_log.

Revision ID: 001_registry_schema
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_registry_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "registry_settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("config", sa.JSON, nullable=False),
        sa.Column("access", sa.JSON, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "transcript_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("student", sa.Text, nullable=False),
        sa.Column("record", sa.JSON, nullable=False),
        sa.Column("latest_update", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_transcript_records_student", "transcript_records", ["student"],
    )

    op.create_table(
        "operation_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("operation", sa.String(50), nullable=False),
        sa.Column("caller", sa.Text, nullable=True),
        sa.Column("input_data", sa.JSON, nullable=True),
        sa.Column("result", sa.JSON, nullable=True),
        sa.Column("error_code", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_operation_log_operation_created_at",
        "operation_log", ["operation", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_operation_log_operation_created_at", table_name="operation_log")
    op.drop_table("operation_log")
    op.drop_index("ix_transcript_records_student", table_name="transcript_records")
    op.drop_table("transcript_records")
    op.drop_table("registry_settings")
