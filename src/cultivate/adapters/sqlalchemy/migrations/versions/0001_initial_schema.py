"""initial pipeline schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from cultivate.adapters.sqlalchemy.tables import OPEN_SUGGESTION_PREDICATE, UTCDateTime

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _status(*values: str, name: str) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=32)


def upgrade() -> None:
    op.create_table(
        "contact",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("field_sources", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_contact")),
    )
    op.create_index(op.f("ix_contact_user_id"), "contact", ["user_id"])

    op.create_table(
        "artifact",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("contact_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column(
            "type",
            _status(
                "voice_memo",
                "email",
                "meeting",
                "note",
                "calendar_event",
                "linkedin_profile",
                "linkedin_post",
                name="artifacttype",
            ),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("transcription", sa.Text(), nullable=True),
        sa.Column(
            "transcription_status",
            _status(
                "none", "pending", "processing", "completed", "failed",
                name="transcriptionstatus",
            ),
            nullable=False,
        ),
        sa.Column("transcription_error", sa.Text(), nullable=True),
        sa.Column(
            "ai_parsing_status",
            _status(
                "none", "pending", "processing", "completed", "failed", name="parsingstatus"
            ),
            nullable=False,
        ),
        sa.Column("parsing_error", sa.Text(), nullable=True),
        sa.Column("ai_processing_started_at", UTCDateTime(), nullable=True),
        sa.Column("ai_processing_completed_at", UTCDateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["contact_id"], ["contact.id"], name=op.f("fk_artifact_contact_id_contact")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_artifact")),
    )
    op.create_index(op.f("ix_artifact_contact_id"), "artifact", ["contact_id"])

    op.create_table(
        "update_suggestion",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("artifact_id", sa.Uuid(), nullable=False),
        sa.Column("contact_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("entries", sa.JSON(), nullable=False),
        sa.Column(
            "priority", _status("high", "medium", "low", name="suggestionpriority"), nullable=False
        ),
        sa.Column(
            "status",
            _status(
                "pending", "approved", "rejected", "partial", "skipped", name="suggestionstatus"
            ),
            nullable=False,
        ),
        sa.Column("user_selections", sa.JSON(), nullable=False),
        sa.Column("viewed_at", UTCDateTime(), nullable=True),
        sa.Column("reviewed_at", UTCDateTime(), nullable=True),
        sa.Column("dismissed_at", UTCDateTime(), nullable=True),
        sa.Column("applied_at", UTCDateTime(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["artifact_id"], ["artifact.id"], name=op.f("fk_update_suggestion_artifact_id_artifact")
        ),
        sa.ForeignKeyConstraint(
            ["contact_id"], ["contact.id"], name=op.f("fk_update_suggestion_contact_id_contact")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_update_suggestion")),
    )
    op.create_index(
        op.f("ix_update_suggestion_contact_id"), "update_suggestion", ["contact_id"]
    )
    op.create_index("ix_update_suggestion_artifact_id", "update_suggestion", ["artifact_id"])
    op.create_index(
        "uq_update_suggestion_open_artifact",
        "update_suggestion",
        ["artifact_id"],
        unique=True,
        sqlite_where=sa.text(OPEN_SUGGESTION_PREDICATE),
        postgresql_where=sa.text(OPEN_SUGGESTION_PREDICATE),
    )


def downgrade() -> None:
    op.drop_index("uq_update_suggestion_open_artifact", table_name="update_suggestion")
    op.drop_index("ix_update_suggestion_artifact_id", table_name="update_suggestion")
    op.drop_index(op.f("ix_update_suggestion_contact_id"), table_name="update_suggestion")
    op.drop_table("update_suggestion")
    op.drop_index(op.f("ix_artifact_contact_id"), table_name="artifact")
    op.drop_table("artifact")
    op.drop_index(op.f("ix_contact_user_id"), table_name="contact")
    op.drop_table("contact")
