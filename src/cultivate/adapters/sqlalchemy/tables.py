"""SQLAlchemy Core tables for artifacts, suggestion records and contacts."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    text,
)

from cultivate.domain.model import (
    ArtifactType,
    ParsingStatus,
    SuggestionPriority,
    SuggestionStatus,
    TranscriptionStatus,
)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


def enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    """Stores enum values (``pending``), not member names, so raw SQL can filter on them."""

    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=_enum_values,
        length=32,
        validate_strings=True,
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

OPEN_SUGGESTION_PREDICATE = "status = 'pending'"

contact_table = Table(
    "contact",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("user_id", UUIDColumnType, nullable=False, index=True),
    Column("fields", JSON, nullable=False),
    Column("field_sources", JSON, nullable=False),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

artifact_table = Table(
    "artifact",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("contact_id", UUIDColumnType, ForeignKey("contact.id"), nullable=False, index=True),
    Column("user_id", UUIDColumnType, nullable=False),
    Column("type", enum_column_type(ArtifactType), nullable=False),
    Column("content", Text, nullable=True),
    Column("metadata", JSON, nullable=False),
    Column("transcription", Text, nullable=True),
    Column("transcription_status", enum_column_type(TranscriptionStatus), nullable=False),
    Column("transcription_error", Text, nullable=True),
    Column("ai_parsing_status", enum_column_type(ParsingStatus), nullable=False),
    Column("parsing_error", Text, nullable=True),
    Column("ai_processing_started_at", UTCDateTime, nullable=True),
    Column("ai_processing_completed_at", UTCDateTime, nullable=True),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
)

update_suggestion_table = Table(
    "update_suggestion",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("artifact_id", UUIDColumnType, ForeignKey("artifact.id"), nullable=False),
    Column("contact_id", UUIDColumnType, ForeignKey("contact.id"), nullable=False, index=True),
    Column("user_id", UUIDColumnType, nullable=False),
    Column("entries", JSON, nullable=False),
    Column("priority", enum_column_type(SuggestionPriority), nullable=False),
    Column("status", enum_column_type(SuggestionStatus), nullable=False),
    Column("user_selections", JSON, nullable=False),
    Column("viewed_at", UTCDateTime, nullable=True),
    Column("reviewed_at", UTCDateTime, nullable=True),
    Column("dismissed_at", UTCDateTime, nullable=True),
    Column("applied_at", UTCDateTime, nullable=True),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", UTCDateTime, nullable=False),
    Index("ix_update_suggestion_artifact_id", "artifact_id"),
    Index(
        "uq_update_suggestion_open_artifact",
        "artifact_id",
        unique=True,
        sqlite_where=text(OPEN_SUGGESTION_PREDICATE),
        postgresql_where=text(OPEN_SUGGESTION_PREDICATE),
    ),
)
