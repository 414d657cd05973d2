"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from cultivate.domain.model import (
    Artifact,
    ArtifactStage,
    ArtifactType,
    Contact,
    ParsingStatus,
    ReviewDecision,
    SuggestionAction,
    SuggestionEntry,
    SuggestionPriority,
    SuggestionStatus,
    TranscriptionStatus,
    UpdateSuggestionRecord,
)
from cultivate.domain.suggestions import ReviewOutcome


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ArtifactCreate(ApiModel):
    contact_id: UUID
    type: ArtifactType
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class TranscriptionCompleted(ApiModel):
    transcript_text: str


class TranscriptionFailed(ApiModel):
    error: str = Field(min_length=1)


class ReviewRequest(ApiModel):
    decision: ReviewDecision
    selections: dict[str, StrictBool] = Field(default_factory=dict)


class ArtifactResponse(ApiModel):
    id: UUID
    contact_id: UUID
    user_id: UUID
    type: ArtifactType
    status: ArtifactStage
    content: str | None
    metadata: dict[str, Any]
    transcription: str | None
    transcription_status: TranscriptionStatus
    transcription_error: str | None
    ai_parsing_status: ParsingStatus
    parsing_error: str | None
    ai_processing_started_at: datetime | None
    ai_processing_completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, artifact: Artifact) -> ArtifactResponse:
        return cls(
            id=artifact.id,
            contact_id=artifact.contact_id,
            user_id=artifact.user_id,
            type=artifact.type,
            status=artifact.stage,
            content=artifact.content,
            metadata=artifact.metadata,
            transcription=artifact.transcription,
            transcription_status=artifact.transcription_status,
            transcription_error=artifact.transcription_error,
            ai_parsing_status=artifact.ai_parsing_status,
            parsing_error=artifact.parsing_error,
            ai_processing_started_at=artifact.ai_processing_started_at,
            ai_processing_completed_at=artifact.ai_processing_completed_at,
            created_at=artifact.created_at,
            updated_at=artifact.updated_at,
        )


class ReprocessResponse(ApiModel):
    artifact_id: UUID
    ai_parsing_status: ParsingStatus


class SuggestionEntryResponse(ApiModel):
    field_path: str
    action: SuggestionAction
    current_value: Any = None
    suggested_value: Any = None
    confidence: float
    reasoning: str

    @classmethod
    def from_domain(cls, entry: SuggestionEntry) -> SuggestionEntryResponse:
        return cls(
            field_path=entry.field_path,
            action=entry.action,
            current_value=entry.current_value,
            suggested_value=entry.suggested_value,
            confidence=entry.confidence,
            reasoning=entry.reasoning,
        )


class SuggestionResponse(ApiModel):
    id: UUID
    artifact_id: UUID
    contact_id: UUID
    user_id: UUID
    entries: list[SuggestionEntryResponse]
    field_paths: list[str]
    confidence_scores: dict[str, float]
    status: SuggestionStatus
    priority: SuggestionPriority
    user_selections: dict[str, bool]
    created_at: datetime
    viewed_at: datetime | None
    reviewed_at: datetime | None
    dismissed_at: datetime | None
    applied_at: datetime | None

    @classmethod
    def from_domain(cls, record: UpdateSuggestionRecord) -> SuggestionResponse:
        return cls(
            id=record.id,
            artifact_id=record.artifact_id,
            contact_id=record.contact_id,
            user_id=record.user_id,
            entries=[SuggestionEntryResponse.from_domain(entry) for entry in record.entries],
            field_paths=list(record.field_paths),
            confidence_scores=record.confidence_scores,
            status=record.status,
            priority=record.priority,
            user_selections=record.user_selections,
            created_at=record.created_at,
            viewed_at=record.viewed_at,
            reviewed_at=record.reviewed_at,
            dismissed_at=record.dismissed_at,
            applied_at=record.applied_at,
        )


class ConflictDetail(ApiModel):
    field_path: str
    reason: str


class ReviewResponse(ApiModel):
    suggestion_id: UUID
    status: SuggestionStatus
    applied: list[str]
    conflicts: list[str]
    conflict_details: list[ConflictDetail]

    @classmethod
    def from_domain(cls, outcome: ReviewOutcome) -> ReviewResponse:
        return cls(
            suggestion_id=outcome.suggestion_id,
            status=outcome.status,
            applied=list(outcome.applied),
            conflicts=[item.field_path for item in outcome.conflicts],
            conflict_details=[
                ConflictDetail(field_path=item.field_path, reason=item.reason)
                for item in outcome.conflicts
            ],
        )


class ContactResponse(ApiModel):
    id: UUID
    user_id: UUID
    fields: dict[str, Any]
    field_sources: dict[str, str]
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, contact: Contact) -> ContactResponse:
        return cls(
            id=contact.id,
            user_id=contact.user_id,
            fields=contact.fields,
            field_sources=contact.field_sources,
            version=contact.version,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )


class HealthResponse(ApiModel):
    status: str
    version: str


class ErrorResponse(ApiModel):
    error: str
    detail: str
