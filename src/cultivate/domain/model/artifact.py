"""Artifact records captured per contact."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .base import Entity, utcnow
from .enums import ArtifactStage, ArtifactType, ParsingStatus, TranscriptionStatus

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Artifact(Entity):
    """A captured unit of relationship-relevant content tied to a contact.

    Status columns are only ever changed by the processing orchestrator and the
    suggestion generator, through conditional writes.
    """

    contact_id: UUID
    user_id: UUID
    type: ArtifactType
    content: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict[str, Any])
    transcription: str | None = None
    transcription_status: TranscriptionStatus = TranscriptionStatus.NONE
    transcription_error: str | None = None
    ai_parsing_status: ParsingStatus = ParsingStatus.NONE
    parsing_error: str | None = None
    ai_processing_started_at: datetime | None = None
    ai_processing_completed_at: datetime | None = None
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def stage(self) -> ArtifactStage:
        parsing = self.ai_parsing_status
        if parsing is ParsingStatus.FAILED:
            return ArtifactStage.FAILED
        if parsing is ParsingStatus.COMPLETED:
            return ArtifactStage.PARSED
        if parsing.in_flight:
            return ArtifactStage.PARSING

        transcription = self.transcription_status
        if transcription is TranscriptionStatus.FAILED:
            return ArtifactStage.FAILED
        if transcription is TranscriptionStatus.COMPLETED:
            return ArtifactStage.TRANSCRIBED
        if transcription is TranscriptionStatus.PROCESSING:
            return ArtifactStage.TRANSCRIBING
        return ArtifactStage.RECEIVED

    @property
    def analysis_text(self) -> str:
        """Text handed to the intelligence capability: transcript first, then content."""

        return self.transcription or self.content or ""
