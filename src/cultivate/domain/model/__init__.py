"""Domain model for artifacts, suggestion records and contacts."""

from __future__ import annotations

from .artifact import Artifact
from .base import Entity, new_id, utcnow
from .contact import Contact
from .enums import (
    ArtifactStage,
    ArtifactType,
    ParsingStatus,
    ReviewDecision,
    SuggestionAction,
    SuggestionPriority,
    SuggestionStatus,
    TranscriptionStatus,
)
from .suggestion import (
    SuggestionEntry,
    UpdateSuggestionRecord,
    project_confidence_scores,
    project_field_paths,
)

__all__ = [
    "Artifact",
    "ArtifactStage",
    "ArtifactType",
    "Contact",
    "Entity",
    "ParsingStatus",
    "ReviewDecision",
    "SuggestionAction",
    "SuggestionEntry",
    "SuggestionPriority",
    "SuggestionStatus",
    "TranscriptionStatus",
    "UpdateSuggestionRecord",
    "new_id",
    "project_confidence_scores",
    "project_field_paths",
    "utcnow",
]
