"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ArtifactType(StrEnum):
    VOICE_MEMO = "voice_memo"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    CALENDAR_EVENT = "calendar_event"
    LINKEDIN_PROFILE = "linkedin_profile"
    LINKEDIN_POST = "linkedin_post"


class TranscriptionStatus(StrEnum):
    NONE = "none"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ParsingStatus(StrEnum):
    NONE = "none"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def in_flight(self) -> bool:
        return self in {ParsingStatus.PENDING, ParsingStatus.PROCESSING}


class ArtifactStage(StrEnum):
    """Lifecycle stage derived from the transcription and parsing columns."""

    RECEIVED = "received"
    TRANSCRIBING = "transcribing"
    TRANSCRIBED = "transcribed"
    PARSING = "parsing"
    PARSED = "parsed"
    FAILED = "failed"


class SuggestionAction(StrEnum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


class SuggestionStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PARTIAL = "partial"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self is not SuggestionStatus.PENDING


class SuggestionPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReviewDecision(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"
    SKIP = "skip"
