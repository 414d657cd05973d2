"""Suggestion records produced from one artifact and reviewed by a human."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .base import Entity
from .enums import SuggestionAction, SuggestionPriority, SuggestionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True, kw_only=True)
class SuggestionEntry:
    """One candidate edit. Immutable once the record is written."""

    field_path: str
    action: SuggestionAction
    current_value: Any = None
    suggested_value: Any = None
    confidence: float = 0.0
    reasoning: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "field_path": self.field_path,
            "action": self.action.value,
            "current_value": self.current_value,
            "suggested_value": self.suggested_value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SuggestionEntry:
        return cls(
            field_path=str(payload["field_path"]),
            action=SuggestionAction(payload["action"]),
            current_value=payload.get("current_value"),
            suggested_value=payload.get("suggested_value"),
            confidence=float(payload.get("confidence", 0.0)),
            reasoning=str(payload.get("reasoning") or ""),
        )


def project_field_paths(entries: Iterable[SuggestionEntry]) -> tuple[str, ...]:
    """Deduplicated entry paths in first-seen order."""

    return tuple(dict.fromkeys(entry.field_path for entry in entries))


def project_confidence_scores(entries: Iterable[SuggestionEntry]) -> dict[str, float]:
    """Highest confidence seen per field path."""

    scores: dict[str, float] = {}
    for entry in entries:
        previous = scores.get(entry.field_path)
        if previous is None or entry.confidence > previous:
            scores[entry.field_path] = entry.confidence
    return scores


@dataclass(eq=False, kw_only=True)
class UpdateSuggestionRecord(Entity):
    """A batch of candidate field-level edits to a contact, derived from one artifact."""

    artifact_id: UUID
    contact_id: UUID
    user_id: UUID
    entries: tuple[SuggestionEntry, ...]
    priority: SuggestionPriority = SuggestionPriority.MEDIUM
    status: SuggestionStatus = SuggestionStatus.PENDING
    user_selections: dict[str, bool] = field(default_factory=dict[str, bool])
    viewed_at: datetime | None = None
    reviewed_at: datetime | None = None
    dismissed_at: datetime | None = None
    applied_at: datetime | None = None

    @property
    def field_paths(self) -> tuple[str, ...]:
        return project_field_paths(self.entries)

    @property
    def confidence_scores(self) -> dict[str, float]:
        return project_confidence_scores(self.entries)
