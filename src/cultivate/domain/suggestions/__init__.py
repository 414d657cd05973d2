"""Suggestion generation and review."""

from __future__ import annotations

from .content import email_direction, render_content
from .generator import (
    GenerationResult,
    SuggestionGenerator,
    build_entries,
    clamp_confidence,
    derive_priority,
)
from .insights import meeting_insights
from .ledger import ReviewOutcome, SuggestionLedger, effective_selections

__all__ = [
    "GenerationResult",
    "ReviewOutcome",
    "SuggestionGenerator",
    "SuggestionLedger",
    "build_entries",
    "clamp_confidence",
    "derive_priority",
    "effective_selections",
    "email_direction",
    "meeting_insights",
    "render_content",
]
