"""Public interface for the OpenAI adapter."""

from __future__ import annotations

from .client import OpenAIIntelligence, parse_completion
from .schema import CandidateUpdatePayload, ChatCompletionResponse, ContactUpdatesPayload
from .transcriber import OpenAITranscriber

__all__ = [
    "CandidateUpdatePayload",
    "ChatCompletionResponse",
    "ContactUpdatesPayload",
    "OpenAIIntelligence",
    "OpenAITranscriber",
    "parse_completion",
]
