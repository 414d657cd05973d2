"""Ports for the external intelligence and transcription capabilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from cultivate.domain.model import ArtifactType


@dataclass(frozen=True, slots=True, kw_only=True)
class ParseRequest:
    """Everything the capability sees about one artifact."""

    artifact_type: ArtifactType
    content: str
    contact_name: str
    contact_fields: Mapping[str, Any] = field(default_factory=dict[str, Any])


@dataclass(frozen=True, slots=True, kw_only=True)
class CandidateUpdate:
    """Raw candidate edit as returned by the capability, before validation."""

    field_path: str | None
    action: str
    suggested_value: Any = None
    confidence: float | None = None
    reasoning: str = ""


@runtime_checkable
class IntelligenceCapability(Protocol):
    """Derives candidate contact edits from artifact content.

    Implementations raise ``UpstreamFailure`` on transport errors, timeouts and
    unusable responses.
    """

    def propose_updates(self, request: ParseRequest) -> Sequence[CandidateUpdate]: ...


@runtime_checkable
class Transcriber(Protocol):
    """Turns recorded audio into text. Raises ``UpstreamFailure`` on failure."""

    def transcribe(self, audio: bytes, *, filename: str) -> str: ...


__all__ = ["CandidateUpdate", "IntelligenceCapability", "ParseRequest", "Transcriber"]
