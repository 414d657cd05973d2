"""Per-type processing rules checked before an artifact may be parsed."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from cultivate.domain.errors import InvalidStateError
from cultivate.domain.model import ArtifactType, TranscriptionStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cultivate.domain.model import Artifact


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtifactTypePolicy:
    enabled: bool = True
    requires_transcription: bool = False
    requires_content: bool = False
    required_metadata: tuple[str, ...] = field(default_factory=tuple[str, ...])


DEFAULT_TYPE_POLICIES: Mapping[ArtifactType, ArtifactTypePolicy] = MappingProxyType(
    {
        ArtifactType.VOICE_MEMO: ArtifactTypePolicy(requires_transcription=True),
        ArtifactType.EMAIL: ArtifactTypePolicy(requires_content=True),
        ArtifactType.MEETING: ArtifactTypePolicy(requires_content=True),
        ArtifactType.NOTE: ArtifactTypePolicy(requires_content=True),
        ArtifactType.CALENDAR_EVENT: ArtifactTypePolicy(enabled=False),
        ArtifactType.LINKEDIN_PROFILE: ArtifactTypePolicy(),
        ArtifactType.LINKEDIN_POST: ArtifactTypePolicy(required_metadata=("content",)),
    }
)


def policy_for(
    policies: Mapping[ArtifactType, ArtifactTypePolicy], artifact_type: ArtifactType
) -> ArtifactTypePolicy:
    return policies.get(artifact_type, ArtifactTypePolicy(enabled=False))


def ensure_parseable(artifact: Artifact, policy: ArtifactTypePolicy) -> None:
    """Raise ``InvalidStateError`` unless the artifact may enter parsing."""

    if not policy.enabled:
        raise InvalidStateError(f"Artifact type {artifact.type} is not enabled for parsing")
    if policy.requires_transcription and (
        artifact.transcription_status is not TranscriptionStatus.COMPLETED
        or not artifact.transcription
    ):
        raise InvalidStateError(
            f"{artifact.type} must have a completed transcription before parsing"
        )
    if policy.requires_content and not artifact.content:
        raise InvalidStateError(f"{artifact.type} must have content before parsing")
    missing = [key for key in policy.required_metadata if key not in artifact.metadata]
    if missing:
        raise InvalidStateError(
            f"{artifact.type} is missing required metadata: {', '.join(missing)}"
        )
