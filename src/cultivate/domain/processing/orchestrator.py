"""Lifecycle control for artifacts: ingest, transcription and parse requests."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cultivate.domain.errors import (
    InvalidStateError,
    NotFoundError,
    StateConflict,
    ValidationError,
)
from cultivate.domain.model import (
    Artifact,
    SuggestionStatus,
    TranscriptionStatus,
    utcnow,
)
from cultivate.domain.ports import ParseRequested

from .policy import DEFAULT_TYPE_POLICIES, ensure_parseable, policy_for
from .transitions import TransitionName, transition

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from uuid import UUID

    from cultivate.domain.model import ArtifactType
    from cultivate.domain.ports import PipelineUnitOfWork, SignalBus

    from .policy import ArtifactTypePolicy
    from .transitions import StatusTransition

log = getLogger(__name__)


def load_artifact(uow: PipelineUnitOfWork, artifact_id: UUID) -> Artifact:
    artifact = uow.repositories.artifacts.get(artifact_id)
    if artifact is None:
        raise NotFoundError("Artifact", artifact_id)
    return artifact


def write_transition(
    uow: PipelineUnitOfWork,
    artifact: Artifact,
    step: StatusTransition,
    **extra: Any,
) -> Artifact:
    """Conditionally apply ``step`` plus ``extra`` columns and return the new state."""

    changes: dict[str, Any] = {**step.changes, **extra, "updated_at": utcnow()}
    written = uow.repositories.artifacts.update_with_expected(
        artifact.id, expected=step.expected, changes=changes
    )
    if not written:
        raise StateConflict(
            f"Artifact {artifact.id} changed concurrently; {step.column} is no longer "
            f"one of {sorted(step.sources)}"
        )
    return replace(artifact, **changes, version=artifact.version + 1)


class ProcessingOrchestrator:
    """Owns every artifact status transition outside of the parse run itself.

    Parse-requested signals are published only after the transaction that moved
    ``ai_parsing_status`` to pending has committed.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], PipelineUnitOfWork],
        signals: SignalBus,
        policies: Mapping[ArtifactType, ArtifactTypePolicy] = DEFAULT_TYPE_POLICIES,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._signals = signals
        self._policies = policies

    def ingest(
        self,
        *,
        contact_id: UUID,
        artifact_type: ArtifactType,
        content: str | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> Artifact:
        policy = policy_for(self._policies, artifact_type)
        with self._uow_factory() as uow:
            contact = uow.repositories.contacts.get(contact_id)
            if contact is None:
                raise NotFoundError("Contact", contact_id)
            artifact = Artifact(
                contact_id=contact.id,
                user_id=contact.user_id,
                type=artifact_type,
                content=content,
                metadata=dict(metadata or {}),
                transcription_status=(
                    TranscriptionStatus.PENDING
                    if policy.requires_transcription
                    else TranscriptionStatus.NONE
                ),
            )
            uow.repositories.artifacts.insert(artifact)
            uow.commit()

        log.info(
            "Ingested %s artifact %s for contact %s", artifact.type, artifact.id, contact_id
        )
        return artifact

    def get(self, artifact_id: UUID) -> Artifact:
        with self._uow_factory() as uow:
            return load_artifact(uow, artifact_id)

    def mark_transcription_started(self, artifact_id: UUID) -> Artifact:
        name = TransitionName.START_TRANSCRIPTION
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            step = transition(name)
            step.guard(artifact, name)
            artifact = write_transition(uow, artifact, step, transcription_error=None)
            uow.commit()
        return artifact

    def mark_transcription_completed(self, artifact_id: UUID, transcript_text: str) -> Artifact:
        if not transcript_text or not transcript_text.strip():
            raise ValidationError("transcript_text must not be empty")

        name = TransitionName.COMPLETE_TRANSCRIPTION
        signal: ParseRequested | None = None
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            step = transition(name)
            step.guard(artifact, name)
            artifact = write_transition(
                uow, artifact, step, transcription=transcript_text, transcription_error=None
            )

            parse_step = transition(TransitionName.REQUEST_PARSE)
            if parse_step.allows(artifact) and self._parseable(artifact):
                artifact = write_transition(
                    uow, artifact, parse_step, **_reset_parse_columns()
                )
                signal = ParseRequested(artifact.id)
            else:
                log.info(
                    "Transcription stored for %s; parse not requested (ai_parsing_status=%s)",
                    artifact.id,
                    artifact.ai_parsing_status,
                )
            uow.commit()

        if signal is not None:
            self._signals.publish(signal)
        return artifact

    def mark_transcription_failed(self, artifact_id: UUID, error: str) -> Artifact:
        name = TransitionName.FAIL_TRANSCRIPTION
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            step = transition(name)
            step.guard(artifact, name)
            artifact = write_transition(uow, artifact, step, transcription_error=error)
            uow.commit()

        log.warning("Transcription failed for artifact %s: %s", artifact_id, error)
        return artifact

    def request_parse(self, artifact_id: UUID) -> Artifact:
        name = TransitionName.REQUEST_PARSE
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            ensure_parseable(artifact, policy_for(self._policies, artifact.type))
            step = transition(name)
            step.guard(artifact, name)
            artifact = write_transition(uow, artifact, step, **_reset_parse_columns())
            uow.commit()

        self._signals.publish(ParseRequested(artifact.id))
        return artifact

    def reprocess(self, artifact_id: UUID) -> Artifact:
        """Re-queue parsing and retire the open suggestion, if any.

        The transcript is reused as is; transcription status is never touched.
        """

        name = TransitionName.REPROCESS
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            ensure_parseable(artifact, policy_for(self._policies, artifact.type))
            step = transition(name)
            step.guard(artifact, name)
            artifact = write_transition(uow, artifact, step, **_reset_parse_columns())

            suggestions = uow.repositories.suggestions
            open_record = suggestions.find_open_for_artifact(artifact.id)
            if open_record is not None:
                superseded = suggestions.update_with_expected(
                    open_record.id,
                    expected={"status": SuggestionStatus.PENDING},
                    changes={"status": SuggestionStatus.SKIPPED, "dismissed_at": utcnow()},
                )
                if not superseded:
                    raise StateConflict(
                        f"Suggestion {open_record.id} was reviewed while reprocessing"
                    )
                log.info("Superseded open suggestion %s for %s", open_record.id, artifact.id)
            uow.commit()

        self._signals.publish(ParseRequested(artifact.id))
        log.info("Reprocessing requested for artifact %s", artifact.id)
        return artifact

    def _parseable(self, artifact: Artifact) -> bool:
        try:
            ensure_parseable(artifact, policy_for(self._policies, artifact.type))
        except InvalidStateError as exc:
            log.info("Artifact %s not ready for parsing: %s", artifact.id, exc)
            return False
        return True


def _reset_parse_columns() -> dict[str, Any]:
    return {
        "parsing_error": None,
        "ai_processing_started_at": None,
        "ai_processing_completed_at": None,
    }
