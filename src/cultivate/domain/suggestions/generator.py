"""Turns a pending artifact into one suggestion record."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cultivate.domain.errors import PathError, StateConflict, UpstreamFailure, ValidationError
from cultivate.domain.model import (
    ParsingStatus,
    SuggestionAction,
    SuggestionEntry,
    SuggestionPriority,
    UpdateSuggestionRecord,
    utcnow,
)
from cultivate.domain.ports import ParseRequest
from cultivate.domain.processing import TransitionName, load_artifact, transition, write_transition
from cultivate.domain.reconciliation import read_value

from .content import render_content
from .insights import meeting_insights

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from uuid import UUID

    from cultivate.domain.model import Artifact
    from cultivate.domain.ports import (
        CandidateUpdate,
        IntelligenceCapability,
        ParseRequested,
        PipelineUnitOfWork,
    )

log = getLogger(__name__)

HIGH_PRIORITY_CONFIDENCE = 0.8
MEDIUM_PRIORITY_CONFIDENCE = 0.5


@dataclass(frozen=True, slots=True)
class GenerationResult:
    artifact_id: UUID
    status: ParsingStatus
    suggestion_id: UUID | None = None
    error: str | None = None
    skipped: bool = False


def clamp_confidence(value: float | None) -> float:
    if value is None:
        return 0.0
    number = float(value)
    if math.isnan(number):
        return 0.0
    return min(1.0, max(0.0, number))


def derive_priority(entries: Iterable[SuggestionEntry]) -> SuggestionPriority:
    top = max((entry.confidence for entry in entries), default=0.0)
    if top >= HIGH_PRIORITY_CONFIDENCE:
        return SuggestionPriority.HIGH
    if top >= MEDIUM_PRIORITY_CONFIDENCE:
        return SuggestionPriority.MEDIUM
    return SuggestionPriority.LOW


def build_entries(
    candidates: Sequence[CandidateUpdate], contact_fields: Mapping[str, Any]
) -> list[SuggestionEntry]:
    """Validate raw candidates and snapshot the live value of each path.

    Raises ``ValidationError`` for a candidate without a usable field path or
    action; a single bad candidate invalidates the whole batch.
    """

    entries: list[SuggestionEntry] = []
    for position, candidate in enumerate(candidates):
        field_path = (candidate.field_path or "").strip()
        if not field_path:
            raise ValidationError(f"Candidate update #{position} has no field_path")
        try:
            action = SuggestionAction(candidate.action)
        except ValueError as exc:
            raise ValidationError(
                f"Candidate update for {field_path!r} has unknown action {candidate.action!r}"
            ) from exc
        try:
            current_value = copy.deepcopy(read_value(contact_fields, field_path))
        except PathError as exc:
            raise ValidationError(str(exc)) from exc

        entries.append(
            SuggestionEntry(
                field_path=field_path,
                action=action,
                current_value=current_value,
                suggested_value=candidate.suggested_value,
                confidence=clamp_confidence(candidate.confidence),
                reasoning=candidate.reasoning,
            )
        )
    return entries


class SuggestionGenerator:
    """Runs one parse per pending artifact.

    Upstream and validation failures are recorded on the artifact instead of
    being raised; anything unexpected is recorded and re-raised.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], PipelineUnitOfWork],
        intelligence: IntelligenceCapability,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._intelligence = intelligence

    def handle(self, signal: ParseRequested) -> None:
        self.run(signal.artifact_id)

    def run(self, artifact_id: UUID) -> GenerationResult:
        with self._uow_factory() as uow:
            artifact = load_artifact(uow, artifact_id)
            if artifact.ai_parsing_status is not ParsingStatus.PENDING:
                log.info(
                    "Skipping parse for %s: status is %s", artifact_id, artifact.ai_parsing_status
                )
                return GenerationResult(artifact_id, artifact.ai_parsing_status, skipped=True)
            try:
                artifact = write_transition(
                    uow,
                    artifact,
                    transition(TransitionName.BEGIN_PARSE),
                    ai_processing_started_at=utcnow(),
                    ai_processing_completed_at=None,
                )
            except StateConflict:
                log.info("Parse for %s already claimed by another run", artifact_id)
                return GenerationResult(artifact_id, ParsingStatus.PROCESSING, skipped=True)
            contact = uow.repositories.contacts.get(artifact.contact_id)
            uow.commit()

        if contact is None:
            return self._fail(artifact, f"Contact {artifact.contact_id} not found")

        try:
            request = ParseRequest(
                artifact_type=artifact.type,
                content=render_content(artifact, contact),
                contact_name=contact.display_name,
                contact_fields=copy.deepcopy(contact.fields),
            )
            candidates = self._intelligence.propose_updates(request)
            entries = build_entries(candidates, contact.fields)
        except (UpstreamFailure, ValidationError) as exc:
            return self._fail(artifact, str(exc))
        except Exception as exc:
            self._fail(artifact, f"Unexpected error: {exc}")
            raise

        return self._complete(artifact, entries)

    def _complete(self, artifact: Artifact, entries: list[SuggestionEntry]) -> GenerationResult:
        record: UpdateSuggestionRecord | None = None
        extra: dict[str, Any] = {}
        metadata = meeting_insights(artifact, entries)
        if metadata is not None:
            extra["metadata"] = metadata
        try:
            with self._uow_factory() as uow:
                if entries:
                    record = UpdateSuggestionRecord(
                        artifact_id=artifact.id,
                        contact_id=artifact.contact_id,
                        user_id=artifact.user_id,
                        entries=tuple(entries),
                        priority=derive_priority(entries),
                    )
                    uow.repositories.suggestions.insert(record)
                write_transition(
                    uow,
                    artifact,
                    transition(TransitionName.COMPLETE_PARSE),
                    ai_processing_completed_at=utcnow(),
                    **extra,
                )
                uow.commit()
        except StateConflict as exc:
            return self._fail(artifact, str(exc))

        if record is None:
            log.info("Parse of %s produced no candidate updates", artifact.id)
            return GenerationResult(artifact.id, ParsingStatus.COMPLETED)

        log.info(
            f"Stored suggestion {record.id} for artifact {artifact.id} "
            f"({len(entries)} entries, priority={record.priority})"
        )
        return GenerationResult(artifact.id, ParsingStatus.COMPLETED, suggestion_id=record.id)

    def _fail(self, artifact: Artifact, error: str) -> GenerationResult:
        log.warning("Parse of artifact %s failed: %s", artifact.id, error)
        try:
            with self._uow_factory() as uow:
                write_transition(
                    uow,
                    artifact,
                    transition(TransitionName.FAIL_PARSE),
                    parsing_error=error,
                    ai_processing_completed_at=utcnow(),
                )
                uow.commit()
        except StateConflict:
            log.warning("Could not record failure for %s: status moved on", artifact.id)
        return GenerationResult(artifact.id, ParsingStatus.FAILED, error=error)
