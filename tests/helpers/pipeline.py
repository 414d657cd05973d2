"""Reusable fakes and builders for pipeline tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from cultivate.domain.errors import UpstreamFailure
from cultivate.domain.model import (
    Artifact,
    ArtifactType,
    Contact,
    ParsingStatus,
    SuggestionAction,
    SuggestionEntry,
    TranscriptionStatus,
    UpdateSuggestionRecord,
)
from cultivate.domain.ports import (
    CandidateUpdate,
    IntelligenceCapability,
    ParseRequest,
    ParseRequested,
    SignalBus,
    Transcriber,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cultivate.domain.ports import ParseRequestedHandler, PipelineUnitOfWork

type UnitOfWorkFactory = Callable[[], PipelineUnitOfWork]

USER_ID = UUID("00000000-0000-4000-8000-000000000001")


def candidate(
    field_path: str | None,
    suggested_value: Any = None,
    *,
    action: str = "update",
    confidence: float | None = 0.9,
    reasoning: str = "mentioned in the artifact",
) -> CandidateUpdate:
    return CandidateUpdate(
        field_path=field_path,
        action=action,
        suggested_value=suggested_value,
        confidence=confidence,
        reasoning=reasoning,
    )


def entry(
    field_path: str,
    suggested_value: Any,
    *,
    current_value: Any = None,
    action: SuggestionAction = SuggestionAction.UPDATE,
    confidence: float = 0.9,
) -> SuggestionEntry:
    return SuggestionEntry(
        field_path=field_path,
        action=action,
        current_value=current_value,
        suggested_value=suggested_value,
        confidence=confidence,
        reasoning="test",
    )


class FakeIntelligence(IntelligenceCapability):
    """Returns queued responses in order; an exception in the queue is raised."""

    def __init__(self, *responses: Sequence[CandidateUpdate] | Exception) -> None:
        self._responses: list[Sequence[CandidateUpdate] | Exception] = list(responses)
        self.requests: list[ParseRequest] = []

    def queue(self, response: Sequence[CandidateUpdate] | Exception) -> None:
        self._responses.append(response)

    def propose_updates(self, request: ParseRequest) -> Sequence[CandidateUpdate]:
        self.requests.append(request)
        if not self._responses:
            raise UpstreamFailure("no response queued")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeTranscriber(Transcriber):
    def __init__(self, result: str | Exception = "transcribed text") -> None:
        self._result = result
        self.calls: list[tuple[bytes, str]] = []

    def transcribe(self, audio: bytes, *, filename: str) -> str:
        self.calls.append((audio, filename))
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


class RecordingSignalBus(SignalBus):
    """Records published signals without delivering them."""

    def __init__(self) -> None:
        self.published: list[ParseRequested] = []
        self.handlers: list[ParseRequestedHandler] = []

    def publish(self, signal: ParseRequested) -> None:
        self.published.append(signal)

    def subscribe(self, handler: ParseRequestedHandler) -> None:
        self.handlers.append(handler)

    @property
    def artifact_ids(self) -> list[UUID]:
        return [signal.artifact_id for signal in self.published]


def make_contact(**fields: Any) -> Contact:
    return Contact(user_id=USER_ID, fields=dict(fields))


def store_contact(uow_factory: UnitOfWorkFactory, **fields: Any) -> Contact:
    contact = make_contact(**fields)
    with uow_factory() as uow:
        uow.repositories.contacts.insert(contact)
        uow.commit()
    return contact


def load_contact(uow_factory: UnitOfWorkFactory, contact_id: UUID) -> Contact:
    with uow_factory() as uow:
        contact = uow.repositories.contacts.get(contact_id)
    assert contact is not None
    return contact


def load_artifact(uow_factory: UnitOfWorkFactory, artifact_id: UUID) -> Artifact:
    with uow_factory() as uow:
        artifact = uow.repositories.artifacts.get(artifact_id)
    assert artifact is not None
    return artifact


def load_suggestion(uow_factory: UnitOfWorkFactory, suggestion_id: UUID) -> UpdateSuggestionRecord:
    with uow_factory() as uow:
        record = uow.repositories.suggestions.get(suggestion_id)
    assert record is not None
    return record


def store_parsed_artifact(
    uow_factory: UnitOfWorkFactory,
    contact: Contact,
    *,
    artifact_type: ArtifactType = ArtifactType.NOTE,
    content: str = "Caught up over coffee.",
) -> Artifact:
    """An artifact whose parse already completed."""

    artifact = Artifact(
        contact_id=contact.id,
        user_id=contact.user_id,
        type=artifact_type,
        content=content,
        transcription_status=TranscriptionStatus.NONE,
        ai_parsing_status=ParsingStatus.COMPLETED,
    )
    with uow_factory() as uow:
        uow.repositories.artifacts.insert(artifact)
        uow.commit()
    return artifact


def store_suggestion(
    uow_factory: UnitOfWorkFactory,
    contact: Contact,
    entries: Iterable[SuggestionEntry],
    *,
    artifact: Artifact | None = None,
) -> UpdateSuggestionRecord:
    source = artifact or store_parsed_artifact(uow_factory, contact)
    record = UpdateSuggestionRecord(
        artifact_id=source.id,
        contact_id=contact.id,
        user_id=contact.user_id,
        entries=tuple(entries),
    )
    with uow_factory() as uow:
        uow.repositories.suggestions.insert(record)
        uow.commit()
    return record


def set_contact_field(
    uow_factory: UnitOfWorkFactory, contact_id: UUID, field_path: str, value: Any
) -> None:
    """Simulate an edit made outside the pipeline after a suggestion was generated."""

    with uow_factory() as uow:
        contact = uow.repositories.contacts.get(contact_id)
        assert contact is not None
        fields = dict(contact.fields)
        fields[field_path] = value
        assert uow.repositories.contacts.update_with_expected(
            contact_id, expected={"version": contact.version}, changes={"fields": fields}
        )
        uow.commit()


def random_id() -> UUID:
    return uuid4()
