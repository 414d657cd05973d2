from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from cultivate.app import PipelineServices
from cultivate.domain.model import ArtifactType, ParsingStatus, TranscriptionStatus
from cultivate.ui import cli as cli_module
from tests.helpers.pipeline import FakeTranscriber, candidate, random_id

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from uuid import UUID

    from cultivate.domain.model import Contact
    from tests.helpers.pipeline import FakeIntelligence


@pytest.fixture
def cli_services(
    monkeypatch: pytest.MonkeyPatch, services: PipelineServices
) -> PipelineServices:
    monkeypatch.setattr(cli_module, "build_services", lambda: services)
    monkeypatch.setattr(cli_module, "load_dotenv", lambda: False)
    return services


def test_request_parse_runs_generation_in_process(
    cli_services: PipelineServices, intelligence: FakeIntelligence
) -> None:
    contact = cli_services.register_contact(user_id=random_id(), fields={"name": "Ada"})
    artifact = cli_services.orchestrator.ingest(
        contact_id=contact.id, artifact_type=ArtifactType.NOTE, content="Ada is CTO"
    )
    intelligence.queue([candidate("title", "CTO", action="add")])

    cli_module.main(["request-parse", str(artifact.id)])

    assert cli_services.orchestrator.get(artifact.id).ai_parsing_status is ParsingStatus.COMPLETED
    (record,) = cli_services.ledger.list_pending(contact.id)
    assert record.field_paths == ("title",)


def test_reprocess_command(
    cli_services: PipelineServices, intelligence: FakeIntelligence
) -> None:
    contact = cli_services.register_contact(user_id=random_id(), fields={"name": "Ada"})
    artifact = cli_services.orchestrator.ingest(
        contact_id=contact.id, artifact_type=ArtifactType.NOTE, content="Ada is CTO"
    )
    intelligence.queue([])
    cli_services.orchestrator.request_parse(artifact.id)
    intelligence.queue([candidate("title", "CTO", action="add")])

    cli_module.main(["reprocess", str(artifact.id)])

    assert len(cli_services.ledger.list_pending(contact.id)) == 1


def test_add_contact_command(
    cli_services: PipelineServices, monkeypatch: pytest.MonkeyPatch
) -> None:
    registered: list[Contact] = []
    original = PipelineServices.register_contact

    def recording_register(
        self: PipelineServices, *, user_id: UUID, fields: Mapping[str, Any]
    ) -> Contact:
        contact = original(self, user_id=user_id, fields=fields)
        registered.append(contact)
        return contact

    monkeypatch.setattr(PipelineServices, "register_contact", recording_register)
    user_id = random_id()

    cli_module.main(["add-contact", "--user-id", str(user_id), "--fields", '{"name": "Ada"}'])

    (contact,) = registered
    assert contact.user_id == user_id
    assert cli_services.get_contact(contact.id).fields == {"name": "Ada"}


def test_transcribe_command_feeds_the_orchestrator(
    cli_services: PipelineServices, intelligence: FakeIntelligence, tmp_path: Path
) -> None:
    contact = cli_services.register_contact(user_id=random_id(), fields={"name": "Ada"})
    artifact = cli_services.orchestrator.ingest(
        contact_id=contact.id, artifact_type=ArtifactType.VOICE_MEMO
    )
    audio = tmp_path / "memo.m4a"
    audio.write_bytes(b"audio-bytes")
    intelligence.queue([])

    cli_module.main(["transcribe", str(artifact.id), str(audio)])

    stored = cli_services.orchestrator.get(artifact.id)
    assert stored.transcription == "transcribed text"
    assert stored.transcription_status is TranscriptionStatus.COMPLETED
    assert stored.ai_parsing_status is ParsingStatus.COMPLETED
    transcriber = cli_services.transcriber
    assert isinstance(transcriber, FakeTranscriber)
    assert transcriber.calls == [(b"audio-bytes", "memo.m4a")]


def test_migrate_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[bool] = []
    monkeypatch.setattr(cli_module, "upgrade_head", lambda: calls.append(True))
    monkeypatch.setattr(cli_module, "load_dotenv", lambda: False)

    cli_module.main(["migrate"])

    assert calls == [True]


def test_invalid_uuid_exits_with_usage_error(cli_services: PipelineServices) -> None:
    _ = cli_services
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["request-parse", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_pipeline_error_exits_with_failure(cli_services: PipelineServices) -> None:
    _ = cli_services
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["request-parse", str(random_id())])

    assert excinfo.value.code == 1
