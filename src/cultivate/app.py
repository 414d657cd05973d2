"""Application wiring: adapters, domain services and the parse signal."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cultivate.adapters.signals import InProcessSignalBus
from cultivate.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from cultivate.config.pipeline import get_pipeline_config
from cultivate.domain.errors import NotFoundError, UpstreamFailure
from cultivate.domain.model import Contact
from cultivate.domain.ports.unit_of_work import PipelineUnitOfWork
from cultivate.domain.processing import ProcessingOrchestrator
from cultivate.domain.suggestions import SuggestionGenerator, SuggestionLedger

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from cultivate.config.pipeline import PipelineConfig
    from cultivate.domain.model import Artifact
    from cultivate.domain.ports import IntelligenceCapability, SignalBus, Transcriber

UnitOfWorkFactory = Callable[[], PipelineUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class PipelineServices:
    """Everything the HTTP layer and the CLI call into."""

    unit_of_work_factory: UnitOfWorkFactory
    signals: SignalBus
    orchestrator: ProcessingOrchestrator
    generator: SuggestionGenerator
    ledger: SuggestionLedger
    transcriber: Transcriber | None = field(default=None)

    def get_contact(self, contact_id: UUID) -> Contact:
        with self.unit_of_work_factory() as uow:
            contact = uow.repositories.contacts.get(contact_id)
        if contact is None:
            raise NotFoundError("Contact", contact_id)
        return contact

    def register_contact(self, *, user_id: UUID, fields: Mapping[str, Any]) -> Contact:
        contact = Contact(user_id=user_id, fields=dict(fields))
        with self.unit_of_work_factory() as uow:
            uow.repositories.contacts.insert(contact)
            uow.commit()
        log.info("Registered contact %s (%s)", contact.id, contact.display_name)
        return contact

    def transcribe(self, artifact_id: UUID, audio: bytes, *, filename: str) -> Artifact:
        """Run the transcriber for a voice memo and record the outcome."""

        if self.transcriber is None:
            raise UpstreamFailure("No transcriber configured")
        self.orchestrator.mark_transcription_started(artifact_id)
        try:
            text = self.transcriber.transcribe(audio, filename=filename)
        except UpstreamFailure as exc:
            return self.orchestrator.mark_transcription_failed(artifact_id, str(exc))
        return self.orchestrator.mark_transcription_completed(artifact_id, text)


def build_services(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    intelligence: IntelligenceCapability | None = None,
    transcriber: Transcriber | None = None,
    signals: SignalBus | None = None,
    pipeline_config: PipelineConfig | None = None,
) -> PipelineServices:
    """Wire services, defaulting to the SQLAlchemy store and the OpenAI adapters."""

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyUnitOfWork

    if intelligence is None:
        # imported lazily so tests with fakes never need OpenAI configuration
        from cultivate.adapters.openai import OpenAIIntelligence, OpenAITranscriber  # noqa: PLC0415
        from cultivate.config.openai import get_openai_config  # noqa: PLC0415

        openai_config = get_openai_config()
        intelligence = OpenAIIntelligence(config=openai_config)
        transcriber = transcriber or OpenAITranscriber(config=openai_config)

    effective_signals = signals or InProcessSignalBus()
    effective_config = pipeline_config or get_pipeline_config()

    generator = SuggestionGenerator(
        unit_of_work_factory=unit_of_work_factory, intelligence=intelligence
    )
    effective_signals.subscribe(generator.handle)

    return PipelineServices(
        unit_of_work_factory=unit_of_work_factory,
        signals=effective_signals,
        orchestrator=ProcessingOrchestrator(
            unit_of_work_factory=unit_of_work_factory,
            signals=effective_signals,
            policies=effective_config.policies,
        ),
        generator=generator,
        ledger=SuggestionLedger(unit_of_work_factory=unit_of_work_factory),
        transcriber=transcriber,
    )
