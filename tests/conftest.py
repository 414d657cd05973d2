from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cultivate.adapters.signals import InProcessSignalBus
from cultivate.adapters.sqlalchemy.migrations import upgrade_head
from cultivate.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup
from cultivate.app import PipelineServices, build_services
from cultivate.config.pipeline import PipelineConfig
from cultivate.domain.processing import ProcessingOrchestrator
from tests.helpers.pipeline import FakeIntelligence, FakeTranscriber, RecordingSignalBus

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so TestClient worker threads see the same database
    engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def recording_bus() -> RecordingSignalBus:
    return RecordingSignalBus()


@pytest.fixture
def intelligence() -> FakeIntelligence:
    return FakeIntelligence()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def orchestrator(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    recording_bus: RecordingSignalBus,
) -> ProcessingOrchestrator:
    return ProcessingOrchestrator(
        unit_of_work_factory=sqlite_unit_of_work, signals=recording_bus
    )


@pytest.fixture
def services(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    intelligence: FakeIntelligence,
    transcriber: FakeTranscriber,
) -> PipelineServices:
    return build_services(
        unit_of_work_factory=sqlite_unit_of_work,
        intelligence=intelligence,
        transcriber=transcriber,
        signals=InProcessSignalBus(),
        pipeline_config=PipelineConfig(),
    )
