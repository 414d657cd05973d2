"""Engine lifecycle and the SQLAlchemy unit of work over the pipeline tables."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from cultivate.adapters.sqlalchemy.migrations import upgrade_head
from cultivate.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtifactRepository,
    SqlAlchemyContactRepository,
    SqlAlchemySuggestionRepository,
)
from cultivate.config.storage import get_database_config
from cultivate.domain.errors import InternalError
from cultivate.domain.ports.unit_of_work import PipelineRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before ``startup()`` or configured twice."""


@dataclass(frozen=True, slots=True)
class _Database:
    engine: Engine
    sessions: sessionmaker[Session]


_database: _Database | None = None


def create_configured_engine(database_uri: str | None = None) -> Engine:
    """Engine for the configured database with a bounded connect/lock timeout."""

    config = get_database_config()
    uri = database_uri or config.uri
    connect_args: dict[str, object] = {}
    if uri.startswith("sqlite"):
        connect_args["timeout"] = config.timeout_seconds
    elif uri.startswith("postgresql"):
        connect_args["connect_timeout"] = int(config.timeout_seconds)
    return create_engine(uri, future=True, connect_args=connect_args)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bring the schema to head and bind the session factory to ``engine``.

    Without ``engine`` one is created from ``database_uri`` or the environment.
    A second call raises ``StartupError`` unless ``force`` is set.
    """

    global _database  # noqa: PLW0603
    if _database is not None and not force:
        raise StartupError("Database already initialised. Pass force=True to reconfigure.")

    resolved = engine or create_configured_engine(database_uri)
    upgrade_head(engine=resolved)
    _database = _Database(resolved, sessionmaker(bind=resolved, expire_on_commit=False))
    log.info("Database ready at %s", resolved.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return None if _database is None else _database.engine


def is_started() -> bool:
    return _database is not None


def shutdown() -> None:
    """Dispose the engine and forget it; tests call this between databases."""

    global _database  # noqa: PLW0603
    if _database is not None:
        _database.engine.dispose()
    _database = None


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block over artifacts, suggestions and contacts.

    Anything not committed when the block ends is rolled back. Commit failures
    surface as ``InternalError``.
    """

    def __init__(self) -> None:
        if _database is None:
            raise StartupError(
                "Database not initialised. Call cultivate.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self._sessions = _database.sessions
        self._session: Session | None = None
        self._repositories: PipelineRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = PipelineRepositories(
            artifacts=SqlAlchemyArtifactRepository(session),
            suggestions=SqlAlchemySuggestionRepository(session),
            contacts=SqlAlchemyContactRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self._open_session()
        try:
            session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def repositories(self) -> PipelineRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        try:
            self._open_session().commit()
        except SQLAlchemyError as exc:
            log.exception("Commit failed")
            raise InternalError(f"Persistence failure: {exc}") from exc

    def rollback(self) -> None:
        self._open_session().rollback()

    def _open_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session


if TYPE_CHECKING:
    from cultivate.domain.ports.unit_of_work import PipelineUnitOfWork

    _uow_check: PipelineUnitOfWork = SqlAlchemyUnitOfWork()
