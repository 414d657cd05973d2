"""Repository implementations backed by SQLAlchemy Core statements on a session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cultivate.domain.errors import InternalError, StateConflict
from cultivate.domain.model import (
    Artifact,
    Contact,
    SuggestionEntry,
    SuggestionStatus,
    UpdateSuggestionRecord,
)

from .tables import artifact_table, contact_table, update_suggestion_table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from sqlalchemy import ColumnElement, CursorResult, Executable, Result, Row, Table
    from sqlalchemy.orm import Session


class SqlAlchemyRepository[TEntity](ABC):
    """Row <-> dataclass conversion plus the shared conditional update.

    Values in ``expected`` may be a single value, ``None`` (matches NULL) or a
    collection of admissible values.
    """

    table: Table

    def __init__(self, session: Session) -> None:
        self.session = session

    @abstractmethod
    def _to_row(self, entity: TEntity) -> dict[str, Any]: ...

    @abstractmethod
    def _from_row(self, row: Row[Any]) -> TEntity: ...

    def _encode(self, column: str, value: object) -> object:
        _ = column
        return value

    def _execute(self, stmt: Executable) -> Result[Any]:
        try:
            return self.session.execute(stmt)
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            raise InternalError(f"Persistence failure on {self.table.name}: {exc}") from exc

    def get(self, entity_id: UUID) -> TEntity | None:
        stmt = select(self.table).where(self.table.c.id == entity_id)
        row = self._execute(stmt).one_or_none()
        return None if row is None else self._from_row(row)

    def insert(self, entity: TEntity) -> None:
        try:
            self._execute(insert(self.table).values(self._to_row(entity)))
        except IntegrityError as exc:
            raise StateConflict(f"Cannot insert into {self.table.name}: {exc.orig}") from exc

    def update_with_expected(
        self,
        entity_id: UUID,
        *,
        expected: Mapping[str, object],
        changes: Mapping[str, object],
    ) -> bool:
        conditions: list[ColumnElement[bool]] = [self.table.c.id == entity_id]
        for name, value in expected.items():
            column = self.table.c[name]
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, Collection) and not isinstance(value, str):
                conditions.append(column.in_(list(cast("Collection[object]", value))))
            else:
                conditions.append(column == value)

        values: dict[str, Any] = {
            name: self._encode(name, value) for name, value in changes.items()
        }
        values["version"] = self.table.c.version + 1
        stmt = update(self.table).where(and_(*conditions)).values(values)
        result = cast("CursorResult[Any]", self._execute(stmt))
        return result.rowcount == 1


class SqlAlchemyContactRepository(SqlAlchemyRepository[Contact]):
    table = contact_table

    def _to_row(self, entity: Contact) -> dict[str, Any]:
        return {
            "id": entity.id,
            "user_id": entity.user_id,
            "fields": entity.fields,
            "field_sources": entity.field_sources,
            "version": entity.version,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def _from_row(self, row: Row[Any]) -> Contact:
        data = row._mapping  # noqa: SLF001
        return Contact(
            id=data["id"],
            user_id=data["user_id"],
            fields=dict(data["fields"] or {}),
            field_sources=dict(data["field_sources"] or {}),
            version=data["version"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )


class SqlAlchemyArtifactRepository(SqlAlchemyRepository[Artifact]):
    table = artifact_table

    def _to_row(self, entity: Artifact) -> dict[str, Any]:
        return {
            "id": entity.id,
            "contact_id": entity.contact_id,
            "user_id": entity.user_id,
            "type": entity.type,
            "content": entity.content,
            "metadata": entity.metadata,
            "transcription": entity.transcription,
            "transcription_status": entity.transcription_status,
            "transcription_error": entity.transcription_error,
            "ai_parsing_status": entity.ai_parsing_status,
            "parsing_error": entity.parsing_error,
            "ai_processing_started_at": entity.ai_processing_started_at,
            "ai_processing_completed_at": entity.ai_processing_completed_at,
            "version": entity.version,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def _from_row(self, row: Row[Any]) -> Artifact:
        data = row._mapping  # noqa: SLF001
        return Artifact(
            id=data["id"],
            contact_id=data["contact_id"],
            user_id=data["user_id"],
            type=data["type"],
            content=data["content"],
            metadata=dict(data["metadata"] or {}),
            transcription=data["transcription"],
            transcription_status=data["transcription_status"],
            transcription_error=data["transcription_error"],
            ai_parsing_status=data["ai_parsing_status"],
            parsing_error=data["parsing_error"],
            ai_processing_started_at=data["ai_processing_started_at"],
            ai_processing_completed_at=data["ai_processing_completed_at"],
            version=data["version"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )


class SqlAlchemySuggestionRepository(SqlAlchemyRepository[UpdateSuggestionRecord]):
    table = update_suggestion_table

    def find_open_for_artifact(self, artifact_id: UUID) -> UpdateSuggestionRecord | None:
        stmt = (
            select(self.table)
            .where(self.table.c.artifact_id == artifact_id)
            .where(self.table.c.status == SuggestionStatus.PENDING)
        )
        row = self._execute(stmt).one_or_none()
        return None if row is None else self._from_row(row)

    def list_pending(self, contact_id: UUID) -> Sequence[UpdateSuggestionRecord]:
        stmt = (
            select(self.table)
            .where(self.table.c.contact_id == contact_id)
            .where(self.table.c.status == SuggestionStatus.PENDING)
            .order_by(self.table.c.created_at)
        )
        return [self._from_row(row) for row in self._execute(stmt)]

    def _encode(self, column: str, value: object) -> object:
        if column == "entries":
            entries = cast("Sequence[SuggestionEntry]", value)
            return [entry.to_payload() for entry in entries]
        return value

    def _to_row(self, entity: UpdateSuggestionRecord) -> dict[str, Any]:
        return {
            "id": entity.id,
            "artifact_id": entity.artifact_id,
            "contact_id": entity.contact_id,
            "user_id": entity.user_id,
            "entries": self._encode("entries", entity.entries),
            "priority": entity.priority,
            "status": entity.status,
            "user_selections": entity.user_selections,
            "viewed_at": entity.viewed_at,
            "reviewed_at": entity.reviewed_at,
            "dismissed_at": entity.dismissed_at,
            "applied_at": entity.applied_at,
            "version": entity.version,
            "created_at": entity.created_at,
        }

    def _from_row(self, row: Row[Any]) -> UpdateSuggestionRecord:
        data = row._mapping  # noqa: SLF001
        return UpdateSuggestionRecord(
            id=data["id"],
            artifact_id=data["artifact_id"],
            contact_id=data["contact_id"],
            user_id=data["user_id"],
            entries=tuple(SuggestionEntry.from_payload(item) for item in data["entries"] or []),
            priority=data["priority"],
            status=data["status"],
            user_selections=dict(data["user_selections"] or {}),
            viewed_at=data["viewed_at"],
            reviewed_at=data["reviewed_at"],
            dismissed_at=data["dismissed_at"],
            applied_at=data["applied_at"],
            version=data["version"],
            created_at=data["created_at"],
        )
