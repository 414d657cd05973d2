"""Ports for persisting pipeline aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cultivate.domain.model import Artifact, Contact, UpdateSuggestionRecord

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Keyed store with conditional updates.

    ``update_with_expected`` writes ``changes`` only while every column in
    ``expected`` still holds the given value, bumps the row version and reports
    whether exactly one row was written.
    """

    def get(self, entity_id: UUID) -> TEntity | None: ...

    def insert(self, entity: TEntity) -> None: ...

    def update_with_expected(
        self,
        entity_id: UUID,
        *,
        expected: Mapping[str, object],
        changes: Mapping[str, object],
    ) -> bool: ...


@runtime_checkable
class ArtifactRepository(Repository[Artifact], Protocol):
    """Persistence contract for artifacts."""


@runtime_checkable
class SuggestionRepository(Repository[UpdateSuggestionRecord], Protocol):
    """Persistence contract for suggestion records."""

    def find_open_for_artifact(self, artifact_id: UUID) -> UpdateSuggestionRecord | None: ...

    def list_pending(self, contact_id: UUID) -> Sequence[UpdateSuggestionRecord]: ...


@runtime_checkable
class ContactRepository(Repository[Contact], Protocol):
    """Persistence contract for contacts."""
