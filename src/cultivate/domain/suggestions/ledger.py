"""Human review of suggestion records and the resulting contact merge."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cultivate.domain.errors import NotFoundError, StateConflict, ValidationError
from cultivate.domain.model import ReviewDecision, SuggestionStatus, utcnow
from cultivate.domain.reconciliation import FieldConflict, ReconciliationEngine

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence
    from uuid import UUID

    from cultivate.domain.model import Contact, UpdateSuggestionRecord
    from cultivate.domain.ports import PipelineUnitOfWork

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReviewOutcome:
    suggestion_id: UUID
    status: SuggestionStatus
    applied: tuple[str, ...] = ()
    conflicts: tuple[FieldConflict, ...] = field(default_factory=tuple[FieldConflict, ...])


def effective_selections(
    record: UpdateSuggestionRecord, selections: Mapping[str, bool]
) -> dict[str, bool]:
    """Every field path defaults to selected; explicit choices override."""

    unknown = [path for path in selections if path not in record.field_paths]
    if unknown:
        raise ValidationError(f"Unknown field paths in selections: {', '.join(unknown)}")
    invalid = [path for path, value in selections.items() if not isinstance(value, bool)]
    if invalid:
        raise ValidationError(f"Selections must be booleans: {', '.join(invalid)}")
    return {path: selections.get(path, True) for path in record.field_paths}


class SuggestionLedger:
    """Review decisions over suggestion records.

    The contact write and the record status write share one transaction and
    are each conditional: the contact on its version, the record on still being
    pending.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], PipelineUnitOfWork],
        engine: ReconciliationEngine | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._engine = engine or ReconciliationEngine()

    def get(self, suggestion_id: UUID) -> UpdateSuggestionRecord:
        with self._uow_factory() as uow:
            return _load(uow, suggestion_id)

    def list_pending(self, contact_id: UUID) -> Sequence[UpdateSuggestionRecord]:
        with self._uow_factory() as uow:
            if uow.repositories.contacts.get(contact_id) is None:
                raise NotFoundError("Contact", contact_id)
            return list(uow.repositories.suggestions.list_pending(contact_id))

    def mark_viewed(self, suggestion_id: UUID) -> UpdateSuggestionRecord:
        with self._uow_factory() as uow:
            record = _load(uow, suggestion_id)
            if record.viewed_at is not None:
                return record
            viewed_at = utcnow()
            if uow.repositories.suggestions.update_with_expected(
                record.id, expected={"viewed_at": None}, changes={"viewed_at": viewed_at}
            ):
                uow.commit()
                record.viewed_at = viewed_at
                record.version += 1
                return record
        return self.get(suggestion_id)

    def review(
        self,
        suggestion_id: UUID,
        decision: ReviewDecision,
        selections: Mapping[str, bool] | None = None,
    ) -> ReviewOutcome:
        chosen = dict(selections or {})
        with self._uow_factory() as uow:
            record = _load(uow, suggestion_id)
            if record.status.is_terminal:
                raise StateConflict(f"Suggestion {record.id} is already {record.status}")
            effective = effective_selections(record, chosen)
            now = utcnow()

            if decision is not ReviewDecision.APPROVE and _is_mixed(chosen):
                # a mixed selection outranks reject and skip but merges nothing
                outcome = ReviewOutcome(record.id, SuggestionStatus.PARTIAL)
                changes: dict[str, Any] = {
                    "status": outcome.status,
                    "reviewed_at": now,
                    "user_selections": effective,
                }
            elif decision is ReviewDecision.REJECT:
                outcome = ReviewOutcome(record.id, SuggestionStatus.REJECTED)
                changes = {
                    "status": outcome.status,
                    "reviewed_at": now,
                    "user_selections": dict.fromkeys(record.field_paths, False),
                }
            elif decision is ReviewDecision.SKIP:
                outcome = ReviewOutcome(record.id, SuggestionStatus.SKIPPED)
                changes = {"status": outcome.status, "dismissed_at": now}
            else:
                outcome = self._approve(uow, record, effective)
                changes = {
                    "status": outcome.status,
                    "reviewed_at": now,
                    "user_selections": effective,
                    "applied_at": now if outcome.applied else None,
                }

            written = uow.repositories.suggestions.update_with_expected(
                record.id, expected={"status": SuggestionStatus.PENDING}, changes=changes
            )
            if not written:
                raise StateConflict(f"Suggestion {record.id} was reviewed concurrently")
            uow.commit()

        log.info(
            f"Reviewed suggestion {suggestion_id}: decision={decision}, status={outcome.status}, "
            f"applied={len(outcome.applied)}, conflicts={len(outcome.conflicts)}"
        )
        return outcome

    def _approve(
        self,
        uow: PipelineUnitOfWork,
        record: UpdateSuggestionRecord,
        effective: dict[str, bool],
    ) -> ReviewOutcome:
        selected = [path for path, chosen in effective.items() if chosen]
        if not selected:
            return ReviewOutcome(record.id, SuggestionStatus.REJECTED)

        contact = uow.repositories.contacts.get(record.contact_id)
        if contact is None:
            raise NotFoundError("Contact", record.contact_id)

        result = self._engine.apply(contact.fields, record.entries, selected)
        if result.applied:
            _write_contact(uow, contact, result.fields, result.applied, record.artifact_id)

        partial = not all(effective.values()) or bool(result.conflicts)
        return ReviewOutcome(
            record.id,
            SuggestionStatus.PARTIAL if partial else SuggestionStatus.APPROVED,
            applied=tuple(result.applied),
            conflicts=tuple(result.conflicts),
        )


def _is_mixed(selections: Mapping[str, bool]) -> bool:
    return any(selections.values()) and not all(selections.values())


def _load(uow: PipelineUnitOfWork, suggestion_id: UUID) -> UpdateSuggestionRecord:
    record = uow.repositories.suggestions.get(suggestion_id)
    if record is None:
        raise NotFoundError("Suggestion", suggestion_id)
    return record


def _write_contact(
    uow: PipelineUnitOfWork,
    contact: Contact,
    fields: dict[str, Any],
    applied: Sequence[str],
    artifact_id: UUID,
) -> None:
    sources = dict(contact.field_sources)
    for field_path in applied:
        sources[field_path] = str(artifact_id)
    written = uow.repositories.contacts.update_with_expected(
        contact.id,
        expected={"version": contact.version},
        changes={"fields": fields, "field_sources": sources, "updated_at": utcnow()},
    )
    if not written:
        raise StateConflict(f"Contact {contact.id} changed during review")
