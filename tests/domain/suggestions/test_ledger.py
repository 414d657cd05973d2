from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cultivate.domain.errors import NotFoundError, StateConflict, ValidationError
from cultivate.domain.model import ReviewDecision, SuggestionAction, SuggestionStatus
from cultivate.domain.suggestions import SuggestionLedger, effective_selections
from tests.helpers.pipeline import (
    entry,
    load_contact,
    load_suggestion,
    random_id,
    set_contact_field,
    store_contact,
    store_suggestion,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from cultivate.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
    from cultivate.domain.model import Contact, UpdateSuggestionRecord

    UowFactory = Callable[[], SqlAlchemyUnitOfWork]


@pytest.fixture
def ledger(sqlite_unit_of_work: UowFactory) -> SuggestionLedger:
    return SuggestionLedger(unit_of_work_factory=sqlite_unit_of_work)


@pytest.fixture
def contact(sqlite_unit_of_work: UowFactory) -> Contact:
    return store_contact(sqlite_unit_of_work, name="Ada", title="Engineer", interests=["golf"])


@pytest.fixture
def record(sqlite_unit_of_work: UowFactory, contact: Contact) -> UpdateSuggestionRecord:
    return store_suggestion(
        sqlite_unit_of_work,
        contact,
        [
            entry("title", "CTO", current_value="Engineer", confidence=0.9),
            entry(
                "interests",
                "chess",
                current_value=["golf"],
                action=SuggestionAction.ADD,
                confidence=0.6,
            ),
        ],
    )


def test_approve_applies_every_path(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(record.id, ReviewDecision.APPROVE)

    assert outcome.status is SuggestionStatus.APPROVED
    assert outcome.applied == ("title", "interests")
    assert outcome.conflicts == ()

    updated = load_contact(sqlite_unit_of_work, contact.id)
    assert updated.fields == {"name": "Ada", "title": "CTO", "interests": ["golf", "chess"]}
    assert updated.field_sources == {
        "title": str(record.artifact_id),
        "interests": str(record.artifact_id),
    }
    assert updated.version == contact.version + 1

    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.status is SuggestionStatus.APPROVED
    assert stored.user_selections == {"title": True, "interests": True}
    assert stored.reviewed_at is not None
    assert stored.applied_at is not None


def test_approve_with_diverged_field_is_partial(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    set_contact_field(sqlite_unit_of_work, contact.id, "title", "Manager")

    outcome = ledger.review(record.id, ReviewDecision.APPROVE)

    assert outcome.status is SuggestionStatus.PARTIAL
    assert outcome.applied == ("interests",)
    assert [conflict.field_path for conflict in outcome.conflicts] == ["title"]

    updated = load_contact(sqlite_unit_of_work, contact.id)
    assert updated.fields["title"] == "Manager"
    assert updated.fields["interests"] == ["golf", "chess"]
    assert "title" not in updated.field_sources

    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.status is SuggestionStatus.PARTIAL
    assert stored.applied_at is not None


def test_deselected_path_is_left_alone(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(
        record.id, ReviewDecision.APPROVE, {"title": True, "interests": False}
    )

    assert outcome.status is SuggestionStatus.PARTIAL
    assert outcome.applied == ("title",)

    updated = load_contact(sqlite_unit_of_work, contact.id)
    assert updated.fields["title"] == "CTO"
    assert updated.fields["interests"] == ["golf"]

    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.user_selections == {"title": True, "interests": False}


def test_approve_where_every_selection_conflicts_applies_nothing(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    set_contact_field(sqlite_unit_of_work, contact.id, "title", "Manager")
    set_contact_field(sqlite_unit_of_work, contact.id, "interests", ["rowing"])
    before = load_contact(sqlite_unit_of_work, contact.id)

    outcome = ledger.review(record.id, ReviewDecision.APPROVE)

    assert outcome.status is SuggestionStatus.PARTIAL
    assert outcome.applied == ()
    assert len(outcome.conflicts) == 2

    after = load_contact(sqlite_unit_of_work, contact.id)
    assert after.fields == before.fields
    assert after.version == before.version
    assert load_suggestion(sqlite_unit_of_work, record.id).applied_at is None


def test_approve_with_nothing_selected_is_a_rejection(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(
        record.id, ReviewDecision.APPROVE, {"title": False, "interests": False}
    )

    assert outcome.status is SuggestionStatus.REJECTED
    assert load_contact(sqlite_unit_of_work, contact.id).version == contact.version


def test_reject_never_touches_the_contact(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(record.id, ReviewDecision.REJECT)

    assert outcome.status is SuggestionStatus.REJECTED
    assert outcome.applied == ()

    after = load_contact(sqlite_unit_of_work, contact.id)
    assert after.fields == contact.fields
    assert after.version == contact.version

    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.status is SuggestionStatus.REJECTED
    assert stored.reviewed_at is not None
    assert stored.applied_at is None
    assert stored.user_selections == {"title": False, "interests": False}


def test_skip_dismisses_the_record(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(record.id, ReviewDecision.SKIP)

    assert outcome.status is SuggestionStatus.SKIPPED
    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.dismissed_at is not None
    assert stored.reviewed_at is None
    assert load_contact(sqlite_unit_of_work, contact.id).version == contact.version


@pytest.mark.parametrize(
    "decision", [ReviewDecision.APPROVE, ReviewDecision.REJECT, ReviewDecision.SKIP]
)
def test_reviewing_a_terminal_record_is_a_conflict(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
    decision: ReviewDecision,
) -> None:
    ledger.review(record.id, ReviewDecision.REJECT)

    with pytest.raises(StateConflict):
        ledger.review(record.id, decision)

    assert load_contact(sqlite_unit_of_work, contact.id).version == contact.version


def test_unknown_selection_key_is_rejected_before_any_write(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    record: UpdateSuggestionRecord,
) -> None:
    with pytest.raises(ValidationError, match="company"):
        ledger.review(record.id, ReviewDecision.APPROVE, {"company": True})

    assert load_suggestion(sqlite_unit_of_work, record.id).status is SuggestionStatus.PENDING


def test_review_of_unknown_record_is_not_found(ledger: SuggestionLedger) -> None:
    with pytest.raises(NotFoundError):
        ledger.review(random_id(), ReviewDecision.APPROVE)


def test_mark_viewed_is_set_once(
    ledger: SuggestionLedger, record: UpdateSuggestionRecord
) -> None:
    first = ledger.mark_viewed(record.id)
    second = ledger.mark_viewed(record.id)

    assert first.viewed_at is not None
    assert second.viewed_at == first.viewed_at
    assert second.status is SuggestionStatus.PENDING


def test_list_pending_excludes_reviewed_records(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
) -> None:
    other = store_suggestion(
        sqlite_unit_of_work, contact, [entry("company", "Globex", current_value=None)]
    )
    ledger.review(record.id, ReviewDecision.SKIP)

    assert [item.id for item in ledger.list_pending(contact.id)] == [other.id]


def test_list_pending_for_unknown_contact_is_not_found(ledger: SuggestionLedger) -> None:
    with pytest.raises(NotFoundError):
        ledger.list_pending(random_id())


def test_effective_selections_default_to_selected(record: UpdateSuggestionRecord) -> None:
    assert effective_selections(record, {"interests": False}) == {
        "title": True,
        "interests": False,
    }


def test_effective_selections_reject_non_boolean_values(record: UpdateSuggestionRecord) -> None:
    with pytest.raises(ValidationError):
        effective_selections(record, {"title": 1})  # type: ignore[dict-item]


@pytest.mark.parametrize(
    "selections",
    [
        None,
        {"title": True},
        {"title": True, "interests": True},
        {"title": False, "interests": False},
        {"title": True, "interests": False},
    ],
)
def test_reject_never_changes_the_contact_for_any_selections(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
    selections: dict[str, bool] | None,
) -> None:
    outcome = ledger.review(record.id, ReviewDecision.REJECT, selections)

    assert outcome.applied == ()
    after = load_contact(sqlite_unit_of_work, contact.id)
    assert after.fields == contact.fields
    assert after.field_sources == {}
    assert after.version == contact.version
    assert load_suggestion(sqlite_unit_of_work, record.id).applied_at is None


@pytest.mark.parametrize("decision", [ReviewDecision.REJECT, ReviewDecision.SKIP])
def test_mixed_selections_record_partial_without_merging(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    contact: Contact,
    record: UpdateSuggestionRecord,
    decision: ReviewDecision,
) -> None:
    outcome = ledger.review(record.id, decision, {"title": True, "interests": False})

    assert outcome.status is SuggestionStatus.PARTIAL
    assert outcome.applied == ()
    assert outcome.conflicts == ()

    assert load_contact(sqlite_unit_of_work, contact.id).version == contact.version
    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.status is SuggestionStatus.PARTIAL
    assert stored.reviewed_at is not None
    assert stored.applied_at is None
    assert stored.dismissed_at is None
    assert stored.user_selections == {"title": True, "interests": False}


def test_uniform_selections_keep_the_nominal_decision(
    ledger: SuggestionLedger,
    record: UpdateSuggestionRecord,
) -> None:
    outcome = ledger.review(record.id, ReviewDecision.SKIP, {"title": True})

    assert outcome.status is SuggestionStatus.SKIPPED


@pytest.fixture
def nested_record(
    sqlite_unit_of_work: UowFactory,
) -> tuple[Contact, UpdateSuggestionRecord]:
    contact = store_contact(
        sqlite_unit_of_work, name="Ada", professional_context={"title": "Engineer"}
    )
    record = store_suggestion(
        sqlite_unit_of_work,
        contact,
        [
            entry(
                "professional_context.title",
                "Senior Engineer",
                current_value="Engineer",
                confidence=0.82,
            )
        ],
    )
    return contact, record


def test_approve_updates_nested_title(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    nested_record: tuple[Contact, UpdateSuggestionRecord],
) -> None:
    contact, record = nested_record

    outcome = ledger.review(record.id, ReviewDecision.APPROVE)

    assert outcome.status is SuggestionStatus.APPROVED
    assert outcome.applied == ("professional_context.title",)
    updated = load_contact(sqlite_unit_of_work, contact.id)
    assert updated.fields["professional_context"] == {"title": "Senior Engineer"}
    stored = load_suggestion(sqlite_unit_of_work, record.id)
    assert stored.status is SuggestionStatus.APPROVED
    assert stored.applied_at is not None


def test_approve_reports_conflict_on_diverged_nested_title(
    ledger: SuggestionLedger,
    sqlite_unit_of_work: UowFactory,
    nested_record: tuple[Contact, UpdateSuggestionRecord],
) -> None:
    contact, record = nested_record
    set_contact_field(
        sqlite_unit_of_work, contact.id, "professional_context", {"title": "Staff Engineer"}
    )

    outcome = ledger.review(record.id, ReviewDecision.APPROVE)

    assert outcome.status is SuggestionStatus.PARTIAL
    assert outcome.applied == ()
    assert [conflict.field_path for conflict in outcome.conflicts] == [
        "professional_context.title"
    ]
    updated = load_contact(sqlite_unit_of_work, contact.id)
    assert updated.fields["professional_context"] == {"title": "Staff Engineer"}
