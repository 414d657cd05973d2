from __future__ import annotations

from cultivate.domain.model import SuggestionAction
from cultivate.domain.reconciliation import ReconciliationEngine
from tests.helpers.pipeline import entry


def test_conflicting_path_does_not_block_sibling_paths() -> None:
    fields = {"title": "Manager", "company": "Acme"}
    entries = [
        entry("title", "CTO", current_value="Engineer"),
        entry("company", "Globex", current_value="Acme"),
    ]

    result = ReconciliationEngine().apply(fields, entries, {"title", "company"})

    assert result.applied == ["company"]
    assert [conflict.field_path for conflict in result.conflicts] == ["title"]
    assert result.fields == {"title": "Manager", "company": "Globex"}
    assert fields == {"title": "Manager", "company": "Acme"}


def test_entries_for_same_path_apply_in_order() -> None:
    entries = [
        entry("interests", "chess", current_value=["golf"], action=SuggestionAction.ADD),
        entry("interests", "tennis", current_value=["golf"], action=SuggestionAction.ADD),
    ]

    result = ReconciliationEngine().apply({"interests": ["golf"]}, entries, {"interests"})

    assert result.applied == ["interests"]
    assert result.fields == {"interests": ["golf", "chess", "tennis"]}


def test_failure_inside_a_group_leaves_the_whole_path_untouched() -> None:
    entries = [
        entry("interests", "chess", current_value=["golf"], action=SuggestionAction.ADD),
        entry("interests", "rowing", current_value=["golf"], action=SuggestionAction.REMOVE),
    ]

    result = ReconciliationEngine().apply({"interests": ["golf"]}, entries, {"interests"})

    assert result.applied == []
    assert [conflict.field_path for conflict in result.conflicts] == ["interests"]
    assert result.fields == {"interests": ["golf"]}


def test_unselected_paths_are_ignored() -> None:
    entries = [
        entry("title", "CTO", current_value="Engineer"),
        entry("company", "Globex", current_value="Acme"),
    ]

    result = ReconciliationEngine().apply(
        {"title": "Engineer", "company": "Acme"}, entries, {"title"}
    )

    assert result.applied == ["title"]
    assert result.conflicts == []
    assert result.fields == {"title": "CTO", "company": "Acme"}


def test_path_error_is_reported_as_conflict() -> None:
    entries = [entry("title", "CTO", current_value=None)]

    result = ReconciliationEngine().apply({}, entries, {"title"})

    assert result.applied == []
    assert result.conflicts[0].field_path == "title"
    assert "nothing to update" in result.conflicts[0].reason
