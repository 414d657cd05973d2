"""Apply selected suggestion entries to a contact, one field path at a time."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cultivate.domain.errors import MergeConflict, PathError

from .merge import deep_equal, merge, read_value

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

    from cultivate.domain.model import SuggestionEntry

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldConflict:
    """A selected field path that could not be merged."""

    field_path: str
    reason: str


@dataclass(slots=True)
class MergeResult:
    fields: dict[str, Any]
    applied: list[str] = field(default_factory=list[str])
    conflicts: list[FieldConflict] = field(default_factory=list[FieldConflict])


class ReconciliationEngine:
    """Merges grouped entries into a working copy of the contact fields.

    Every entry of a path group is checked against the value the path held
    before the group started; a failure anywhere in the group leaves that path
    untouched and does not affect sibling paths.
    """

    def apply(
        self,
        fields: Mapping[str, Any],
        entries: Iterable[SuggestionEntry],
        selected_paths: Collection[str],
    ) -> MergeResult:
        groups: dict[str, list[SuggestionEntry]] = {}
        for entry in entries:
            if entry.field_path in selected_paths:
                groups.setdefault(entry.field_path, []).append(entry)

        result = MergeResult(fields=dict(fields))
        for field_path, group in groups.items():
            try:
                result.fields = self._apply_group(result.fields, field_path, group)
            except MergeConflict as exc:
                log.info("Conflict on %s: live value diverged from snapshot", field_path)
                result.conflicts.append(FieldConflict(field_path, str(exc)))
            except PathError as exc:
                log.info("Cannot apply %s: %s", field_path, exc.reason)
                result.conflicts.append(FieldConflict(field_path, str(exc)))
            else:
                result.applied.append(field_path)
        return result

    @staticmethod
    def _apply_group(
        fields: dict[str, Any], field_path: str, group: list[SuggestionEntry]
    ) -> dict[str, Any]:
        before = read_value(fields, field_path)
        working = fields
        for entry in group:
            if not deep_equal(before, entry.current_value):
                raise MergeConflict(field_path, expected=entry.current_value, actual=before)
            working = merge(
                working,
                field_path,
                entry.action,
                read_value(working, field_path),
                entry.suggested_value,
            )
        return working
