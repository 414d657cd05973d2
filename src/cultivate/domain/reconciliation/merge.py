"""Single-field merge with snapshot-based conflict detection."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from cultivate.domain.errors import MergeConflict, PathError
from cultivate.domain.model import SuggestionAction

from .paths import parse_path

if TYPE_CHECKING:
    from .paths import FieldPath, Segment

_MISSING = object()


def merge(
    fields: Mapping[str, Any],
    field_path: str,
    action: SuggestionAction,
    snapshot: Any,
    new_value: Any,
) -> dict[str, Any]:
    """Return a copy of ``fields`` with one entry applied.

    The live value at ``field_path`` (``None`` when absent) must deep-equal
    ``snapshot``, otherwise ``MergeConflict`` is raised and nothing changes.
    """

    segments = parse_path(field_path)
    result: dict[str, Any] = copy.deepcopy(dict(fields))

    live = _lookup(result, segments)
    observed = None if live is _MISSING else live
    if not deep_equal(observed, snapshot):
        raise MergeConflict(field_path, expected=snapshot, actual=observed)

    value = copy.deepcopy(new_value)
    if action is SuggestionAction.ADD:
        parent = _ensure_parent(result, segments, field_path)
        _add(parent, segments[-1], live, value, field_path)
    elif action is SuggestionAction.UPDATE:
        if live is _MISSING:
            raise PathError(field_path, "nothing to update")
        _assign(_existing_parent(result, segments), segments[-1], value)
    elif action is SuggestionAction.REMOVE:
        if live is _MISSING:
            raise PathError(field_path, "nothing to remove")
        _remove(_existing_parent(result, segments), segments[-1], live, value, field_path)
        _prune_empty_parents(result, segments)
    else:
        raise PathError(field_path, f"unsupported action {action!r}")

    return result


def read_value(fields: Mapping[str, Any], field_path: str) -> Any:
    """Live value at ``field_path``, ``None`` when the path does not resolve."""

    value = _lookup(dict(fields), parse_path(field_path))
    return None if value is _MISSING else value


def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans apart from numbers."""

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right, strict=True))
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False
    return left == right


def _child(container: Any, segment: Segment) -> Any:
    if isinstance(container, dict):
        key = str(segment) if isinstance(segment, int) else segment
        return container.get(key, _MISSING)
    if isinstance(container, list) and isinstance(segment, int):
        return container[segment] if segment < len(container) else _MISSING
    return _MISSING


def _lookup(root: dict[str, Any], segments: FieldPath) -> Any:
    current: Any = root
    for segment in segments:
        current = _child(current, segment)
        if current is _MISSING:
            return _MISSING
    return current


def _existing_parent(root: dict[str, Any], segments: FieldPath) -> Any:
    # only reached once the live value was found, so the parent exists
    return _lookup(root, segments[:-1])


def _ensure_parent(root: dict[str, Any], segments: FieldPath, field_path: str) -> Any:
    current: Any = root
    for position, segment in enumerate(segments[:-1]):
        child = _child(current, segment)
        if child is _MISSING:
            child = [] if isinstance(segments[position + 1], int) else {}
            _insert_container(current, segment, child, field_path)
        elif not isinstance(child, (dict, list)):
            raise PathError(field_path, f"segment {segment!r} is not a container")
        current = child
    return current


def _insert_container(parent: Any, segment: Segment, child: Any, field_path: str) -> None:
    if isinstance(parent, dict):
        parent[str(segment) if isinstance(segment, int) else segment] = child
    elif isinstance(parent, list) and segment == len(parent):
        parent.append(child)
    else:
        raise PathError(field_path, f"cannot create {segment!r}")


def _assign(parent: Any, segment: Segment, value: Any) -> None:
    if isinstance(parent, dict):
        parent[str(segment) if isinstance(segment, int) else segment] = value
    else:
        parent[segment] = value


def _add(parent: Any, segment: Segment, live: Any, value: Any, field_path: str) -> None:
    if isinstance(live, list):
        live.append(value)
        return
    if isinstance(parent, list):
        if not isinstance(segment, int) or segment > len(parent):
            raise PathError(field_path, "index out of range")
        parent.insert(segment, value)
        return
    if isinstance(parent, dict):
        # add on an existing scalar replaces it
        _assign(parent, segment, value)
        return
    raise PathError(field_path, "parent is not a container")


def _remove(parent: Any, segment: Segment, live: Any, value: Any, field_path: str) -> None:
    if isinstance(live, list) and value is not None:
        for index, item in enumerate(live):
            if deep_equal(item, value):
                del live[index]
                return
        raise PathError(field_path, "no matching element to remove")
    if isinstance(parent, dict):
        del parent[str(segment) if isinstance(segment, int) else segment]
    else:
        del parent[segment]


def _prune_empty_parents(root: dict[str, Any], segments: FieldPath) -> None:
    # drop containers emptied by a remove, up to but excluding the root
    for depth in range(len(segments) - 1, 0, -1):
        container = _lookup(root, segments[:depth])
        if container is _MISSING or container:
            return
        parent = _lookup(root, segments[: depth - 1])
        segment = segments[depth - 1]
        if isinstance(parent, dict):
            del parent[str(segment) if isinstance(segment, int) else segment]
        else:
            del parent[segment]
