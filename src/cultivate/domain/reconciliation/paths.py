"""Field path parsing for contact documents.

Both ``family_members.0.name`` and ``family_members[0].name`` address the same
value. Numeric segments are list indexes; everything else is a mapping key.
"""

from __future__ import annotations

import re

from cultivate.domain.errors import PathError

type Segment = str | int
type FieldPath = tuple[Segment, ...]

_PART_RE = re.compile(r"^(?P<key>[^\[\]]*)(?P<indexes>(?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")


def parse_path(field_path: str) -> FieldPath:
    if not field_path or not field_path.strip():
        raise PathError(field_path, "empty path")

    segments: list[Segment] = []
    for part in field_path.split("."):
        match = _PART_RE.match(part)
        if match is None:
            raise PathError(field_path, f"malformed segment {part!r}")
        key = match.group("key")
        indexes = [int(index) for index in _INDEX_RE.findall(match.group("indexes"))]
        if not key and not indexes:
            raise PathError(field_path, "empty segment")
        if key:
            segments.append(int(key) if key.isdigit() else key)
        segments.extend(indexes)

    return tuple(segments)

