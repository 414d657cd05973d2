"""Meeting insights kept on the artifact itself once a parse completes."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from cultivate.domain.model import ArtifactType, SuggestionAction

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cultivate.domain.model import Artifact, SuggestionEntry

ACTION_ITEM_PATH = "next_steps"
TOPIC_PATHS = ("key_pain_points_discussed", "opportunities_identified")
SUMMARY_PATH = "summary_of_conversation"


def meeting_insights(
    artifact: Artifact, entries: Sequence[SuggestionEntry]
) -> dict[str, Any] | None:
    """Return the artifact metadata with an ``insights`` section folded in.

    Only meetings carry insights. Action items come from ``add`` entries on
    ``next_steps``, key topics from pain points and opportunities, and the
    summary from ``summary_of_conversation``. A part with nothing new keeps its
    previous value. ``None`` means the metadata stays as it is.
    """

    if artifact.type is not ArtifactType.MEETING or not entries:
        return None

    action_items = [
        {
            "id": f"{artifact.id}-{index}",
            "description": entry.suggested_value,
            "priority": "medium",
            "completed": False,
        }
        for index, entry in enumerate(
            entry
            for entry in entries
            if entry.field_path == ACTION_ITEM_PATH and entry.action is SuggestionAction.ADD
        )
    ]
    key_topics: list[Any] = []
    for entry in entries:
        if entry.field_path not in TOPIC_PATHS:
            continue
        value = entry.suggested_value
        key_topics.extend(value if isinstance(value, list) else [value])
    summary = next(
        (entry.suggested_value for entry in entries if entry.field_path == SUMMARY_PATH), None
    )

    if not action_items and not key_topics and not summary:
        return None

    metadata = copy.deepcopy(artifact.metadata)
    previous = metadata.get("insights")
    insights: dict[str, Any] = dict(previous) if isinstance(previous, dict) else {}
    if action_items:
        insights["action_items"] = action_items
    if key_topics:
        insights["key_topics"] = key_topics
    if summary:
        insights["summary"] = summary
    metadata["insights"] = insights
    return metadata
