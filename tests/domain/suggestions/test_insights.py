from __future__ import annotations

from cultivate.domain.model import Artifact, ArtifactType, SuggestionAction
from cultivate.domain.suggestions import meeting_insights
from tests.helpers.pipeline import USER_ID, entry, random_id


def _meeting(**metadata: object) -> Artifact:
    return Artifact(
        contact_id=random_id(),
        user_id=USER_ID,
        type=ArtifactType.MEETING,
        content="sync",
        metadata=dict(metadata),
    )


def test_new_parts_replace_old_ones_and_missing_parts_are_kept() -> None:
    artifact = _meeting(
        insights={"summary": "old summary", "key_topics": ["budget"]}, room="4B"
    )

    metadata = meeting_insights(
        artifact,
        [
            entry("next_steps", "Book follow-up", action=SuggestionAction.ADD),
            entry("opportunities_identified", "Expansion", action=SuggestionAction.ADD),
        ],
    )

    assert metadata is not None
    assert metadata["room"] == "4B"
    assert metadata["insights"]["summary"] == "old summary"
    assert metadata["insights"]["key_topics"] == ["Expansion"]
    assert metadata["insights"]["action_items"] == [
        {
            "id": f"{artifact.id}-0",
            "description": "Book follow-up",
            "priority": "medium",
            "completed": False,
        }
    ]
    assert artifact.metadata["insights"] == {"summary": "old summary", "key_topics": ["budget"]}


def test_next_steps_update_is_not_an_action_item() -> None:
    artifact = _meeting()

    assert meeting_insights(artifact, [entry("next_steps", "Call back")]) is None


def test_unrelated_entries_produce_nothing() -> None:
    assert meeting_insights(_meeting(), [entry("title", "CTO")]) is None
    assert meeting_insights(_meeting(), []) is None


def test_only_meetings_carry_insights() -> None:
    note = Artifact(
        contact_id=random_id(), user_id=USER_ID, type=ArtifactType.NOTE, content="n"
    )

    assert meeting_insights(note, [entry("summary_of_conversation", "hello")]) is None
