"""Prompt text for contact update extraction."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from cultivate.domain.model import ArtifactType

if TYPE_CHECKING:
    from cultivate.domain.ports import ParseRequest

SYSTEM_PROMPT = (
    "You are an expert relationship intelligence analyst. You read material about a "
    "contact and propose precise, field-level updates to their profile. Respond with "
    "a JSON object only."
)

_CONTENT_DESCRIPTIONS = {
    ArtifactType.VOICE_MEMO: (
        "Voice Memo Transcription",
        "Extract all meaningful updates from this voice memo for the contact's profile.",
    ),
    ArtifactType.MEETING: (
        "Meeting Summary",
        "Focus on information shared during the meeting, decisions made and insights "
        "gained about the contact.",
    ),
    ArtifactType.EMAIL: (
        "Email Communication",
        "Pay close attention to the EMAIL DIRECTION context. Only extract information "
        "that is explicitly about the contact.",
    ),
    ArtifactType.LINKEDIN_PROFILE: (
        "LinkedIn Profile",
        "Extract career changes, skills, achievements and educational background.",
    ),
    ArtifactType.LINKEDIN_POST: (
        "LinkedIn Post",
        "Extract professional updates, achievements and interests revealed by the post.",
    ),
}

FIELD_PATH_GUIDE = """\
Field paths use dots for nesting and numeric segments (or [n]) for list items.
Direct fields: name, email, phone, title, company, location, linkedin_url, notes.
Personal context: personal_context.family.partner.name, personal_context.family.children,
personal_context.interests, personal_context.values, personal_context.milestones,
personal_context.hobbies, personal_context.travel_plans, personal_context.education.
Professional context: professional_context.current_role, professional_context.current_company,
professional_context.goals, professional_context.achievements, professional_context.skills,
professional_context.background.previous_companies, professional_context.projects_involved.
Use action "add" to append one item to a list field, "update" to replace a value and
"remove" to delete a value or one list item."""

RESPONSE_FORMAT = """\
Respond with {"contact_updates": [...]} where each item has:
- field_path: string
- action: "add" | "update" | "remove"
- suggested_value: the new value (or the list item to remove)
- confidence: number between 0.0 and 1.0
- reasoning: short explanation"""


def build_messages(request: ParseRequest) -> list[dict[str, str]]:
    description, focus = _CONTENT_DESCRIPTIONS.get(
        request.artifact_type,
        ("Content", "Extract all meaningful updates from this content for the contact's profile."),
    )
    user_prompt = (
        f"Contact Name: {request.contact_name}\n\n"
        f"Current Contact Record (JSON):\n"
        f"{json.dumps(dict(request.contact_fields), indent=2, default=str)}\n\n"
        f'{description}:\n"{request.content}"\n\n'
        f"INSTRUCTIONS:\n{focus}\n\n"
        f"{FIELD_PATH_GUIDE}\n\n"
        f"{RESPONSE_FORMAT}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
