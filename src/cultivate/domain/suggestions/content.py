"""Per-type rendering of the text handed to the intelligence capability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cultivate.domain.model import ArtifactType

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cultivate.domain.model import Artifact, Contact


def render_content(artifact: Artifact, contact: Contact) -> str:
    match artifact.type:
        case ArtifactType.VOICE_MEMO:
            return artifact.transcription or ""
        case ArtifactType.EMAIL:
            return _render_email(artifact, contact)
        case ArtifactType.LINKEDIN_POST:
            return _render_linkedin_post(artifact.metadata, contact)
        case ArtifactType.LINKEDIN_PROFILE:
            return _render_linkedin_profile(artifact.metadata, contact)
        case _:
            return artifact.analysis_text


def email_direction(metadata: Mapping[str, Any], contact: Contact) -> str:
    """``from_contact``, ``to_contact`` or ``unclear`` relative to the contact."""

    needle = str(contact.fields.get("email") or contact.fields.get("name") or "").lower()
    if not needle:
        return "unclear"

    sender = _address(metadata.get("from")).lower()
    recipients = ", ".join(_address(item) for item in metadata.get("to") or []).lower()
    if needle in sender:
        return "from_contact"
    if needle in recipients:
        return "to_contact"
    return "unclear"


_DIRECTION_CONTEXT = {
    "from_contact": (
        "EMAIL DIRECTION: This email was SENT BY the contact ({name}). "
        'First person statements ("I", "my", "we") refer to the contact.'
    ),
    "to_contact": (
        "EMAIL DIRECTION: This email was SENT TO the contact ({name}) by someone else. "
        'First person statements refer to the sender, not the contact. Only extract '
        "information that is explicitly about the contact."
    ),
    "unclear": (
        "EMAIL DIRECTION: Unclear. Only extract information that is explicitly about "
        "the contact."
    ),
}


def _render_email(artifact: Artifact, contact: Contact) -> str:
    metadata = artifact.metadata
    direction = _DIRECTION_CONTEXT[email_direction(metadata, contact)].format(
        name=contact.display_name
    )
    recipients = ", ".join(_address(item) for item in metadata.get("to") or [])
    return (
        f"Subject: {metadata.get('subject', '')}\n\n"
        f"From: {_address(metadata.get('from'))}\n"
        f"To: {recipients}\n"
        f"{direction}\n\n"
        f"Content:\n{artifact.content or ''}"
    )


def _render_linkedin_post(metadata: Mapping[str, Any], contact: Contact) -> str:
    author = metadata.get("author") or "unknown author"
    if metadata.get("is_author"):
        authorship = f"This post was authored by the contact ({contact.display_name})."
    else:
        authorship = (
            f"This post was authored by {author}, not the contact. Only extract "
            "information that is explicitly about the contact."
        )
    engagement = metadata.get("engagement") or {}
    return (
        f"LinkedIn {metadata.get('post_type') or 'post'} by {author}\n"
        f"Posted on: {metadata.get('posted_at') or 'unknown'}\n"
        f"POST AUTHORSHIP: {authorship}\n\n"
        f"Post Content:\n{metadata.get('content') or ''}\n\n"
        f"Hashtags: {', '.join(map(str, metadata.get('hashtags') or []))}\n"
        f"Mentions: {', '.join(map(str, metadata.get('mentions') or []))}\n"
        f"Engagement: likes={engagement.get('likes', 0)}, "
        f"comments={engagement.get('comments', 0)}, shares={engagement.get('shares', 0)}"
    )


def _render_linkedin_profile(metadata: Mapping[str, Any], contact: Contact) -> str:
    experience = "\n".join(
        f"- {item.get('title', '')} at {item.get('company', '')} "
        f"({item.get('duration') or 'Present'})"
        for item in metadata.get("experience") or []
    )
    education = "\n".join(
        f"- {item.get('degree', '')} from {item.get('school', '')} ({item.get('year') or 'N/A'})"
        for item in metadata.get("education") or []
    )
    certifications = ", ".join(
        str(item.get("name", "")) for item in metadata.get("certifications") or []
    )
    return (
        f"LinkedIn Profile for {contact.display_name}\n\n"
        f"Headline: {metadata.get('headline', '')}\n\n"
        f"About Section:\n{metadata.get('about', '')}\n\n"
        f"Experience:\n{experience}\n\n"
        f"Education:\n{education}\n\n"
        f"Skills: {', '.join(map(str, metadata.get('skills') or []))}\n\n"
        f"Certifications: {certifications}"
    )


def _address(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("email") or value.get("name") or "")
    return str(value or "")
