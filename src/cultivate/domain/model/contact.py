"""Contact aggregate addressed by dot/index field paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .base import Entity, utcnow

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Contact(Entity):
    """Nested contact document.

    ``fields`` holds everything a field path can address (``title``,
    ``professional_context.title``, ``family_members.0.name`` ...).
    ``field_sources`` remembers which artifact last wrote a path.
    """

    user_id: UUID
    fields: dict[str, Any] = field(default_factory=dict[str, Any])
    field_sources: dict[str, str] = field(default_factory=dict[str, str])
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def display_name(self) -> str:
        name = self.fields.get("name")
        return name if isinstance(name, str) and name else "Unknown"
