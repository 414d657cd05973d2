"""SQLAlchemy adapter package for the pipeline store."""

from __future__ import annotations

from .repositories import (
    SqlAlchemyArtifactRepository,
    SqlAlchemyContactRepository,
    SqlAlchemyRepository,
    SqlAlchemySuggestionRepository,
)
from .tables import artifact_table, contact_table, metadata, update_suggestion_table

__all__ = [
    "SqlAlchemyArtifactRepository",
    "SqlAlchemyContactRepository",
    "SqlAlchemyRepository",
    "SqlAlchemySuggestionRepository",
    "artifact_table",
    "contact_table",
    "metadata",
    "update_suggestion_table",
]
