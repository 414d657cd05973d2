"""Error taxonomy shared by every pipeline component.

Validation and state errors are raised synchronously to the caller. Upstream
failures are recorded on the affected row by the component that observed them
and are not propagated to unrelated stages. Merge conflicts and path errors are
reported per field by the reconciliation engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class PipelineError(Exception):
    """Base class for errors raised by the pipeline core."""


class ValidationError(PipelineError):
    """Malformed input or an unknown field path."""


class InvalidStateError(PipelineError):
    """Lifecycle preconditions for an operation are not met."""


class NotFoundError(PipelineError):
    """A referenced artifact, suggestion, or contact does not exist."""

    def __init__(self, entity: str, entity_id: UUID) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class StateConflict(PipelineError):
    """A compare-and-swap precondition no longer holds."""


class UpstreamFailure(PipelineError):
    """Transcription or intelligence capability failed or timed out."""


class MergeConflict(PipelineError):
    """The live value at a field path diverged from the stored snapshot."""

    def __init__(self, field_path: str, *, expected: object, actual: object) -> None:
        super().__init__(f"Live value at {field_path!r} diverged from snapshot")
        self.field_path = field_path
        self.expected = expected
        self.actual = actual


class PathError(PipelineError):
    """A field path cannot be resolved for the requested action."""

    def __init__(self, field_path: str, reason: str) -> None:
        super().__init__(f"Cannot resolve {field_path!r}: {reason}")
        self.field_path = field_path
        self.reason = reason


class InternalError(PipelineError):
    """Persistence failure surfaced to the caller."""
