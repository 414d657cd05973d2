"""Explicit signals emitted by the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class ParseRequested:
    """An artifact's parsing status moved to pending."""

    artifact_id: UUID


type ParseRequestedHandler = Callable[[ParseRequested], None]


@runtime_checkable
class SignalBus(Protocol):
    """Delivers parse-requested signals once the triggering transaction committed."""

    def publish(self, signal: ParseRequested) -> None: ...

    def subscribe(self, handler: ParseRequestedHandler) -> None: ...
