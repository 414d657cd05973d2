"""In-process delivery of parse-requested signals."""

from __future__ import annotations

from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING

from cultivate.domain.ports import SignalBus

if TYPE_CHECKING:
    from cultivate.domain.ports import ParseRequested, ParseRequestedHandler

log = getLogger(__name__)


class InProcessSignalBus:
    """Calls every subscriber synchronously at publish time."""

    def __init__(self) -> None:
        self._handlers: list[ParseRequestedHandler] = []

    def subscribe(self, handler: ParseRequestedHandler) -> None:
        self._handlers.append(handler)

    def publish(self, signal: ParseRequested) -> None:
        log.debug("Dispatching parse request for %s", signal.artifact_id)
        for handler in self._handlers:
            handler(signal)


class BufferedSignalBus:
    """Holds published signals until they are taken and delivered.

    The HTTP layer takes them per request and delivers them after the response
    went out, so a parse never runs inside the request that triggered it.
    """

    def __init__(self) -> None:
        self._handlers: list[ParseRequestedHandler] = []
        self._pending: list[ParseRequested] = []
        self._lock = Lock()

    def subscribe(self, handler: ParseRequestedHandler) -> None:
        self._handlers.append(handler)

    def publish(self, signal: ParseRequested) -> None:
        with self._lock:
            self._pending.append(signal)

    def take(self) -> list[ParseRequested]:
        with self._lock:
            taken, self._pending = self._pending, []
        return taken

    def deliver(self, signals: list[ParseRequested]) -> None:
        for signal in signals:
            for handler in self._handlers:
                handler(signal)


if TYPE_CHECKING:
    _in_process_check: SignalBus = InProcessSignalBus()
    _buffered_check: SignalBus = BufferedSignalBus()
