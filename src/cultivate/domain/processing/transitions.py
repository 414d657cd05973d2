"""Explicit transition table for the artifact status columns.

Each named transition lists the statuses it may start from. The orchestrator
checks the guard against the loaded row and then writes the target through a
conditional update on the same set of source statuses, so a concurrent writer
that got there first makes the update miss instead of being overwritten.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

from cultivate.domain.errors import StateConflict
from cultivate.domain.model import ParsingStatus, TranscriptionStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cultivate.domain.model import Artifact


class TransitionName(StrEnum):
    START_TRANSCRIPTION = "start_transcription"
    COMPLETE_TRANSCRIPTION = "complete_transcription"
    FAIL_TRANSCRIPTION = "fail_transcription"
    REQUEST_PARSE = "request_parse"
    REPROCESS = "reprocess"
    BEGIN_PARSE = "begin_parse"
    COMPLETE_PARSE = "complete_parse"
    FAIL_PARSE = "fail_parse"


@dataclass(frozen=True, slots=True)
class StatusTransition:
    column: str
    sources: frozenset[TranscriptionStatus] | frozenset[ParsingStatus]
    target: TranscriptionStatus | ParsingStatus

    def allows(self, artifact: Artifact) -> bool:
        return getattr(artifact, self.column) in self.sources

    def guard(self, artifact: Artifact, name: TransitionName) -> None:
        current = getattr(artifact, self.column)
        if current not in self.sources:
            raise StateConflict(
                f"Cannot {name.replace('_', ' ')} for artifact {artifact.id}: "
                f"{self.column} is {current}"
            )

    @property
    def expected(self) -> dict[str, object]:
        return {self.column: self.sources}

    @property
    def changes(self) -> dict[str, object]:
        return {self.column: self.target}


def _transcription(
    sources: set[TranscriptionStatus], target: TranscriptionStatus
) -> StatusTransition:
    return StatusTransition("transcription_status", frozenset(sources), target)


def _parsing(sources: set[ParsingStatus], target: ParsingStatus) -> StatusTransition:
    return StatusTransition("ai_parsing_status", frozenset(sources), target)


TRANSITIONS: Mapping[TransitionName, StatusTransition] = MappingProxyType(
    {
        TransitionName.START_TRANSCRIPTION: _transcription(
            {TranscriptionStatus.PENDING, TranscriptionStatus.FAILED},
            TranscriptionStatus.PROCESSING,
        ),
        TransitionName.COMPLETE_TRANSCRIPTION: _transcription(
            {TranscriptionStatus.PROCESSING}, TranscriptionStatus.COMPLETED
        ),
        TransitionName.FAIL_TRANSCRIPTION: _transcription(
            {TranscriptionStatus.PROCESSING}, TranscriptionStatus.FAILED
        ),
        TransitionName.REQUEST_PARSE: _parsing(
            {ParsingStatus.NONE, ParsingStatus.FAILED}, ParsingStatus.PENDING
        ),
        TransitionName.REPROCESS: _parsing(
            {ParsingStatus.NONE, ParsingStatus.FAILED, ParsingStatus.COMPLETED},
            ParsingStatus.PENDING,
        ),
        TransitionName.BEGIN_PARSE: _parsing({ParsingStatus.PENDING}, ParsingStatus.PROCESSING),
        TransitionName.COMPLETE_PARSE: _parsing(
            {ParsingStatus.PROCESSING}, ParsingStatus.COMPLETED
        ),
        TransitionName.FAIL_PARSE: _parsing({ParsingStatus.PROCESSING}, ParsingStatus.FAILED),
    }
)


def transition(name: TransitionName) -> StatusTransition:
    return TRANSITIONS[name]
