"""Domain port definitions for adapters."""

from __future__ import annotations

from .intelligence import CandidateUpdate, IntelligenceCapability, ParseRequest, Transcriber
from .persistence import ArtifactRepository, ContactRepository, Repository, SuggestionRepository
from .signals import ParseRequested, ParseRequestedHandler, SignalBus
from .unit_of_work import (
    PipelineRepositories,
    PipelineUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArtifactRepository",
    "CandidateUpdate",
    "ContactRepository",
    "IntelligenceCapability",
    "ParseRequest",
    "ParseRequested",
    "ParseRequestedHandler",
    "PipelineRepositories",
    "PipelineUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "SignalBus",
    "SuggestionRepository",
    "Transcriber",
    "UnitOfWork",
]
