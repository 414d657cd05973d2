"""Artifact lifecycle: per-type policies, transition table and orchestrator."""

from __future__ import annotations

from .orchestrator import ProcessingOrchestrator, load_artifact, write_transition
from .policy import DEFAULT_TYPE_POLICIES, ArtifactTypePolicy, ensure_parseable, policy_for
from .transitions import TRANSITIONS, StatusTransition, TransitionName, transition

__all__ = [
    "DEFAULT_TYPE_POLICIES",
    "TRANSITIONS",
    "ArtifactTypePolicy",
    "ProcessingOrchestrator",
    "StatusTransition",
    "TransitionName",
    "ensure_parseable",
    "load_artifact",
    "policy_for",
    "transition",
    "write_transition",
]
