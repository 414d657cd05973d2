"""Per-type processing policies, adjustable from the environment."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from cultivate.domain.model import ArtifactType
from cultivate.domain.processing import DEFAULT_TYPE_POLICIES

from .env import env_list
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cultivate.domain.processing import ArtifactTypePolicy


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    policies: Mapping[ArtifactType, ArtifactTypePolicy] = field(
        default_factory=lambda: DEFAULT_TYPE_POLICIES
    )


def get_pipeline_config() -> PipelineConfig:
    """Apply ``CULTIVATE_DISABLED_TYPES`` and ``CULTIVATE_ENABLED_TYPES`` overrides."""

    policies = dict(DEFAULT_TYPE_POLICIES)
    for name, enabled in (
        *((name, False) for name in env_list("CULTIVATE_DISABLED_TYPES")),
        *((name, True) for name in env_list("CULTIVATE_ENABLED_TYPES")),
    ):
        try:
            artifact_type = ArtifactType(name)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown artifact type {name!r}") from exc
        policies[artifact_type] = replace(policies[artifact_type], enabled=enabled)
    return PipelineConfig(policies=MappingProxyType(policies))
