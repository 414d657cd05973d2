"""Artifact ingest and lifecycle endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, status

from cultivate.ui.dependencies import Services, dispatch_signals
from cultivate.ui.schemas import (
    ArtifactCreate,
    ArtifactResponse,
    ReprocessResponse,
    TranscriptionCompleted,
    TranscriptionFailed,
)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_artifact(body: ArtifactCreate, services: Services) -> ArtifactResponse:
    artifact = services.orchestrator.ingest(
        contact_id=body.contact_id,
        artifact_type=body.type,
        content=body.content,
        metadata=body.metadata,
    )
    return ArtifactResponse.from_domain(artifact)


@router.get("/{artifact_id}")
def get_artifact(artifact_id: UUID, services: Services) -> ArtifactResponse:
    return ArtifactResponse.from_domain(services.orchestrator.get(artifact_id))


@router.post("/{artifact_id}/transcription-started")
def transcription_started(artifact_id: UUID, services: Services) -> ArtifactResponse:
    return ArtifactResponse.from_domain(
        services.orchestrator.mark_transcription_started(artifact_id)
    )


@router.post("/{artifact_id}/transcription-complete")
def transcription_complete(
    artifact_id: UUID,
    body: TranscriptionCompleted,
    services: Services,
    background_tasks: BackgroundTasks,
) -> ArtifactResponse:
    artifact = services.orchestrator.mark_transcription_completed(
        artifact_id, body.transcript_text
    )
    dispatch_signals(services, background_tasks)
    return ArtifactResponse.from_domain(artifact)


@router.post("/{artifact_id}/transcription-failed")
def transcription_failed(
    artifact_id: UUID, body: TranscriptionFailed, services: Services
) -> ArtifactResponse:
    return ArtifactResponse.from_domain(
        services.orchestrator.mark_transcription_failed(artifact_id, body.error)
    )


@router.post("/{artifact_id}/parse")
def request_parse(
    artifact_id: UUID, services: Services, background_tasks: BackgroundTasks
) -> ReprocessResponse:
    artifact = services.orchestrator.request_parse(artifact_id)
    dispatch_signals(services, background_tasks)
    return ReprocessResponse(artifact_id=artifact.id, ai_parsing_status=artifact.ai_parsing_status)


@router.post("/{artifact_id}/reprocess")
def reprocess(
    artifact_id: UUID, services: Services, background_tasks: BackgroundTasks
) -> ReprocessResponse:
    artifact = services.orchestrator.reprocess(artifact_id)
    dispatch_signals(services, background_tasks)
    return ReprocessResponse(artifact_id=artifact.id, ai_parsing_status=artifact.ai_parsing_status)
