"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cultivate import __version__
from cultivate.ui.schemas import HealthResponse

router = APIRouter()


@router.get("/health")
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)
