"""FastAPI application factory and error translation."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cultivate import __version__
from cultivate.adapters.signals import BufferedSignalBus
from cultivate.app import build_services
from cultivate.domain.errors import (
    InternalError,
    InvalidStateError,
    NotFoundError,
    PipelineError,
    StateConflict,
    UpstreamFailure,
    ValidationError,
)

from .routes import artifacts, contacts, health, suggestions
from .schemas import ErrorResponse

if TYPE_CHECKING:
    from cultivate.app import PipelineServices

log = getLogger(__name__)

STATUS_BY_ERROR: dict[type[PipelineError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StateConflict: status.HTTP_409_CONFLICT,
    UpstreamFailure: status.HTTP_502_BAD_GATEWAY,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: PipelineError) -> int:
    for error_type in type(exc).__mro__:
        code = STATUS_BY_ERROR.get(error_type)  # type: ignore[arg-type]
        if code is not None:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(error: str, detail: str) -> dict[str, str]:
    return ErrorResponse(error=error, detail=detail).model_dump()


async def _handle_pipeline_error(request: Request, exc: PipelineError) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        log.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content=_error_body(type(exc).__name__, str(exc)))


async def _handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    _ = request
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("ValidationError", detail),
    )


def create_app(services: PipelineServices | None = None) -> FastAPI:
    """Build the API. Parse runs triggered by a request happen after its response."""

    app = FastAPI(title="Cultivate", version=__version__)
    app.state.services = services or build_services(signals=BufferedSignalBus())

    app.exception_handler(PipelineError)(_handle_pipeline_error)
    app.exception_handler(RequestValidationError)(_handle_request_validation)

    app.include_router(health.router, tags=["Health"])
    app.include_router(artifacts.router, prefix="/artifacts", tags=["Artifacts"])
    app.include_router(suggestions.router, prefix="/suggestions", tags=["Suggestions"])
    app.include_router(contacts.router, prefix="/contacts", tags=["Contacts"])
    return app
