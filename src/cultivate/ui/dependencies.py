"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import BackgroundTasks, Depends, Request

from cultivate.adapters.signals import BufferedSignalBus
from cultivate.app import PipelineServices


def get_services(request: Request) -> PipelineServices:
    return request.app.state.services


Services = Annotated[PipelineServices, Depends(get_services)]


def dispatch_signals(services: PipelineServices, background_tasks: BackgroundTasks) -> None:
    """Hand buffered parse requests to a background task that runs after the response."""

    bus = services.signals
    if not isinstance(bus, BufferedSignalBus):
        return
    signals = bus.take()
    if signals:
        background_tasks.add_task(bus.deliver, signals)
