"""Audio transcription through the OpenAI transcription endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PayloadValidationError

from cultivate.config.openai import OpenAIConfig, get_openai_config
from cultivate.domain.errors import UpstreamFailure
from cultivate.domain.ports import Transcriber

from .client import _default_client_factory, raise_for_upstream_error
from .schema import TranscriptionResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from cultivate.adapters.http_resilience import ResilientClient
    from cultivate.config.http_resilience import ResilienceConfig


@dataclass(slots=True)
class OpenAITranscriber:
    config: OpenAIConfig = field(default_factory=get_openai_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def transcribe(self, audio: bytes, *, filename: str) -> str:
        return asyncio.run(self._transcribe_async(audio, filename=filename))

    async def _transcribe_async(self, audio: bytes, *, filename: str) -> str:
        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                async with self.client_factory(self.config.resilience) as client:
                    response = await client.post(
                        "audio/transcriptions",
                        data={"model": self.config.transcribe_model},
                        files={"file": (filename, audio)},
                        headers={"Authorization": f"Bearer {self.config.api_key}"},
                    )
        except TimeoutError as exc:
            raise UpstreamFailure(
                f"Transcription timed out after {self.config.timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"Transcription request failed: {exc}") from exc

        raise_for_upstream_error(response, operation="transcription")
        try:
            text = TranscriptionResponse.model_validate(response.json()).text
        except (ValueError, PayloadValidationError) as exc:
            raise UpstreamFailure("Unexpected transcription payload") from exc
        if not text.strip():
            raise UpstreamFailure("Transcription returned no text")
        return text


if TYPE_CHECKING:
    _transcriber_check: Transcriber = OpenAITranscriber()
