"""HTTP client for the OpenAI chat completions API."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError as PayloadValidationError

from cultivate.adapters.http_resilience import ResilientClient
from cultivate.config.openai import OpenAIConfig, get_openai_config
from cultivate.domain.errors import UpstreamFailure
from cultivate.domain.ports import CandidateUpdate, IntelligenceCapability

from .prompt import build_messages
from .schema import ChatCompletionResponse, ContactUpdatesPayload, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from cultivate.config.http_resilience import ResilienceConfig
    from cultivate.domain.ports import ParseRequest

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def raise_for_upstream_error(response: httpx.Response, *, operation: str) -> None:
    if response.status_code < 400:
        return
    try:
        message = ErrorResponse.model_validate(response.json()).error.message
    except (ValueError, PayloadValidationError):
        message = response.text[:200]
    log.error(f"OpenAI {operation} failed with HTTP {response.status_code}: {message}")
    raise UpstreamFailure(f"OpenAI {operation} failed ({response.status_code}): {message}")


@dataclass(slots=True)
class OpenAIIntelligence:
    """Intelligence capability backed by a JSON-mode chat completion.

    Each call is bounded by ``config.timeout_seconds``; expiry, transport
    errors and unusable payloads all surface as ``UpstreamFailure``.
    """

    config: OpenAIConfig = field(default_factory=get_openai_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def propose_updates(self, request: ParseRequest) -> list[CandidateUpdate]:
        return asyncio.run(self._propose_updates_async(request))

    async def _propose_updates_async(self, request: ParseRequest) -> list[CandidateUpdate]:
        body = {
            "model": self.config.parse_model,
            "messages": build_messages(request),
            "response_format": {"type": "json_object"},
            "temperature": 0.2,
        }
        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                async with self.client_factory(self.config.resilience) as client:
                    response = await client.post(
                        "chat/completions",
                        json=body,
                        headers={"Authorization": f"Bearer {self.config.api_key}"},
                    )
        except TimeoutError as exc:
            raise UpstreamFailure(
                f"OpenAI parse timed out after {self.config.timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"OpenAI parse request failed: {exc}") from exc

        raise_for_upstream_error(response, operation="parse")
        return parse_completion(response)


def parse_completion(response: httpx.Response) -> list[CandidateUpdate]:
    try:
        completion = ChatCompletionResponse.model_validate(response.json())
    except (ValueError, PayloadValidationError) as exc:
        raise UpstreamFailure("Unexpected OpenAI completion payload") from exc

    if not completion.choices or not completion.choices[0].message.content:
        raise UpstreamFailure("OpenAI completion contained no message content")

    try:
        payload = ContactUpdatesPayload.model_validate(
            json.loads(completion.choices[0].message.content)
        )
    except (ValueError, PayloadValidationError) as exc:
        raise UpstreamFailure("OpenAI returned content that is not a contact update list") from exc

    return [
        CandidateUpdate(
            field_path=item.field_path,
            action=item.action,
            suggested_value=item.suggested_value,
            confidence=item.confidence,
            reasoning=item.reasoning,
        )
        for item in payload.contact_updates
    ]


if TYPE_CHECKING:
    _capability_check: IntelligenceCapability = OpenAIIntelligence()
