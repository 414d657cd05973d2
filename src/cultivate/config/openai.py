"""OpenAI configuration values for parsing and transcription."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import env_float, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

OPENAI_BASE_URL = "https://api.openai.com/v1/"
DEFAULT_PARSE_MODEL = "gpt-4o-mini"
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class OpenAIConfig:
    """Holds OpenAI API configuration values."""

    api_key: str
    parse_model: str
    transcribe_model: str
    timeout_seconds: float
    resilience: ResilienceConfig


def get_openai_config(*, resilience: ResilienceConfig | None = None) -> OpenAIConfig:
    values = require_env_vars(("OPENAI_API_KEY",))
    timeout = env_float("CULTIVATE_UPSTREAM_TIMEOUT_SECONDS", DEFAULT_UPSTREAM_TIMEOUT_SECONDS)
    return OpenAIConfig(
        api_key=values["OPENAI_API_KEY"],
        parse_model=os.getenv("CULTIVATE_PARSE_MODEL") or DEFAULT_PARSE_MODEL,
        transcribe_model=os.getenv("CULTIVATE_TRANSCRIBE_MODEL") or DEFAULT_TRANSCRIBE_MODEL,
        timeout_seconds=timeout,
        resilience=resilience
        or ResilienceConfig(
            name="openai",
            base_url=OPENAI_BASE_URL,
            timeout_seconds=timeout,
            ratelimit=RateLimit(max_calls=3, per_seconds=1.0),
        ),
    )
