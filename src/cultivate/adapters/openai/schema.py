"""Pydantic models describing the OpenAI payloads the adapter relies on."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OpenAIBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChatMessage(OpenAIBaseModel):
    role: str
    content: str | None = None


class ChatChoice(OpenAIBaseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatCompletionResponse(OpenAIBaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[ChatChoice]


class CandidateUpdatePayload(OpenAIBaseModel):
    """One entry of the model's ``contact_updates`` list, before domain validation."""

    field_path: str | None = None
    action: str = "update"
    suggested_value: Any = None
    confidence: float | None = None
    reasoning: str = ""

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: object) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return None if math.isnan(number) else number

    @field_validator("reasoning", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class ContactUpdatesPayload(OpenAIBaseModel):
    contact_updates: list[CandidateUpdatePayload] = Field(default_factory=list)


class TranscriptionResponse(OpenAIBaseModel):
    text: str


class ErrorDetail(OpenAIBaseModel):
    message: str
    type: str | None = None
    code: str | None = None


class ErrorResponse(OpenAIBaseModel):
    error: ErrorDetail
