"""Suggestion review endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from cultivate.ui.dependencies import Services
from cultivate.ui.schemas import ReviewRequest, ReviewResponse, SuggestionResponse

router = APIRouter()


@router.get("/{suggestion_id}")
def get_suggestion(suggestion_id: UUID, services: Services) -> SuggestionResponse:
    return SuggestionResponse.from_domain(services.ledger.get(suggestion_id))


@router.post("/{suggestion_id}/view")
def mark_viewed(suggestion_id: UUID, services: Services) -> SuggestionResponse:
    return SuggestionResponse.from_domain(services.ledger.mark_viewed(suggestion_id))


@router.post("/{suggestion_id}/review")
def review(suggestion_id: UUID, body: ReviewRequest, services: Services) -> ReviewResponse:
    outcome = services.ledger.review(suggestion_id, body.decision, body.selections)
    return ReviewResponse.from_domain(outcome)
