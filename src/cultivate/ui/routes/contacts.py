"""Read-only contact endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from cultivate.ui.dependencies import Services
from cultivate.ui.schemas import ContactResponse, SuggestionResponse

router = APIRouter()


@router.get("/{contact_id}")
def get_contact(contact_id: UUID, services: Services) -> ContactResponse:
    return ContactResponse.from_domain(services.get_contact(contact_id))


@router.get("/{contact_id}/suggestions")
def list_pending_suggestions(contact_id: UUID, services: Services) -> list[SuggestionResponse]:
    return [
        SuggestionResponse.from_domain(record)
        for record in services.ledger.list_pending(contact_id)
    ]
