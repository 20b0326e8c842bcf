# backend/portfolio/routes/v1/contact.py
"""
Contact form routes - API v1

Endpoints:
    POST /    → Store a contact message (public)
    GET /     → Recent messages (admin)
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_contact_service
from ...schemas.site_content import ContactMessageResponse, ContactRequest, ContactResponse
from ...services.site_content_service import ContactService

# V1 router - mounted at /api/v1/contact
router = APIRouter(tags=["contact-v1"])


@router.post("", response_model=ContactResponse)
async def submit_contact(
    payload: ContactRequest,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    await asyncio.to_thread(service.submit, payload.name, str(payload.email), payload.message)
    return ContactResponse()


@router.get("", response_model=List[ContactMessageResponse])
async def list_contact_messages(
    limit: int = Query(50, ge=1, le=500),
    _: str = Depends(require_admin),
    service: ContactService = Depends(get_contact_service),
) -> List[ContactMessageResponse]:
    rows = await asyncio.to_thread(service.list_recent, limit)
    return [ContactMessageResponse.model_validate(row) for row in rows]
