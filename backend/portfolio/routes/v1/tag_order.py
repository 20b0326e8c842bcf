# backend/portfolio/routes/v1/tag_order.py
"""
Tag ordering routes - API v1

Endpoints:
    GET /     → Tag order rows by display_order (optionally one tag type)
    POST /    → Replace the order for one tag type (admin)
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_tag_order_service
from ...schemas.site_content import TagOrderItem, TagOrderUpdateRequest, TagOrderUpdateResponse
from ...services.site_content_service import TagOrderService

# V1 router - mounted at /api/v1/tag-order
router = APIRouter(tags=["tag-order-v1"])


@router.get("", response_model=List[TagOrderItem])
async def list_tag_order(
    tag_type: Optional[str] = Query(None, alias="tagType"),
    service: TagOrderService = Depends(get_tag_order_service),
) -> List[TagOrderItem]:
    rows = await asyncio.to_thread(service.list_order, tag_type)
    return [TagOrderItem.model_validate(row) for row in rows]


@router.post("", response_model=TagOrderUpdateResponse)
async def save_tag_order(
    payload: TagOrderUpdateRequest,
    _: str = Depends(require_admin),
    service: TagOrderService = Depends(get_tag_order_service),
) -> TagOrderUpdateResponse:
    rows = await asyncio.to_thread(service.save_order, payload.tag_type, payload.tags)
    return TagOrderUpdateResponse(tag_type=payload.tag_type, count=len(rows))
