# backend/portfolio/routes/v1/settings.py
"""
Site settings routes - API v1

Endpoints:
    GET /     → Flat key/value map of site settings
    POST /    → Upsert settings from a JSON object (admin)
"""

import asyncio
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_settings_service
from ...schemas.site_content import SettingsSaveResponse
from ...services.site_content_service import SettingsService

# V1 router - mounted at /api/v1/settings
router = APIRouter(tags=["settings-v1"])


@router.get("", response_model=Dict[str, Optional[str]])
async def get_settings(
    service: SettingsService = Depends(get_settings_service),
) -> Dict[str, Optional[str]]:
    return await asyncio.to_thread(service.get_settings)


@router.post("", response_model=SettingsSaveResponse)
async def save_settings(
    payload: Any = Body(...),
    _: str = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
) -> SettingsSaveResponse:
    """Accepts any JSON body; anything other than an object is rejected with 400."""
    updated = await asyncio.to_thread(service.save_settings, payload)
    return SettingsSaveResponse(updated=updated)
