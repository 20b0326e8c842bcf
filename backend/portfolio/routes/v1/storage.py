# backend/portfolio/routes/v1/storage.py
"""Storage usage computed from the media library - API v1"""

import asyncio

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_media_service
from ...schemas.media import StorageUsageResponse
from ...services.media_service import MediaService

# V1 router - mounted at /api/v1/storage
router = APIRouter(tags=["storage-v1"])


@router.get("/usage", response_model=StorageUsageResponse)
async def storage_usage(service: MediaService = Depends(get_media_service)) -> StorageUsageResponse:
    return await asyncio.to_thread(service.storage_usage)
