# backend/portfolio/routes/v1/media.py
"""
Media library routes - API v1

Endpoints:
    GET /                       → List media (filetype prefix, tag)
    GET /count                  → Totals by filetype
    POST /                      → Create a media row (admin)
    POST /operations            → duplicate-check | cleanup-duplicates | media-info (admin)
    POST /process-video-url     → Add a video link to the library (admin)
    PUT /{media_id}             → Update a media row (admin)
    DELETE /{media_id}          → Delete a media row (admin)
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_media_service
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...schemas.media import (
    CleanupDuplicatesResult,
    DuplicateCheckRequest,
    DuplicateCheckResult,
    MediaCountResponse,
    MediaCreate,
    MediaInfoRequest,
    MediaInfoResult,
    MediaListResponse,
    MediaResponse,
    MediaUpdate,
    ProcessVideoRequest,
    ProcessVideoResponse,
)
from ...services.media_service import MediaService

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1/media
router = APIRouter(tags=["media-v1"])


@router.get("", response_model=MediaListResponse)
async def list_media(
    filetype: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    service: MediaService = Depends(get_media_service),
) -> MediaListResponse:
    items = await asyncio.to_thread(
        service.list_media, filetype=filetype, tag=tag, skip=skip, limit=limit
    )
    return MediaListResponse(
        data=[MediaResponse.model_validate(item) for item in items],
        count=len(items),
        skip=skip,
        limit=limit,
    )


@router.get("/count", response_model=MediaCountResponse)
async def count_media(service: MediaService = Depends(get_media_service)) -> MediaCountResponse:
    return MediaCountResponse(**await asyncio.to_thread(service.count_media))


@router.post("", response_model=MediaResponse, status_code=status.HTTP_201_CREATED)
async def create_media(
    payload: MediaCreate,
    user_id: str = Depends(require_admin),
    service: MediaService = Depends(get_media_service),
) -> MediaResponse:
    media = await asyncio.to_thread(service.create_media, payload, uploaded_by=user_id)
    return MediaResponse.model_validate(media)


@router.post("/operations")
async def media_operations(
    operation: str = Query("duplicate-check"),
    body: Dict[str, Any] = Body(default_factory=dict),
    _: str = Depends(require_admin),
    service: MediaService = Depends(get_media_service),
) -> Any:
    """
    Media maintenance operations selected by ``?operation=``.

    The body shape depends on the operation; cleanup takes no body.
    """
    if operation == "duplicate-check":
        request = DuplicateCheckRequest.model_validate(body)
        result: DuplicateCheckResult = await asyncio.to_thread(service.check_duplicate, request)
        return result
    if operation == "cleanup-duplicates":
        cleanup: CleanupDuplicatesResult = await asyncio.to_thread(service.cleanup_duplicates)
        return cleanup
    if operation == "media-info":
        info: MediaInfoResult = await asyncio.to_thread(
            service.media_info, MediaInfoRequest.model_validate(body)
        )
        return info

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Unknown operation: {operation}",
    )


@router.post("/process-video-url", response_model=ProcessVideoResponse)
async def process_video_url(
    payload: ProcessVideoRequest,
    user_id: str = Depends(require_admin),
    service: MediaService = Depends(get_media_service),
) -> ProcessVideoResponse:
    video, media = await asyncio.to_thread(
        service.add_video_to_library, payload.url, is_bts=payload.is_bts, uploaded_by=user_id
    )
    return ProcessVideoResponse(
        url=video.url,
        platform=video.platform,
        id=video.id,
        embed_url=video.embed_url,
        thumbnail_url=video.thumbnail_url,
        title=video.title,
        upload_date=video.upload_date,
        data=MediaResponse.model_validate(media),
    )


@router.put("/{media_id}", response_model=MediaResponse)
async def update_media(
    media_id: str,
    payload: MediaUpdate,
    _: str = Depends(require_admin),
    service: MediaService = Depends(get_media_service),
) -> MediaResponse:
    media = await asyncio.to_thread(service.update_media, media_id, payload)
    return MediaResponse.model_validate(media)


@router.delete("/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_media(
    media_id: str,
    _: str = Depends(require_admin),
    service: MediaService = Depends(get_media_service),
) -> None:
    await asyncio.to_thread(service.delete_media, media_id)
