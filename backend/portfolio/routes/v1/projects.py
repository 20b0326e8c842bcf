# backend/portfolio/routes/v1/projects.py
"""
Project routes - API v1

Endpoints:
    GET /                                   → Public project listing
    GET /search                             → Search by text, category, role
    POST /                                  → Create project (admin)
    GET /main-media/{project_id}            → Main media for a project
    POST /main-media                        → Save main media (admin)
    POST /main-media/set-thumbnail          → Custom thumbnail for a video (admin)
    POST /main-media/toggle-visibility      → Hide/show a main media row (admin)
    DELETE /main-media/item/{media_id}      → Delete a main media row (admin)
    GET /bts-images/{project_id}            → BTS gallery for a project
    POST /bts-images                        → Save BTS images (admin)
    DELETE /bts-images/item                 → Delete one BTS image (admin)
    GET /{project_id}                       → Project detail with media
    PUT /{project_id}                       → Update project (admin)
    DELETE /{project_id}                    → Delete project (admin)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...api.dependencies.auth import get_current_user_id_optional, require_admin
from ...api.dependencies.services import (
    get_bts_image_service,
    get_main_media_service,
    get_project_service,
    get_role_sync_service,
)
from ...core.enums import RoleName
from ...schemas.project import (
    BtsImageDeleteRequest,
    BtsImageDeleteResponse,
    BtsImageResponse,
    BtsImagesCreateRequest,
    BtsImagesSaveResponse,
    MainMediaCreateRequest,
    MainMediaItemResponse,
    MainMediaResponse,
    MainMediaSaveResponse,
    ProjectCreate,
    ProjectDeleteResponse,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectSearchResponse,
    ProjectUpdate,
    SetThumbnailData,
    SetThumbnailRequest,
    SetThumbnailResponse,
    ToggleVisibilityRequest,
)
from ...services.bts_image_service import BtsImageService
from ...services.main_media_service import MainMediaService
from ...services.project_service import ProjectService
from ...services.role_sync_service import RoleSyncService

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1/projects
router = APIRouter(tags=["projects-v1"])


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    include_private: bool = Query(False),
    user_id: Optional[str] = Depends(get_current_user_id_optional),
    service: ProjectService = Depends(get_project_service),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> ProjectListResponse:
    """
    Public listing, newest first by project date.

    ``include_private`` also returns unpublished and private projects and is
    only honoured for admins.
    """
    if include_private:
        is_admin = user_id is not None and await asyncio.to_thread(
            role_sync.has_role, user_id, RoleName.ADMIN.value
        )
        if not is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
            )
    projects = await asyncio.to_thread(service.list_projects, include_private=include_private)
    return ProjectListResponse(data=projects, count=len(projects))


@router.get("/search", response_model=ProjectSearchResponse)
async def search_projects(
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    service: ProjectService = Depends(get_project_service),
) -> ProjectSearchResponse:
    projects = await asyncio.to_thread(service.search_projects, q, category=category, role=role)
    return ProjectSearchResponse(
        data=projects, count=len(projects), query=q, category=category, role=role
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    _: str = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await asyncio.to_thread(service.create_project, payload)


# Main media


@router.get("/main-media/{project_id}", response_model=MainMediaSaveResponse)
async def list_main_media(
    project_id: str,
    service: MainMediaService = Depends(get_main_media_service),
) -> MainMediaSaveResponse:
    rows = await asyncio.to_thread(service.list_main_media, project_id)
    return MainMediaSaveResponse(
        message=f"{len(rows)} media items",
        data=[MainMediaResponse.model_validate(row) for row in rows],
    )


@router.post("/main-media", response_model=MainMediaSaveResponse)
async def save_main_media(
    payload: MainMediaCreateRequest,
    _: str = Depends(require_admin),
    service: MainMediaService = Depends(get_main_media_service),
) -> MainMediaSaveResponse:
    rows = await asyncio.to_thread(
        service.save_main_media,
        payload.project_id,
        payload.media,
        replace_existing=payload.replace_existing,
    )
    return MainMediaSaveResponse(
        message=f"{len(rows)} media items saved",
        data=[MainMediaResponse.model_validate(row) for row in rows],
    )


@router.post("/main-media/set-thumbnail", response_model=SetThumbnailResponse)
async def set_video_thumbnail(
    payload: SetThumbnailRequest,
    _: str = Depends(require_admin),
    service: MainMediaService = Depends(get_main_media_service),
) -> SetThumbnailResponse:
    video, thumbnail = await asyncio.to_thread(
        service.set_video_thumbnail, payload.project_id, payload.video_media_id, payload.image_url
    )
    return SetThumbnailResponse(
        data=SetThumbnailData(
            video=MainMediaResponse.model_validate(video),
            hidden_thumbnail=MainMediaResponse.model_validate(thumbnail),
        )
    )


@router.post("/main-media/toggle-visibility", response_model=MainMediaItemResponse)
async def toggle_main_media_visibility(
    payload: ToggleVisibilityRequest,
    _: str = Depends(require_admin),
    service: MainMediaService = Depends(get_main_media_service),
) -> MainMediaItemResponse:
    media = await asyncio.to_thread(service.set_visibility, payload.media_id, payload.is_hidden)
    return MainMediaItemResponse(data=MainMediaResponse.model_validate(media))


@router.delete("/main-media/item/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_main_media(
    media_id: int,
    _: str = Depends(require_admin),
    service: MainMediaService = Depends(get_main_media_service),
) -> None:
    await asyncio.to_thread(service.delete_main_media, media_id)


# BTS images


@router.get("/bts-images/{project_id}", response_model=BtsImagesSaveResponse)
async def list_bts_images(
    project_id: str,
    service: BtsImageService = Depends(get_bts_image_service),
) -> BtsImagesSaveResponse:
    images = await asyncio.to_thread(service.list_images, project_id)
    return BtsImagesSaveResponse(
        message=f"{len(images)} BTS images",
        data=[BtsImageResponse.model_validate(image) for image in images],
    )


@router.post("/bts-images", response_model=BtsImagesSaveResponse)
async def save_bts_images(
    payload: BtsImagesCreateRequest,
    _: str = Depends(require_admin),
    service: BtsImageService = Depends(get_bts_image_service),
) -> BtsImagesSaveResponse:
    result = await asyncio.to_thread(
        service.save_images,
        payload.project_id,
        payload.images,
        caption=payload.caption,
        category=payload.category,
        replace_existing=payload.replace_existing,
    )
    return BtsImagesSaveResponse(
        message=result.message,
        data=[BtsImageResponse.model_validate(image) for image in result.created],
        duplicates_skipped=result.duplicates_skipped,
        deleted=result.deleted,
    )


@router.delete("/bts-images/item", response_model=BtsImageDeleteResponse)
async def delete_bts_image(
    payload: BtsImageDeleteRequest,
    _: str = Depends(require_admin),
    service: BtsImageService = Depends(get_bts_image_service),
) -> BtsImageDeleteResponse:
    deleted = await asyncio.to_thread(service.delete_image, payload.project_id, payload.image_url)
    return BtsImageDeleteResponse(deleted_count=deleted)


# Single project


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectDetailResponse:
    return await asyncio.to_thread(service.get_project, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    _: str = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await asyncio.to_thread(service.update_project, project_id, payload)


@router.delete("/{project_id}", response_model=ProjectDeleteResponse)
async def delete_project(
    project_id: str,
    _: str = Depends(require_admin),
    service: ProjectService = Depends(get_project_service),
) -> ProjectDeleteResponse:
    return await asyncio.to_thread(service.delete_project, project_id)
