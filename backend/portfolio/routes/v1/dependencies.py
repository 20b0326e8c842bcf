# backend/portfolio/routes/v1/dependencies.py
"""
Dependency dashboard routes - API v1 (all admin)

Endpoints:
    GET /                      → Tracked dependencies plus summary
    POST /scan                 → Re-read the manifest and refresh versions/advisories
    POST /update               → Update one package
    POST /apply-updates        → Update everything the effective mode allows
    GET /audit                 → Security audit findings
    GET /update-mode           → Global update mode
    POST /update-mode          → Change the global update mode
    GET /layouts               → Stored dashboard widget layouts
    POST /layouts              → Save widget layouts
    POST /layouts/compact      → Compact layouts for a width or column count
    PATCH /{name}              → Per-package update mode and lock
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_dependency_service, get_layout_service
from ...schemas.dependency import (
    ApplyUpdatesRequest,
    ApplyUpdatesResponse,
    AuditListResponse,
    CompactLayoutsRequest,
    DependencyConfigRequest,
    DependencyListResponse,
    DependencyResponse,
    LayoutsRequest,
    LayoutsResponse,
    ScanResponse,
    SecurityAuditResponse,
    UpdateDependencyRequest,
    UpdateDependencyResponse,
    UpdateModeRequest,
    UpdateModeResponse,
)
from ...services.dependency_service import DependencyService
from ...services.layout_service import LayoutService

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1/dependencies
router = APIRouter(tags=["dependencies-v1"], dependencies=[Depends(require_admin)])


@router.get("", response_model=DependencyListResponse)
async def list_dependencies(
    service: DependencyService = Depends(get_dependency_service),
) -> DependencyListResponse:
    result = await asyncio.to_thread(service.list_dependencies)
    return DependencyListResponse(
        dependencies=[DependencyResponse.model_validate(dep) for dep in result["dependencies"]],
        summary=result["summary"],
    )


@router.post("/scan", response_model=ScanResponse)
async def scan_dependencies(
    service: DependencyService = Depends(get_dependency_service),
) -> ScanResponse:
    result = await service.run_scan()
    result["dependencies"] = [DependencyResponse.model_validate(dep) for dep in result["dependencies"]]
    return ScanResponse(**result)


@router.post("/update", response_model=UpdateDependencyResponse)
async def update_dependency(
    payload: UpdateDependencyRequest,
    service: DependencyService = Depends(get_dependency_service),
) -> UpdateDependencyResponse:
    result = await asyncio.to_thread(service.update_dependency, payload.name, payload.version)
    return UpdateDependencyResponse(**result)


@router.post("/apply-updates", response_model=ApplyUpdatesResponse)
async def apply_updates(
    payload: Optional[ApplyUpdatesRequest] = None,
    service: DependencyService = Depends(get_dependency_service),
) -> ApplyUpdatesResponse:
    mode = payload.mode if payload else None
    return ApplyUpdatesResponse(**await asyncio.to_thread(service.apply_updates, mode))


@router.get("/audit", response_model=AuditListResponse)
async def list_audits(
    status: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    service: DependencyService = Depends(get_dependency_service),
) -> AuditListResponse:
    rows = await asyncio.to_thread(service.list_audits, status=status, limit=limit)
    return AuditListResponse(
        data=[SecurityAuditResponse.model_validate(row) for row in rows], count=len(rows)
    )


@router.get("/update-mode", response_model=UpdateModeResponse)
async def get_update_mode(
    service: DependencyService = Depends(get_dependency_service),
) -> UpdateModeResponse:
    return UpdateModeResponse(mode=await asyncio.to_thread(service.get_global_mode))


@router.post("/update-mode", response_model=UpdateModeResponse)
async def set_update_mode(
    payload: UpdateModeRequest,
    service: DependencyService = Depends(get_dependency_service),
) -> UpdateModeResponse:
    return UpdateModeResponse(mode=await asyncio.to_thread(service.set_global_mode, payload.mode))


# Widget layouts


@router.get("/layouts", response_model=LayoutsResponse)
async def get_layouts(service: LayoutService = Depends(get_layout_service)) -> LayoutsResponse:
    return LayoutsResponse(layouts=await asyncio.to_thread(service.get_layouts))


@router.post("/layouts", response_model=LayoutsResponse)
async def save_layouts(
    payload: LayoutsRequest,
    service: LayoutService = Depends(get_layout_service),
) -> LayoutsResponse:
    raw = None if payload.layouts is None else [item.model_dump() for item in payload.layouts]
    return LayoutsResponse(layouts=await asyncio.to_thread(service.save_layouts, raw))


@router.post("/layouts/compact", response_model=LayoutsResponse)
async def compact_layouts(
    payload: CompactLayoutsRequest,
    service: LayoutService = Depends(get_layout_service),
) -> LayoutsResponse:
    layouts = service.compact(
        [item.model_dump() for item in payload.layouts],
        width=payload.width,
        columns=payload.columns,
    )
    return LayoutsResponse(layouts=layouts)


@router.patch("/{name}", response_model=DependencyResponse)
async def configure_dependency(
    name: str,
    payload: DependencyConfigRequest,
    service: DependencyService = Depends(get_dependency_service),
) -> DependencyResponse:
    dep = await asyncio.to_thread(
        service.configure,
        name,
        update_mode=payload.update_mode,
        locked=payload.locked,
        locked_version=payload.locked_version,
    )
    return DependencyResponse.model_validate(dep)
