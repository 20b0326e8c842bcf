# backend/portfolio/routes/v1/admin_roles.py
"""
Role management routes - API v1

Endpoints:
    POST /sync           → Reconcile user_roles from Clerk (self, or any user as super admin)
    GET /me              → Caller's roles
    POST /toggle         → Add/remove a role and mirror it into Clerk (super admin)
    GET /{user_id}       → Roles of one user (admin)
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...api.dependencies.auth import get_current_user_id, require_admin, require_super_admin
from ...api.dependencies.services import get_role_sync_service
from ...core.enums import RoleName
from ...schemas.roles import (
    RoleSyncRequest,
    RoleSyncResponse,
    ToggleRoleRequest,
    ToggleRoleResponse,
    UserRolesResponse,
)
from ...services.role_sync_service import RoleSyncService, is_super_admin

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1/admin/roles
router = APIRouter(tags=["admin-roles-v1"])


def _roles_response(role_sync: RoleSyncService, user_id: str) -> UserRolesResponse:
    roles = role_sync.get_user_roles(user_id)
    return UserRolesResponse(
        user_id=user_id, roles=roles, is_admin=RoleName.ADMIN.value in roles
    )


@router.post("/sync", response_model=RoleSyncResponse)
async def sync_roles(
    payload: Optional[RoleSyncRequest] = Body(None),
    user_id: str = Depends(get_current_user_id),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> RoleSyncResponse:
    """
    Pull Clerk metadata into ``user_roles``.

    Without a body the caller's own roles are synced. Syncing someone else
    requires the caller to be a super admin in Clerk.
    """
    target = (payload.user_id if payload else None) or user_id
    if target != user_id:
        caller_metadata = await asyncio.to_thread(role_sync.fetch_metadata, user_id)
        if not is_super_admin(caller_metadata):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Super admin access required"
            )

    report = await asyncio.to_thread(role_sync.sync_user_roles, target, trigger="manual")
    return RoleSyncResponse(**report.to_dict())


@router.get("/me", response_model=UserRolesResponse)
async def my_roles(
    user_id: str = Depends(get_current_user_id),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> UserRolesResponse:
    return await asyncio.to_thread(_roles_response, role_sync, user_id)


@router.post("/toggle", response_model=ToggleRoleResponse)
async def toggle_role(
    payload: ToggleRoleRequest,
    caller_id: str = Depends(require_super_admin),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> ToggleRoleResponse:
    result = await asyncio.to_thread(
        role_sync.toggle_role, payload.user_id, payload.role, payload.action
    )
    logger.info(
        "Role toggled",
        extra={
            "evt": "role_toggled",
            "by": caller_id,
            "user_id": payload.user_id,
            "role": payload.role,
            "action": payload.action,
        },
    )
    return ToggleRoleResponse(**result)


@router.get("/{user_id}", response_model=UserRolesResponse)
async def user_roles(
    user_id: str,
    _: str = Depends(require_admin),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> UserRolesResponse:
    return await asyncio.to_thread(_roles_response, role_sync, user_id)
