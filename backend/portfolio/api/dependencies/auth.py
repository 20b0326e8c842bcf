# backend/portfolio/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The caller is identified by a Clerk session token, sent either as a bearer
token or in the ``__session`` cookie Clerk's browser SDK sets. Admin access is
decided by the ``user_roles`` table; when ``role_sync_on_request`` is on, the
caller's Clerk metadata is reconciled into that table first so a role granted
in the Clerk dashboard takes effect on the next request.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from ...auth import verify_session_token
from ...core.config import settings
from ...core.enums import RoleName
from ...core.exceptions import ExternalServiceException
from ...services.role_sync_service import RoleSyncService, is_super_admin
from .services import get_role_sync_service

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    cookie = request.cookies.get(settings.session_cookie_name)
    return cookie or None


async def get_current_user_id_optional(request: Request) -> Optional[str]:
    token = _extract_token(request)
    if not token:
        return None
    claims = await verify_session_token(token)
    return claims.sub if claims else None


async def get_current_user_id(request: Request) -> str:
    """Clerk user id of the caller; 401 when the session token is missing or invalid."""
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = await verify_session_token(token)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.user_id = claims.sub
    return claims.sub


def require_admin(
    user_id: str = Depends(get_current_user_id),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> str:
    if settings.role_sync_on_request and role_sync.clerk is not None:
        try:
            role_sync.sync_user_roles(user_id, trigger="request")
        except ExternalServiceException as exc:
            # fall back to the roles already stored
            logger.warning(
                "Role sync before admin check failed",
                extra={"evt": "role_sync_request_failed", "user_id": user_id, "error": exc.message},
            )

    if not role_sync.has_role(user_id, RoleName.ADMIN.value):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user_id


def require_super_admin(
    user_id: str = Depends(get_current_user_id),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> str:
    """Only users flagged ``superAdmin`` in Clerk public metadata pass."""
    try:
        metadata = role_sync.fetch_metadata(user_id)
    except ExternalServiceException as exc:
        logger.warning(
            "Super admin check could not reach Clerk",
            extra={"evt": "super_admin_check_failed", "user_id": user_id, "error": exc.message},
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Super admin access required"
        ) from exc
    if not is_super_admin(metadata):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Super admin access required"
        )
    return user_id
