# backend/portfolio/services/role_sync_service.py
"""
Role synchronisation between Clerk and the ``user_roles`` table.

Clerk is the source of truth for who is an admin: ``public_metadata.superAdmin``
and ``public_metadata.roles`` are read on sign-in, on webhook deliveries and
(optionally) before every admin check. Role changes made from the dashboard
flow the other way and are written back into Clerk ``public_metadata.roles``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from sqlalchemy.orm import Session

from ..core.enums import RoleAction, RoleName
from ..core.exceptions import ExternalServiceException, ValidationException
from ..core.metrics import ROLE_CHANGES_TOTAL, ROLE_SYNC_TOTAL
from ..integrations.clerk_client import ClerkClient, ClerkError
from ..repositories.user_role_repository import UserRoleRepository
from .base import BaseService


def is_super_admin(metadata: Optional[Mapping[str, Any]]) -> bool:
    return bool(metadata) and metadata.get("superAdmin") is True  # type: ignore[union-attr]


def desired_roles(metadata: Optional[Mapping[str, Any]]) -> Set[str]:
    """
    Roles a user should hold according to their Clerk public metadata.

    ``superAdmin: true`` implies ``admin``. Entries of ``roles`` that are not
    known role names are ignored, as is a ``roles`` value that is not a list.
    """
    if not metadata:
        return set()

    roles: Set[str] = set()
    if is_super_admin(metadata):
        roles.add(RoleName.ADMIN.value)

    listed = metadata.get("roles")
    if isinstance(listed, list):
        valid = RoleName.values()
        roles.update(str(role) for role in listed if str(role) in valid)
    return roles


@dataclass
class RoleSyncReport:
    user_id: str
    is_super_admin: bool
    clerk_roles: List[str]
    supabase_roles: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def admin_role_assigned(self) -> bool:
        return RoleName.ADMIN.value in self.supabase_roles

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["admin_role_assigned"] = self.admin_role_assigned
        return data


class RoleSyncService(BaseService):
    """Keeps ``user_roles`` in step with Clerk metadata, and vice versa."""

    def __init__(self, db: Session, clerk: Optional[ClerkClient] = None):
        super().__init__(db)
        self.clerk = clerk
        self.repository = UserRoleRepository(db)

    @staticmethod
    def _validate_role(role: str) -> str:
        if role not in RoleName.values():
            raise ValidationException(
                f"Invalid role: {role}",
                code="INVALID_ROLE",
                details={"allowed": sorted(RoleName.values())},
            )
        return role

    def _require_clerk(self) -> ClerkClient:
        if self.clerk is None:
            raise ExternalServiceException(
                "Clerk is not configured", code="CLERK_NOT_CONFIGURED"
            )
        return self.clerk

    def fetch_metadata(self, user_id: str) -> Dict[str, Any]:
        clerk = self._require_clerk()
        try:
            return clerk.get_public_metadata(user_id)
        except ClerkError as exc:
            raise ExternalServiceException(
                f"Could not load Clerk user {user_id}",
                code="CLERK_USER_LOOKUP_FAILED",
                details={"status_code": exc.status_code},
            ) from exc

    @BaseService.measure_operation("get_user_roles")
    def get_user_roles(self, user_id: str) -> List[str]:
        return self.repository.roles_for_user(user_id)

    @BaseService.measure_operation("has_role")
    def has_role(self, user_id: str, role: str) -> bool:
        return self.repository.has_role(user_id, role)

    @BaseService.measure_operation("ensure_user_has_role")
    def ensure_user_has_role(self, user_id: str, role: str) -> bool:
        """Grant ``role``; returns True when a row was inserted."""
        self._validate_role(role)
        with self.transaction():
            added = self.repository.add_role(user_id, role)
        if added:
            ROLE_CHANGES_TOTAL.labels(role=role, action=RoleAction.ADD.value).inc()
            self.logger.info(
                "Role granted", extra={"evt": "role_granted", "user_id": user_id, "role": role}
            )
        return added

    @BaseService.measure_operation("remove_user_role")
    def remove_user_role(self, user_id: str, role: str) -> bool:
        """Revoke ``role``; returns True when a row was deleted."""
        self._validate_role(role)
        with self.transaction():
            removed = self.repository.remove_role(user_id, role)
        if removed:
            ROLE_CHANGES_TOTAL.labels(role=role, action=RoleAction.REMOVE.value).inc()
            self.logger.info(
                "Role revoked", extra={"evt": "role_revoked", "user_id": user_id, "role": role}
            )
        return removed

    @BaseService.measure_operation("remove_all_roles")
    def remove_all_roles(self, user_id: str) -> int:
        with self.transaction():
            removed = self.repository.remove_all(user_id)
        self.logger.info(
            "All roles removed",
            extra={"evt": "roles_cleared", "user_id": user_id, "count": removed},
        )
        return removed

    @BaseService.measure_operation("sync_user_roles")
    def sync_user_roles(
        self,
        user_id: str,
        metadata: Optional[Mapping[str, Any]] = None,
        *,
        prune: bool = False,
        trigger: str = "manual",
    ) -> RoleSyncReport:
        """
        Reconcile ``user_roles`` for ``user_id`` with Clerk.

        When ``metadata`` is None the user is fetched from Clerk. Every desired
        role is ensured; with ``prune`` roles Clerk no longer lists are removed.
        """
        try:
            if metadata is None:
                metadata = self.fetch_metadata(user_id)

            wanted = desired_roles(metadata)
            current = set(self.repository.roles_for_user(user_id))
            to_add = sorted(wanted - current)
            to_remove = sorted(current - wanted) if prune else []

            with self.transaction():
                for role in to_add:
                    self.repository.add_role(user_id, role)
                for role in to_remove:
                    self.repository.remove_role(user_id, role)
        except Exception:
            ROLE_SYNC_TOTAL.labels(trigger=trigger, outcome="error").inc()
            raise

        for role in to_add:
            ROLE_CHANGES_TOTAL.labels(role=role, action=RoleAction.ADD.value).inc()
        for role in to_remove:
            ROLE_CHANGES_TOTAL.labels(role=role, action=RoleAction.REMOVE.value).inc()
        ROLE_SYNC_TOTAL.labels(trigger=trigger, outcome="success").inc()

        report = RoleSyncReport(
            user_id=user_id,
            is_super_admin=is_super_admin(metadata),
            clerk_roles=sorted(wanted),
            supabase_roles=self.repository.roles_for_user(user_id),
            added=to_add,
            removed=to_remove,
        )
        if to_add or to_remove:
            self.logger.info(
                "Roles synced from Clerk",
                extra={
                    "evt": "roles_synced",
                    "user_id": user_id,
                    "trigger": trigger,
                    "added": to_add,
                    "removed": to_remove,
                },
            )
        return report

    @BaseService.measure_operation("toggle_role")
    def toggle_role(self, target_user_id: str, role: str, action: str) -> Dict[str, Any]:
        """
        Add or remove ``role`` for ``target_user_id`` and mirror it into Clerk.

        The database change is committed before Clerk is updated. A Clerk failure
        is reported in the result rather than undoing the local change; the next
        sync from Clerk will reconcile.
        """
        if not target_user_id:
            raise ValidationException("Missing required fields", code="MISSING_FIELDS")
        self._validate_role(role)
        try:
            parsed_action = RoleAction(action)
        except ValueError:
            raise ValidationException("Invalid action", code="INVALID_ACTION")

        if parsed_action is RoleAction.ADD:
            changed = self.ensure_user_has_role(target_user_id, role)
        else:
            changed = self.remove_user_role(target_user_id, role)

        roles = self.repository.roles_for_user(target_user_id)
        clerk_synced = self._mirror_roles_to_clerk(target_user_id, roles)
        return {
            "success": True,
            "user_id": target_user_id,
            "role": role,
            "action": parsed_action.value,
            "changed": changed,
            "roles": roles,
            "clerk_synced": clerk_synced,
        }

    def _mirror_roles_to_clerk(self, user_id: str, roles: List[str]) -> bool:
        if self.clerk is None:
            self.logger.warning(
                "Clerk not configured; role change not mirrored",
                extra={"evt": "role_mirror_skipped", "user_id": user_id},
            )
            return False
        try:
            self.clerk.set_roles(user_id, roles)
            return True
        except ClerkError as exc:
            self.logger.error(
                "Failed to mirror roles to Clerk",
                extra={
                    "evt": "role_mirror_failed",
                    "user_id": user_id,
                    "status_code": exc.status_code,
                },
            )
            return False
