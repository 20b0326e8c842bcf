# backend/portfolio/repositories/user_role_repository.py
"""
Repository for role assignments mirrored from Clerk.

Adds and removes are idempotent so that webhook redeliveries and on-request
syncs can call them freely.
"""

from typing import List

from sqlalchemy.orm import Session

from ..models.user_role import UserRole
from .base_repository import BaseRepository


class UserRoleRepository(BaseRepository[UserRole]):
    def __init__(self, db: Session):
        super().__init__(db, UserRole)

    def roles_for_user(self, user_id: str) -> List[str]:
        rows = self._execute_query(
            self._build_query().filter(UserRole.user_id == user_id).order_by(UserRole.role)
        )
        return [row.role for row in rows]

    def has_role(self, user_id: str, role: str) -> bool:
        return self.exists(user_id=user_id, role=role)

    def add_role(self, user_id: str, role: str) -> bool:
        """Return True when a row was inserted, False when it already existed."""
        if self.has_role(user_id, role):
            return False
        self.create(user_id=user_id, role=role)
        return True

    def remove_role(self, user_id: str, role: str) -> bool:
        """Return True when a row was deleted."""
        return self.delete_where(UserRole.user_id == user_id, UserRole.role == role) > 0

    def remove_all(self, user_id: str) -> int:
        return self.delete_where(UserRole.user_id == user_id)
