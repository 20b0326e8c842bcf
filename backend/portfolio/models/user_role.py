# backend/portfolio/models/user_role.py
"""
Application-side role assignments.

Clerk owns identity; this table is the app's copy of which Clerk user holds
which role. It is reconciled from Clerk ``public_metadata`` by the role sync
service and is what ``require_admin`` actually checks.

Attributes:
    id: ULID primary key
    user_id: Clerk user id (``user_...``)
    role: One of admin, editor, viewer
    created_at: Assignment timestamp
"""

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
import ulid

from ..database import Base
from .types import now_utc


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserRole {self.user_id}:{self.role}>"
