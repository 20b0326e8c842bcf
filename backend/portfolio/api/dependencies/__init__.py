# backend/portfolio/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .auth import (
    get_current_user_id,
    get_current_user_id_optional,
    require_admin,
    require_super_admin,
)
from .database import get_db

__all__ = [
    # Auth
    "get_current_user_id",
    "get_current_user_id_optional",
    "require_admin",
    "require_super_admin",
    # Database
    "get_db",
]
