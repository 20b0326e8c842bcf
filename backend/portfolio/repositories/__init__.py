"""
Repository layer for the portfolio backend.

Repositories own queries and flush; services own transactions.
"""

from .base_repository import BaseRepository, IRepository
from .bts_image_repository import BtsImageRepository
from .dependency_repository import DependencyRepository, DependencySettingRepository
from .main_media_repository import MainMediaRepository
from .media_repository import MediaRepository
from .project_repository import ProjectRepository
from .security_audit_repository import SecurityAuditRepository
from .site_content_repository import (
    ContactMessageRepository,
    SiteSettingRepository,
    TagOrderRepository,
)
from .user_role_repository import UserRoleRepository
from .webhook_event_repository import WebhookEventRepository

__all__ = [
    "BaseRepository",
    "BtsImageRepository",
    "ContactMessageRepository",
    "DependencyRepository",
    "DependencySettingRepository",
    "IRepository",
    "MainMediaRepository",
    "MediaRepository",
    "ProjectRepository",
    "SecurityAuditRepository",
    "SiteSettingRepository",
    "TagOrderRepository",
    "UserRoleRepository",
    "WebhookEventRepository",
]
