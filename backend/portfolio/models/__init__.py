"""
Database models for the portfolio backend.

Grouped by concern:
- Portfolio content: projects, main media, BTS images, media library
- Site content: settings, tag order, contact messages
- Access control: user_roles mirrored from Clerk
- Tooling: dependencies, dependency settings, security audits, webhook ledger
"""

from .bts_image import BtsImage
from .dependency import Dependency, DependencySetting
from .main_media import MainMedia
from .media import Media
from .project import Project
from .security_audit import SecurityAudit
from .site_content import ContactMessage, SiteSetting, TagOrder
from .user_role import UserRole
from .webhook_event import WebhookEvent

__all__ = [
    "BtsImage",
    "ContactMessage",
    "Dependency",
    "DependencySetting",
    "MainMedia",
    "Media",
    "Project",
    "SecurityAudit",
    "SiteSetting",
    "TagOrder",
    "UserRole",
    "WebhookEvent",
]
