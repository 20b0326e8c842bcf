# backend/portfolio/core/enums.py
"""
Core enums for the portfolio backend.

These values are stored as plain strings in the database; the enums keep the
vocabulary in one place for validation and comparisons.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles mirrored between Clerk metadata and the user_roles table.

    Only ADMIN gates anything today; EDITOR and VIEWER are accepted so that
    Clerk metadata listing them round-trips cleanly.
    """

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


class RoleAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


class UpdateMode(str, Enum):
    """
    Dependency update policies.

    GLOBAL is only valid on a single dependency and means "inherit the
    dashboard-wide mode".
    """

    GLOBAL = "global"
    MANUAL = "manual"
    CONSERVATIVE = "conservative"
    AUTO_MINOR = "auto-minor"
    AUTO = "auto"

    @classmethod
    def global_choices(cls) -> set[str]:
        return {member.value for member in cls if member is not cls.GLOBAL}


class AuditSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditStatus(str, Enum):
    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class VideoPlatform(str, Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    LINKEDIN = "linkedin"


class CheckStatus(str, Enum):
    """Per-check outcomes reported by the system status endpoint."""

    OK = "ok"
    ERROR = "error"
    INCOMPLETE = "incomplete"
    DEGRADED = "degraded"
    NOT_CHECKED = "not-checked"
