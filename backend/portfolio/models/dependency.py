"""Models backing the dependency update dashboard."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
import ulid

from ..core.enums import UpdateMode
from ..database import Base
from .types import JSONType, TimestampMixin, now_utc


class Dependency(TimestampMixin, Base):
    """
    One package from the project manifest, as last seen by a scan.

    ``update_mode`` is either a concrete policy or ``global`` to inherit the
    dashboard-wide mode stored in ``dependency_settings``. A locked dependency is
    never touched by bulk updates and can only be (re)installed at
    ``locked_version``.
    """

    __tablename__ = "dependencies"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    current_version: Mapped[Optional[str]] = mapped_column(String(100))
    latest_version: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    homepage: Mapped[Optional[str]] = mapped_column(Text)
    license: Mapped[Optional[str]] = mapped_column(String(100))
    is_dev: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    outdated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_security_update: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    vulnerability_count: Mapped[int] = mapped_column(nullable=False, default=0)
    update_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UpdateMode.GLOBAL.value
    )
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locked_version: Mapped[Optional[str]] = mapped_column(String(100))
    last_checked: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Dependency {self.name}@{self.current_version}>"


class DependencySetting(Base):
    """Key/value JSON settings for the dashboard (global update mode, widget layouts)."""

    __tablename__ = "dependency_settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Any] = mapped_column(JSONType, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
        onupdate=now_utc,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<DependencySetting key={self.key}>"
