"""Site-wide content tables: settings, tag ordering and contact messages."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
import ulid

from ..database import Base
from .types import TimestampMixin, now_utc


class SiteSetting(TimestampMixin, Base):
    """Key/value text settings rendered by the public site (hero, about, contact...)."""

    __tablename__ = "site_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SiteSetting {self.key}>"


class TagOrder(Base):
    """Display order of filter tags (categories, roles) on the public projects page."""

    __tablename__ = "tag_order"
    __table_args__ = (
        UniqueConstraint("tag_type", "tag_name", name="uq_tag_order_type_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tag_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    tag_name: Mapped[str] = mapped_column(String(255), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )


class ContactMessage(Base):
    """Message submitted through the public contact form."""

    __tablename__ = "contact_messages"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )
