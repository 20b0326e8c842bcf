"""Main media rows: the images and videos shown at the top of a project page."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ..database import Base
from .types import now_utc

if TYPE_CHECKING:
    from .project import Project


class MainMedia(Base):
    """
    One image or video in a project's main gallery.

    For videos, ``image_url`` holds the thumbnail and ``video_url`` the embed URL.
    Rows with ``is_thumbnail_hidden`` are custom thumbnails that back a video and
    are not rendered as gallery items of their own.
    """

    __tablename__ = "main_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[Optional[str]] = mapped_column(Text)
    is_video: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    video_platform: Mapped[Optional[str]] = mapped_column(String(50))
    video_id: Mapped[Optional[str]] = mapped_column(String(255))
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_thumbnail_hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )

    project: Mapped["Project"] = relationship("Project", back_populates="main_media")

    def __repr__(self) -> str:
        kind = "video" if self.is_video else "image"
        return f"<MainMedia {self.id} {kind} project={self.project_id}>"
