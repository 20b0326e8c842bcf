# backend/portfolio/models/project.py
"""
Portfolio project model.

A project is one piece of work shown on the public site: a film, a music video,
a photo series. Its hero media lives in ``main_media`` and its behind-the-scenes
gallery in ``bts_images``.

Attributes:
    id: UUID primary key (string form)
    title: Display title, required
    category: Free-form category, e.g. "Short Film"
    role: Comma-separated roles held on the project, doubling as tags
    image: Cover image URL
    video_url: Source URL of the showreel video, if any
    video_platform / video_id: Parsed from video_url
    project_date: Release date used for ordering
    is_public / publish_date: Visibility controls for the public listing
"""

import datetime as dt
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .types import TimestampMixin, new_uuid

if TYPE_CHECKING:
    from .bts_image import BtsImage
    from .main_media import MainMedia


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    content: Mapped[Optional[str]] = mapped_column(Text)
    image: Mapped[Optional[str]] = mapped_column(Text)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[Optional[str]] = mapped_column(String(255))
    type: Mapped[Optional[str]] = mapped_column(String(255))
    role: Mapped[Optional[str]] = mapped_column(String(255))
    date: Mapped[Optional[str]] = mapped_column(String(50))
    project_date: Mapped[Optional[dt.date]] = mapped_column(Date)
    client: Mapped[Optional[str]] = mapped_column(String(255))
    url: Mapped[Optional[str]] = mapped_column(Text)
    video_url: Mapped[Optional[str]] = mapped_column(Text)
    video_platform: Mapped[Optional[str]] = mapped_column(String(50))
    video_id: Mapped[Optional[str]] = mapped_column(String(255))
    special_notes: Mapped[Optional[str]] = mapped_column(Text)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    publish_date: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True))

    bts_images: Mapped[List["BtsImage"]] = relationship(
        "BtsImage",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="BtsImage.sort_order",
        lazy="select",
    )
    main_media: Mapped[List["MainMedia"]] = relationship(
        "MainMedia",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="MainMedia.display_order",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Project {self.id} {self.title!r}>"
