# backend/portfolio/models/media.py
"""
Media library model.

Every file uploaded through the admin (images, videos, documents) gets a row
here. ``metadata`` is free-form JSON written by the uploader; ``fileHash`` in it
is what duplicate detection keys on.
"""

from typing import Any, Optional

from sqlalchemy import BigInteger, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base
from .types import JSONType, StringArray, TimestampMixin, new_uuid


class Media(TimestampMixin, Base):
    __tablename__ = "media"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    original_filename: Mapped[Optional[str]] = mapped_column(Text)
    filepath: Mapped[Optional[str]] = mapped_column(Text)
    public_url: Mapped[Optional[str]] = mapped_column(Text, index=True)
    filesize: Mapped[Optional[int]] = mapped_column(BigInteger)
    filetype: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(StringArray(), nullable=True, default=list)
    # "metadata" is reserved on declarative classes
    media_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSONType, nullable=True, default=dict
    )
    uploaded_by: Mapped[Optional[str]] = mapped_column(String(255))
    project_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def file_hash(self) -> Optional[str]:
        meta = self.media_metadata or {}
        value = meta.get("fileHash")
        return value if isinstance(value, str) and value else None

    def __repr__(self) -> str:
        return f"<Media {self.id} {self.filename!r}>"
