"""Behind-the-scenes images attached to a project."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from ..core.constants import DEFAULT_BTS_CATEGORY
from ..database import Base
from .types import new_uuid, now_utc

if TYPE_CHECKING:
    from .project import Project


class BtsImage(Base):
    __tablename__ = "bts_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[Optional[str]] = mapped_column(Text)
    size: Mapped[Optional[str]] = mapped_column(String(20))
    aspect_ratio: Mapped[Optional[str]] = mapped_column(String(20))
    category: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_BTS_CATEGORY)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=now_utc, server_default=func.now(), nullable=False
    )

    project: Mapped["Project"] = relationship("Project", back_populates="bts_images")

    def __repr__(self) -> str:
        return f"<BtsImage {self.id} project={self.project_id} order={self.sort_order}>"
