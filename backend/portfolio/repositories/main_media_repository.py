"""Data access for project main media."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.main_media import MainMedia
from .base_repository import BaseRepository


class MainMediaRepository(BaseRepository[MainMedia]):
    def __init__(self, db: Session):
        super().__init__(db, MainMedia)

    def list_for_project(self, project_id: str, *, include_hidden: bool = True) -> List[MainMedia]:
        query = self._build_query().filter(MainMedia.project_id == project_id)
        if not include_hidden:
            query = query.filter(MainMedia.is_thumbnail_hidden.is_(False))
        return self._execute_query(query.order_by(MainMedia.display_order, MainMedia.id))

    def max_display_order(self, project_id: str) -> Optional[int]:
        query = self.db.query(func.max(MainMedia.display_order)).filter(
            MainMedia.project_id == project_id
        )
        return self._execute_scalar(query)

    def delete_for_project(self, project_id: str) -> int:
        return self.delete_where(MainMedia.project_id == project_id)

    def find_image_row(self, project_id: str, image_url: str) -> Optional[MainMedia]:
        """Non-video row in ``project_id`` pointing at ``image_url``."""
        return (
            self._build_query()
            .filter(
                MainMedia.project_id == project_id,
                MainMedia.image_url == image_url,
                MainMedia.is_video.is_(False),
            )
            .first()
        )
