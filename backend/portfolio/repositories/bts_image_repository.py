"""Data access for behind-the-scenes images."""

from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.bts_image import BtsImage
from .base_repository import BaseRepository


class BtsImageRepository(BaseRepository[BtsImage]):
    def __init__(self, db: Session):
        super().__init__(db, BtsImage)

    def list_for_project(self, project_id: str) -> List[BtsImage]:
        query = (
            self._build_query()
            .filter(BtsImage.project_id == project_id)
            .order_by(BtsImage.sort_order, BtsImage.created_at)
        )
        return self._execute_query(query)

    def max_sort_order(self, project_id: str) -> Optional[int]:
        query = self.db.query(func.max(BtsImage.sort_order)).filter(
            BtsImage.project_id == project_id
        )
        return self._execute_scalar(query)

    def delete_urls(self, project_id: str, urls: Iterable[str]) -> int:
        url_list = list(urls)
        if not url_list:
            return 0
        return self.delete_where(BtsImage.project_id == project_id, BtsImage.image_url.in_(url_list))

    def delete_for_project(self, project_id: str) -> int:
        return self.delete_where(BtsImage.project_id == project_id)
