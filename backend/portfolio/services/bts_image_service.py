"""Service for behind-the-scenes galleries."""

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_BTS_CATEGORY
from ..core.exceptions import ValidationException
from ..models.bts_image import BtsImage
from ..repositories.bts_image_repository import BtsImageRepository
from .base import BaseService


@dataclass
class BtsSaveResult:
    message: str
    created: List[BtsImage] = field(default_factory=list)
    deleted: int = 0
    duplicates_skipped: int = 0


class BtsImageService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = BtsImageRepository(db)

    @BaseService.measure_operation("list_bts_images")
    def list_images(self, project_id: str) -> List[BtsImage]:
        return self.repository.list_for_project(project_id)

    @BaseService.measure_operation("save_bts_images")
    def save_images(
        self,
        project_id: str,
        urls: Optional[List[str]],
        *,
        caption: Optional[str] = None,
        category: Optional[str] = None,
        replace_existing: bool = False,
    ) -> BtsSaveResult:
        if not project_id:
            raise ValidationException("Project ID is required")

        # keep first occurrence order, drop blanks
        clean_urls: List[str] = []
        for url in urls or []:
            if isinstance(url, str) and url.strip() and url.strip() not in clean_urls:
                clean_urls.append(url.strip())

        category = category or DEFAULT_BTS_CATEGORY
        if replace_existing:
            return self._replace(project_id, clean_urls, caption, category)
        return self._append(project_id, clean_urls, caption, category)

    def _replace(
        self, project_id: str, urls: List[str], caption: Optional[str], category: str
    ) -> BtsSaveResult:
        """Sync the gallery to exactly ``urls``, in that order."""
        with self.transaction():
            existing = {image.image_url: image for image in self.repository.list_for_project(project_id)}
            wanted = set(urls)
            deleted = self.repository.delete_urls(
                project_id, [url for url in existing if url not in wanted]
            )

            new_rows = []
            for index, url in enumerate(urls):
                current = existing.get(url)
                if current is not None:
                    current.sort_order = index
                else:
                    new_rows.append(
                        {
                            "project_id": project_id,
                            "image_url": url,
                            "caption": caption or f"BTS Media {index + 1}",
                            "category": category,
                            "sort_order": index,
                        }
                    )
            created = self.repository.bulk_create(new_rows) if new_rows else []

        self.logger.info(
            "BTS gallery replaced",
            extra={
                "evt": "bts_replaced",
                "project_id": project_id,
                "created_count": len(created),
                "deleted": deleted,
            },
        )
        return BtsSaveResult(
            message="BTS media updated successfully (replaced).", created=created, deleted=deleted
        )

    def _append(
        self, project_id: str, urls: List[str], caption: Optional[str], category: str
    ) -> BtsSaveResult:
        if not urls:
            return BtsSaveResult(message="No new BTS images to add.")

        with self.transaction():
            existing_urls = {image.image_url for image in self.repository.list_for_project(project_id)}
            new_urls = [url for url in urls if url not in existing_urls]
            if not new_urls:
                return BtsSaveResult(
                    message="All provided BTS images already exist for this project (append mode).",
                    duplicates_skipped=len(urls),
                )

            current_max = self.repository.max_sort_order(project_id)
            start = -1 if current_max is None else current_max
            created = self.repository.bulk_create(
                [
                    {
                        "project_id": project_id,
                        "image_url": url,
                        "caption": caption or f"BTS Image {index + 1}",
                        "category": category,
                        "sort_order": start + 1 + index,
                    }
                    for index, url in enumerate(new_urls)
                ]
            )

        return BtsSaveResult(
            message=f"{len(created)} new BTS images added.",
            created=created,
            duplicates_skipped=len(urls) - len(new_urls),
        )

    @BaseService.measure_operation("delete_bts_image")
    def delete_image(self, project_id: str, image_url: str) -> int:
        if not project_id or not image_url:
            raise ValidationException("Project ID and image URL are required")
        with self.transaction():
            return self.repository.delete_urls(project_id, [image_url])
