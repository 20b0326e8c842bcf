"""Service for a project's main media: hero images and embedded videos."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import CUSTOM_THUMBNAIL_CAPTION
from ..core.exceptions import NotFoundException, ValidationException
from ..models.main_media import MainMedia
from ..repositories.main_media_repository import MainMediaRepository
from ..repositories.project_repository import ProjectRepository
from .base import BaseService
from .video_service import VideoService


class MainMediaService(BaseService):
    def __init__(self, db: Session, video_service: Optional[VideoService] = None):
        super().__init__(db)
        self.repository = MainMediaRepository(db)
        self.project_repository = ProjectRepository(db)
        self.video_service = video_service or VideoService()

    def _require_project(self, project_id: str) -> None:
        if not project_id:
            raise ValidationException("Project ID and media are required")
        if self.project_repository.get_by_id(project_id) is None:
            raise NotFoundException("Project not found", code="PROJECT_NOT_FOUND")

    def _build_rows(self, project_id: str, urls: List[str]) -> List[dict]:
        rows = []
        order = 0
        for url in urls:
            if not url or not url.strip():
                continue
            url = url.strip()
            video = self.video_service.process_video_url(url)
            if video:
                # one row per video; the thumbnail doubles as its preview image
                rows.append(
                    {
                        "project_id": project_id,
                        "image_url": video.thumbnail_url,
                        "is_video": True,
                        "video_url": video.embed_url,
                        "video_platform": video.platform,
                        "video_id": video.id,
                        "caption": video.title,
                        "display_order": order,
                        "is_thumbnail_hidden": False,
                    }
                )
            else:
                rows.append(
                    {
                        "project_id": project_id,
                        "image_url": url,
                        "is_video": False,
                        "display_order": order,
                        "is_thumbnail_hidden": False,
                    }
                )
            order += 1
        return rows

    @BaseService.measure_operation("save_main_media")
    def save_main_media(
        self, project_id: str, urls: List[str], *, replace_existing: bool = False
    ) -> List[MainMedia]:
        """
        Store ``urls`` as main media for a project.

        With ``replace_existing`` the current rows are dropped and ordering
        restarts at 0; otherwise new rows continue after the highest
        ``display_order`` already present.
        """
        self._require_project(project_id)
        # no video HTTP lookups while the transaction is open
        rows = self._build_rows(project_id, urls)

        with self.transaction():
            if replace_existing:
                self.repository.delete_for_project(project_id)
                start = 0
            else:
                current_max = self.repository.max_display_order(project_id)
                start = 0 if current_max is None else current_max + 1
            for row in rows:
                row["display_order"] += start
            created = self.repository.bulk_create(rows) if rows else []

        self.logger.info(
            "Main media saved",
            extra={
                "evt": "main_media_saved",
                "project_id": project_id,
                "count": len(created),
                "replace_existing": replace_existing,
            },
        )
        return created

    @BaseService.measure_operation("list_main_media")
    def list_main_media(self, project_id: str, *, include_hidden: bool = True) -> List[MainMedia]:
        return self.repository.list_for_project(project_id, include_hidden=include_hidden)

    @BaseService.measure_operation("delete_main_media")
    def delete_main_media(self, media_id: int) -> None:
        with self.transaction():
            if not self.repository.delete(media_id):
                raise NotFoundException("Media item not found", code="MAIN_MEDIA_NOT_FOUND")

    @BaseService.measure_operation("set_video_thumbnail")
    def set_video_thumbnail(
        self, project_id: str, video_media_id: int, image_url: str
    ) -> tuple[MainMedia, MainMedia]:
        """
        Point a video's preview at ``image_url``.

        The chosen image also gets a hidden, non-video row so it stays in the
        project's media without showing up twice in the gallery.
        """
        if not project_id or not video_media_id or not image_url:
            raise ValidationException("projectId, videoMediaId, and imageUrl are required")

        with self.transaction():
            video = self.repository.get_by_id(video_media_id)
            if video is None:
                raise NotFoundException("Video media not found", code="MAIN_MEDIA_NOT_FOUND")
            if not video.is_video or video.project_id != project_id:
                raise ValidationException("Invalid video media specified")

            video.image_url = image_url

            thumbnail = self.repository.find_image_row(project_id, image_url)
            if thumbnail is None:
                thumbnail = self.repository.create(
                    project_id=project_id,
                    image_url=image_url,
                    is_video=False,
                    display_order=video.display_order or 0,
                    caption=CUSTOM_THUMBNAIL_CAPTION,
                    is_thumbnail_hidden=True,
                )
            elif not thumbnail.is_thumbnail_hidden:
                thumbnail.is_thumbnail_hidden = True
            self.repository.flush()

        return video, thumbnail

    @BaseService.measure_operation("toggle_main_media_visibility")
    def set_visibility(self, media_id: int, is_hidden: bool) -> MainMedia:
        if not isinstance(is_hidden, bool):
            raise ValidationException("is_hidden must be a boolean")
        with self.transaction():
            media = self.repository.update(media_id, is_thumbnail_hidden=is_hidden)
            if media is None:
                raise NotFoundException("Media item not found", code="MAIN_MEDIA_NOT_FOUND")
        return media
