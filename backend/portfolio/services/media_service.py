# backend/portfolio/services/media_service.py
"""
Media Library Service

CRUD for the media table plus the maintenance operations the admin media page
uses: duplicate detection before upload, duplicate cleanup, single-item info,
adding a video link to the library and storage usage totals.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ..core.exceptions import NotFoundException, ValidationException
from ..models.media import Media
from ..repositories.media_repository import MediaRepository
from ..schemas.media import (
    CleanupDuplicatesResult,
    DuplicateCheckRequest,
    DuplicateCheckResult,
    MediaCreate,
    MediaInfoRequest,
    MediaInfoResult,
    MediaResponse,
    MediaUpdate,
    StorageUsageResponse,
)
from ..utils.video import extract_video_info, normalize_url
from .base import BaseService
from .video_service import ProcessedVideo, VideoService

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1024**3


def _created_key(item: Media) -> datetime:
    return item.created_at or datetime.min.replace(tzinfo=timezone.utc)


class MediaService(BaseService):
    def __init__(self, db: Session, video_service: Optional[VideoService] = None):
        super().__init__(db)
        self.repository = MediaRepository(db)
        self.video_service = video_service or VideoService()

    # CRUD

    @BaseService.measure_operation("list_media")
    def list_media(
        self,
        *,
        filetype: Optional[str] = None,
        tag: Optional[str] = None,
        skip: int = 0,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[Media]:
        limit = max(1, min(limit, MAX_QUERY_LIMIT))
        skip = max(skip, 0)
        return self.repository.list_filtered(filetype=filetype, tag=tag, skip=skip, limit=limit)

    @BaseService.measure_operation("count_media")
    def count_media(self) -> Dict[str, Any]:
        by_filetype = self.repository.counts_by_filetype()
        return {"total": sum(by_filetype.values()), "by_filetype": by_filetype}

    @BaseService.measure_operation("get_media")
    def get_media(self, media_id: str) -> Media:
        media = self.repository.get_by_id(media_id)
        if media is None:
            raise NotFoundException("Media item not found", code="MEDIA_NOT_FOUND")
        return media

    @BaseService.measure_operation("create_media")
    def create_media(self, payload: MediaCreate, *, uploaded_by: Optional[str] = None) -> Media:
        data = payload.model_dump()
        data["media_metadata"] = data.pop("metadata", None) or {}
        with self.transaction():
            media = self.repository.create(uploaded_by=uploaded_by, **data)
        self.logger.info("Media created", extra={"evt": "media_created", "media_id": media.id})
        return media

    @BaseService.measure_operation("update_media")
    def update_media(self, media_id: str, payload: MediaUpdate) -> Media:
        data = payload.model_dump(exclude_unset=True)
        if "metadata" in data:
            data["media_metadata"] = data.pop("metadata")
        with self.transaction():
            media = self.repository.update(media_id, **data)
            if media is None:
                raise NotFoundException("Media item not found", code="MEDIA_NOT_FOUND")
        return media

    @BaseService.measure_operation("delete_media")
    def delete_media(self, media_id: str) -> None:
        with self.transaction():
            if not self.repository.delete(media_id):
                raise NotFoundException("Media item not found", code="MEDIA_NOT_FOUND")
        self.logger.info("Media deleted", extra={"evt": "media_deleted", "media_id": media_id})

    # Operations

    @BaseService.measure_operation("check_duplicate")
    def check_duplicate(self, request: DuplicateCheckRequest) -> DuplicateCheckResult:
        """
        Look for an existing library item matching an upload.

        A URL is checked first (exact, normalised, then by video id); file
        details are checked after that by hash, filename or storage path.
        """
        if not (request.url or request.file_hash or request.filename or request.filepath):
            raise ValidationException(
                "At least one of url, fileHash, filename, or filepath must be provided"
            )

        if request.url:
            result = self._check_url_duplicate(request.url)
            if result.is_duplicate:
                return result

        if request.file_hash or request.filename or request.filepath:
            return self._check_file_duplicate(request.file_hash, request.filename, request.filepath)

        return DuplicateCheckResult(is_duplicate=False)

    def _check_url_duplicate(self, url: str) -> DuplicateCheckResult:
        candidates = [url]
        normalized = normalize_url(url)
        if normalized and normalized != url:
            candidates.append(normalized)

        info = extract_video_info(url)
        metadata_key = f"{info.platform}Id" if info else None
        match = self.repository.find_url_match(
            candidates,
            metadata_key=metadata_key,
            metadata_value=info.id if info else None,
        )
        if match is None:
            return DuplicateCheckResult(is_duplicate=False)

        match_type = "url"
        if info and (match.media_metadata or {}).get(metadata_key) == info.id:
            match_type = "videoId"
        return DuplicateCheckResult(
            is_duplicate=True,
            existing_item=MediaResponse.model_validate(match),
            reason=f'URL already exists as "{match.filename}"',
            match_type=match_type,
        )

    def _check_file_duplicate(
        self, file_hash: Optional[str], filename: Optional[str], filepath: Optional[str]
    ) -> DuplicateCheckResult:
        match = self.repository.find_file_match(
            file_hash=file_hash, filename=filename, filepath=filepath
        )
        if match is None:
            return DuplicateCheckResult(is_duplicate=False)

        if file_hash and match.file_hash == file_hash:
            match_type = "hash"
        elif filename and match.filename == filename:
            match_type = "filename"
        else:
            match_type = "path"
        return DuplicateCheckResult(
            is_duplicate=True,
            existing_item=MediaResponse.model_validate(match),
            reason=f'File already exists as "{match.filename}"',
            match_type=match_type,
        )

    @BaseService.measure_operation("cleanup_duplicates")
    def cleanup_duplicates(self) -> CleanupDuplicatesResult:
        """
        Delete duplicate library rows, keeping the earliest of each group.

        Rows are grouped by ``metadata.fileHash`` first, then by ``public_url``
        among whatever the hash pass left behind.
        """
        items = self.repository.list_oldest_first()
        if not items:
            return CleanupDuplicatesResult(message="No media items found", duplicates_removed=0)

        hash_groups: Dict[str, List[Media]] = {}
        url_groups: Dict[str, List[Media]] = {}
        for item in items:
            if item.file_hash:
                hash_groups.setdefault(item.file_hash, []).append(item)
            if item.public_url:
                url_groups.setdefault(item.public_url, []).append(item)

        to_remove: List[str] = []
        for group in hash_groups.values():
            if len(group) > 1:
                to_remove.extend(item.id for item in sorted(group, key=_created_key)[1:])

        removed = set(to_remove)
        for group in url_groups.values():
            remaining = [item for item in group if item.id not in removed]
            if len(remaining) > 1:
                extra = [item.id for item in sorted(remaining, key=_created_key)[1:]]
                to_remove.extend(extra)
                removed.update(extra)

        if to_remove:
            with self.transaction():
                self.repository.delete_where(Media.id.in_(to_remove))

        self.logger.info(
            "Media duplicates cleaned up",
            extra={"evt": "media_cleanup", "removed": len(to_remove)},
        )
        return CleanupDuplicatesResult(
            message="Cleanup completed successfully",
            duplicates_removed=len(to_remove),
            duplicate_ids=to_remove,
        )

    @BaseService.measure_operation("media_info")
    def media_info(self, request: MediaInfoRequest) -> MediaInfoResult:
        if not request.media_id and not request.url:
            raise ValidationException("mediaId or url is required")

        if request.media_id:
            media = self.get_media(request.media_id)
        else:
            media = self.repository.find_url_match([request.url or ""])
            if media is None:
                raise NotFoundException("Media item not found", code="MEDIA_NOT_FOUND")

        usage = None
        if request.include_usage:
            usage = {"project_id": media.project_id, "last_used": media.updated_at}
        return MediaInfoResult(
            media=MediaResponse.model_validate(media),
            usage=usage,
            timestamp=datetime.now(timezone.utc),
        )

    @BaseService.measure_operation("add_video_to_library")
    def add_video_to_library(
        self, url: str, *, is_bts: bool = False, uploaded_by: Optional[str] = None
    ) -> tuple[ProcessedVideo, Media]:
        """Process a video link and record it in the media library."""
        if not url:
            raise ValidationException("No URL provided")
        video = self.video_service.process_video_url(url)
        if video is None:
            raise ValidationException("Invalid video URL format", code="INVALID_VIDEO_URL")

        tags = ["video", video.platform] + (["bts"] if is_bts else [])
        with self.transaction():
            media = self.repository.create(
                filename=video.title,
                filepath=url,
                public_url=url,
                filesize=0,
                filetype=video.platform,
                thumbnail_url=video.thumbnail_url,
                tags=tags,
                media_metadata={
                    f"{video.platform}Id": video.id,
                    "isBts": is_bts,
                    "uploadDate": video.upload_date,
                },
                uploaded_by=uploaded_by,
            )
        return video, media

    @BaseService.measure_operation("storage_usage")
    def storage_usage(self) -> StorageUsageResponse:
        totals = self.repository.total_usage()
        return StorageUsageResponse(
            total_bytes=totals["bytes"],
            total_gb=round(totals["bytes"] / BYTES_PER_GB, 2),
            file_count=totals["count"],
            by_filetype=self.repository.usage_by_filetype(),
        )
