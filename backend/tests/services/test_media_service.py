from datetime import datetime, timedelta, timezone

import pytest

from portfolio.core.constants import MAX_QUERY_LIMIT
from portfolio.core.exceptions import NotFoundException, ValidationException
from portfolio.models.media import Media
from portfolio.schemas.media import (
    DuplicateCheckRequest,
    MediaCreate,
    MediaInfoRequest,
    MediaUpdate,
)
from portfolio.services.media_service import MediaService
from portfolio.services.video_service import VideoService
from tests.helpers import StubVimeo

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def service(db) -> MediaService:
    return MediaService(db, VideoService(StubVimeo()))


def _media(db, minutes: int = 0, **fields) -> Media:
    values = {"filename": "file.jpg", "filetype": "image/jpeg", "filesize": 100}
    values.update(fields)
    row = Media(created_at=BASE_TIME + timedelta(minutes=minutes), **values)
    db.add(row)
    db.commit()
    return row


def test_create_and_update_media_maps_metadata(service):
    created = service.create_media(
        MediaCreate(filename="hero.jpg", metadata={"fileHash": "abc"}), uploaded_by="user_admin"
    )
    assert created.media_metadata == {"fileHash": "abc"}
    assert created.uploaded_by == "user_admin"

    updated = service.update_media(created.id, MediaUpdate(tags=["hero"], metadata={"w": 10}))
    assert updated.tags == ["hero"]
    assert updated.media_metadata == {"w": 10}


def test_update_and_delete_missing_media(service):
    with pytest.raises(NotFoundException):
        service.update_media("missing", MediaUpdate(filename="x"))
    with pytest.raises(NotFoundException):
        service.delete_media("missing")


def test_list_media_filters_by_filetype_prefix_and_tag(db, service):
    _media(db, 0, filename="a.jpg", filetype="image/jpeg", tags=["bts"])
    _media(db, 1, filename="b.png", filetype="image/png")
    _media(db, 2, filename="c.mp4", filetype="video/mp4", tags=["bts"])

    assert [m.filename for m in service.list_media(filetype="image")] == ["b.png", "a.jpg"]
    assert [m.filename for m in service.list_media(tag="bts")] == ["c.mp4", "a.jpg"]
    assert [m.filename for m in service.list_media(tag="bts", skip=1, limit=1)] == ["a.jpg"]


def test_tag_filter_reaches_rows_past_the_query_cap(db, service):
    _media(db, 0, filename="old-bts.jpg", tags=["bts"])
    db.add_all(
        Media(
            filename=f"recent-{i}.jpg",
            filetype="image/jpeg",
            tags=["portfolio"],
            created_at=BASE_TIME + timedelta(days=1, minutes=i),
        )
        for i in range(MAX_QUERY_LIMIT)
    )
    db.commit()

    assert [m.filename for m in service.list_media(tag="bts")] == ["old-bts.jpg"]


def test_tag_filter_matches_whole_tags_only(db, service):
    _media(db, 0, filename="a.jpg", tags=["bts-extra", "BTS"])
    _media(db, 1, filename="b.jpg", tags=["bts"])

    assert [m.filename for m in service.list_media(tag="bts")] == ["b.jpg"]
    assert [m.filename for m in service.list_media(tag="BTS")] == ["a.jpg"]


def test_count_media(db, service):
    _media(db, 0, filetype="image/jpeg")
    _media(db, 1, filetype="image/jpeg")
    _media(db, 2, filetype=None)
    assert service.count_media() == {"total": 3, "by_filetype": {"image/jpeg": 2, "unknown": 1}}


def test_duplicate_check_requires_some_input(service):
    with pytest.raises(ValidationException):
        service.check_duplicate(DuplicateCheckRequest())


def test_duplicate_check_by_normalized_url(db, service):
    _media(db, 0, filename="clip", public_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ")

    result = service.check_duplicate(DuplicateCheckRequest(url="https://youtu.be/dQw4w9WgXcQ"))

    assert result.is_duplicate
    assert result.match_type == "url"
    assert result.reason == 'URL already exists as "clip"'


def test_duplicate_check_by_video_id_in_metadata(db, service):
    _media(db, 0, filename="vimeo clip", public_url="https://vimeo.com/76979871/abc", media_metadata={"vimeoId": "76979871"})

    result = service.check_duplicate(DuplicateCheckRequest(url="https://player.vimeo.com/video/76979871"))

    assert result.is_duplicate
    assert result.match_type == "videoId"


def test_duplicate_check_by_file_details(db, service):
    _media(db, 0, filename="first.jpg", media_metadata={"fileHash": "h1"})
    _media(db, 1, filename="second.jpg", filepath="uploads/second.jpg")

    by_hash = service.check_duplicate(DuplicateCheckRequest(fileHash="h1"))
    assert (by_hash.is_duplicate, by_hash.match_type) == (True, "hash")

    by_name = service.check_duplicate(DuplicateCheckRequest(filename="second.jpg"))
    assert by_name.match_type == "filename"

    by_path = service.check_duplicate(DuplicateCheckRequest(filepath="uploads/second.jpg", filename="x.jpg"))
    assert by_path.match_type == "path"

    assert not service.check_duplicate(DuplicateCheckRequest(filename="new.jpg")).is_duplicate


def test_cleanup_duplicates_keeps_oldest(db, service):
    keep_hash = _media(db, 0, filename="keep", media_metadata={"fileHash": "h"})
    drop_hash = _media(db, 1, filename="dup hash", media_metadata={"fileHash": "h"})
    keep_url = _media(db, 2, filename="keep url", public_url="https://cdn.example.com/x.jpg")
    drop_url = _media(db, 3, filename="dup url", public_url="https://cdn.example.com/x.jpg")
    _media(db, 4, filename="unique")

    result = service.cleanup_duplicates()

    assert result.duplicates_removed == 2
    assert set(result.duplicate_ids) == {drop_hash.id, drop_url.id}
    remaining = {m.id for m in service.list_media()}
    assert keep_hash.id in remaining and keep_url.id in remaining
    assert len(remaining) == 3


def test_cleanup_duplicates_empty_library(service):
    result = service.cleanup_duplicates()
    assert result.message == "No media items found"
    assert result.duplicates_removed == 0


def test_media_info_by_id_and_url(db, service):
    row = _media(db, 0, public_url="https://cdn.example.com/info.jpg", project_id=None)

    by_id = service.media_info(MediaInfoRequest(mediaId=row.id, includeUsage=True))
    assert by_id.media.id == row.id
    assert by_id.usage is not None

    by_url = service.media_info(MediaInfoRequest(url="https://cdn.example.com/info.jpg"))
    assert by_url.media.id == row.id
    assert by_url.usage is None

    with pytest.raises(ValidationException):
        service.media_info(MediaInfoRequest())


def test_add_video_to_library(service):
    video, media = service.add_video_to_library("https://youtu.be/dQw4w9WgXcQ", is_bts=True)

    assert video.platform == "youtube"
    assert media.filetype == "youtube"
    assert media.tags == ["video", "youtube", "bts"]
    assert media.media_metadata["youtubeId"] == "dQw4w9WgXcQ"
    assert media.thumbnail_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"

    with pytest.raises(ValidationException):
        service.add_video_to_library("https://example.com/not-a-video")


def test_storage_usage(db, service):
    _media(db, 0, filetype="image/jpeg", filesize=1024**3)
    _media(db, 1, filetype="video/mp4", filesize=1024**3)

    usage = service.storage_usage()

    assert usage.file_count == 2
    assert usage.total_gb == 2.0
    assert usage.by_filetype["video/mp4"].bytes == 1024**3
