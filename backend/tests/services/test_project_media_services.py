import logging

import pytest

from portfolio.core.exceptions import NotFoundException, ValidationException
from portfolio.models.main_media import MainMedia
from portfolio.models.project import Project
from portfolio.services.bts_image_service import BtsImageService
from portfolio.services.main_media_service import MainMediaService
from portfolio.services.video_service import VideoService
from tests.helpers import StubVimeo


@pytest.fixture
def project(db) -> Project:
    row = Project(title="Tide", image="https://cdn.example.com/tide.jpg", category="Film", role="DP")
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def main_media_service(db) -> MainMediaService:
    return MainMediaService(db, VideoService(StubVimeo()))


# BTS images


def test_bts_append_assigns_order_and_default_captions(db, project):
    service = BtsImageService(db)

    result = service.save_images(project.id, ["a.jpg", " b.jpg ", "a.jpg", ""])

    assert result.message == "2 new BTS images added."
    assert [(img.image_url, img.caption, img.sort_order) for img in result.created] == [
        ("a.jpg", "BTS Image 1", 0),
        ("b.jpg", "BTS Image 2", 1),
    ]


def test_bts_append_skips_existing_urls(db, project):
    service = BtsImageService(db)
    service.save_images(project.id, ["a.jpg"])

    result = service.save_images(project.id, ["a.jpg", "c.jpg"], caption="Set")

    assert result.duplicates_skipped == 1
    assert [(img.image_url, img.caption, img.sort_order) for img in result.created] == [
        ("c.jpg", "Set", 1)
    ]


def test_bts_append_all_duplicates(db, project):
    service = BtsImageService(db)
    service.save_images(project.id, ["a.jpg"])

    result = service.save_images(project.id, ["a.jpg"])

    assert result.message == "All provided BTS images already exist for this project (append mode)."
    assert result.created == []


def test_bts_append_nothing_to_add(db, project):
    assert BtsImageService(db).save_images(project.id, []).message == "No new BTS images to add."


def test_bts_replace_syncs_gallery_to_urls(db, project):
    service = BtsImageService(db)
    service.save_images(project.id, ["a.jpg", "b.jpg", "c.jpg"])

    result = service.save_images(project.id, ["c.jpg", "d.jpg"], replace_existing=True)

    assert result.message == "BTS media updated successfully (replaced)."
    assert result.deleted == 2
    assert [img.caption for img in result.created] == ["BTS Media 2"]
    assert [(img.image_url, img.sort_order) for img in service.list_images(project.id)] == [
        ("c.jpg", 0),
        ("d.jpg", 1),
    ]


def test_bts_replace_logs_counts(db, project, caplog):
    caplog.set_level(logging.INFO)
    service = BtsImageService(db)
    service.save_images(project.id, ["a.jpg"])

    service.save_images(project.id, ["b.jpg"], replace_existing=True)

    record = next(r for r in caplog.records if getattr(r, "evt", None) == "bts_replaced")
    assert record.created_count == 1
    assert record.deleted == 1


def test_bts_delete_image(db, project):
    service = BtsImageService(db)
    service.save_images(project.id, ["a.jpg", "b.jpg"])

    assert service.delete_image(project.id, "a.jpg") == 1
    assert service.delete_image(project.id, "a.jpg") == 0
    with pytest.raises(ValidationException):
        service.delete_image(project.id, "")


# Main media


def test_main_media_save_detects_videos(main_media_service, project):
    rows = main_media_service.save_main_media(
        project.id, ["https://cdn.example.com/still.jpg", "https://youtu.be/dQw4w9WgXcQ"]
    )

    still, video = rows
    assert (still.is_video, still.display_order) == (False, 0)
    assert video.is_video
    assert video.video_platform == "youtube"
    assert video.image_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
    assert video.display_order == 1


def test_main_media_append_continues_after_highest_order(main_media_service, project):
    main_media_service.save_main_media(project.id, ["one.jpg", "two.jpg"])
    added = main_media_service.save_main_media(project.id, ["three.jpg"])
    assert added[0].display_order == 2

    replaced = main_media_service.save_main_media(project.id, ["only.jpg"], replace_existing=True)
    assert replaced[0].display_order == 0
    assert [row.image_url for row in main_media_service.list_main_media(project.id)] == ["only.jpg"]


def test_main_media_replace_looks_up_videos_before_writing(db, project):
    seen_rows = []

    class RecordingVimeo(StubVimeo):
        def get_video(self, video_id):
            seen_rows.append(db.query(MainMedia).filter_by(project_id=project.id).count())
            return super().get_video(video_id)

    service = MainMediaService(db, VideoService(RecordingVimeo()))
    service.save_main_media(project.id, ["one.jpg", "two.jpg"])

    service.save_main_media(project.id, ["https://vimeo.com/76979871"], replace_existing=True)

    assert seen_rows == [2]
    assert [row.is_video for row in service.list_main_media(project.id)] == [True]


def test_main_media_unknown_project(main_media_service):
    with pytest.raises(NotFoundException):
        main_media_service.save_main_media("9b2f4c5e-3a1d-4b6e-8f7a-1c2d3e4f5a6b", ["a.jpg"])


def test_set_video_thumbnail_adds_hidden_row(main_media_service, project):
    _, video = main_media_service.save_main_media(
        project.id, ["still.jpg", "https://vimeo.com/76979871"]
    )

    updated, thumbnail = main_media_service.set_video_thumbnail(project.id, video.id, "custom.jpg")

    assert updated.image_url == "custom.jpg"
    assert thumbnail.is_thumbnail_hidden
    assert thumbnail.caption == "Custom Thumbnail"
    assert not thumbnail.is_video

    # reusing an existing still hides it instead of adding a row
    _, reused = main_media_service.set_video_thumbnail(project.id, video.id, "still.jpg")
    assert reused.is_thumbnail_hidden
    assert len(main_media_service.list_main_media(project.id)) == 3


def test_set_video_thumbnail_rejects_non_video(main_media_service, project):
    (still,) = main_media_service.save_main_media(project.id, ["still.jpg"])
    with pytest.raises(ValidationException):
        main_media_service.set_video_thumbnail(project.id, still.id, "custom.jpg")


def test_visibility_toggle_and_delete(main_media_service, project):
    (row,) = main_media_service.save_main_media(project.id, ["still.jpg"])

    assert main_media_service.set_visibility(row.id, True).is_thumbnail_hidden is True
    assert main_media_service.list_main_media(project.id, include_hidden=False) == []

    main_media_service.delete_main_media(row.id)
    with pytest.raises(NotFoundException):
        main_media_service.delete_main_media(row.id)
