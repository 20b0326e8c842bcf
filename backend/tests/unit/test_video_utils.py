import pytest

from portfolio.utils.video import (
    extract_tags_from_role,
    extract_video_info,
    is_valid_uuid,
    normalize_url,
    youtube_embed_url,
)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ?t=42",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube.com/live/dQw4w9WgXcQ",
        "youtube.com/watch?v=dQw4w9WgXcQ#comments",
    ],
)
def test_extract_video_info_youtube_variants(url):
    info = extract_video_info(url)
    assert info is not None
    assert info.platform == "youtube"
    assert info.id == "dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "url",
    [
        "https://vimeo.com/76979871",
        "https://player.vimeo.com/video/76979871?h=abc",
        "https://vimeo.com/76979871/a1b2c3d4e5",
    ],
)
def test_extract_video_info_vimeo_variants(url):
    info = extract_video_info(url)
    assert info is not None
    assert (info.platform, info.id) == ("vimeo", "76979871")


def test_extract_video_info_linkedin_activity():
    info = extract_video_info("https://www.linkedin.com/feed/update/urn:li:activity:7123456789")
    assert info is not None
    assert (info.platform, info.id) == ("linkedin", "7123456789")


@pytest.mark.parametrize(
    "url", [None, "", "https://example.com/video.mp4", "https://www.youtube.com/watch?v=short"]
)
def test_extract_video_info_unsupported(url):
    assert extract_video_info(url) is None


def test_youtube_embed_url_has_player_params():
    assert youtube_embed_url("dQw4w9WgXcQ").startswith("https://www.youtube.com/embed/dQw4w9WgXcQ?")


def test_normalize_url_collapses_video_links_and_drops_tracking():
    assert normalize_url("https://youtu.be/dQw4w9WgXcQ") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert normalize_url("https://player.vimeo.com/video/76979871") == "https://vimeo.com/76979871"
    assert (
        normalize_url("https://cdn.example.com/a.jpg?utm_source=x&size=large")
        == "https://cdn.example.com/a.jpg?size=large"
    )
    assert normalize_url("relative/path.jpg") == "relative/path.jpg"
    assert normalize_url(None) == ""


def test_is_valid_uuid():
    assert is_valid_uuid("9b2f4c5e-3a1d-4b6e-8f7a-1c2d3e4f5a6b")
    assert not is_valid_uuid("directed-1")
    assert not is_valid_uuid(None)


def test_extract_tags_from_role():
    assert extract_tags_from_role(" Director, DP ,, Editor ") == ["Director", "DP", "Editor"]
    assert extract_tags_from_role(None) == []
