# backend/portfolio/utils/video.py
"""
Video URL parsing for YouTube, Vimeo and LinkedIn links.

Admins paste whatever URL the browser shows; these helpers pull out the
platform and video id and build the embed and thumbnail URLs the site renders.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..core.enums import VideoPlatform

logger = logging.getLogger(__name__)

_YOUTUBE_ID = r"([a-zA-Z0-9_-]{11})"

_YOUTUBE_PATTERNS = [
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube\.com/watch\?(?:[^&]*&)*v=" + _YOUTUBE_ID + r"(?:&[^&]*)*$",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=" + _YOUTUBE_ID + r"(?:[&?].*)?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube\.com/embed/" + _YOUTUBE_ID + r"(?:\?.*)?$", re.IGNORECASE
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube-nocookie\.com/embed/" + _YOUTUBE_ID + r"(?:\?.*)?$",
        re.IGNORECASE,
    ),
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/" + _YOUTUBE_ID + r"(?:\?.*)?$", re.IGNORECASE),
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube\.com/live/" + _YOUTUBE_ID + r"(?:\?.*)?$", re.IGNORECASE
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?youtube\.com/shorts/" + _YOUTUBE_ID + r"(?:\?.*)?$",
        re.IGNORECASE,
    ),
]

_VIMEO_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.)?player\.vimeo\.com/video/(\d+)(?:\?.*)?$", re.IGNORECASE),
    re.compile(r"(?:https?://)?(?:www\.)?vimeo\.com/(\d+)(?:[/?].*)?$", re.IGNORECASE),
    # private/unlisted links carry a hash segment after the id
    re.compile(r"(?:https?://)?(?:www\.)?vimeo\.com/(\d+)/[a-zA-Z0-9]+(?:\?.*)?$", re.IGNORECASE),
]

_LINKEDIN_PATTERNS = [
    re.compile(
        r"(?:https?://)?(?:www\.)?linkedin\.com/feed/update/urn:li:activity:([0-9a-zA-Z-]+)(?:\?.*)?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?linkedin\.com/posts/[^/]+-([0-9a-zA-Z-]+)(?:\?.*)?$",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:https?://)?(?:www\.)?linkedin\.com/company/[^/]+/posts/([0-9a-zA-Z-]+)(?:\?.*)?$",
        re.IGNORECASE,
    ),
]

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)

_TRACKING_PARAMS = {"utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content"}

YOUTUBE_EMBED_PARAMS = "autoplay=1&rel=0&modestbranding=1&mute=0"
VIMEO_EMBED_PARAMS = "autoplay=1&title=0&byline=0&portrait=0&muted=0"


@dataclass(frozen=True)
class VideoInfo:
    platform: str
    id: str


def extract_video_info(url: Optional[str]) -> Optional[VideoInfo]:
    """Return the platform and id for a supported video URL, else None."""
    if not url or not isinstance(url, str):
        return None

    clean_url = url.strip().split("#", 1)[0]

    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(clean_url)
        if match and len(match.group(1)) == 11:
            return VideoInfo(VideoPlatform.YOUTUBE.value, match.group(1))

    for pattern in _VIMEO_PATTERNS:
        match = pattern.search(clean_url)
        if match and match.group(1).isdigit():
            return VideoInfo(VideoPlatform.VIMEO.value, match.group(1))

    for pattern in _LINKEDIN_PATTERNS:
        match = pattern.search(clean_url)
        if match and match.group(1):
            return VideoInfo(VideoPlatform.LINKEDIN.value, match.group(1))

    logger.debug("No video platform matched", extra={"evt": "video_url_unmatched", "url": url})
    return None


def youtube_embed_url(video_id: str) -> str:
    return f"https://www.youtube.com/embed/{video_id}?{YOUTUBE_EMBED_PARAMS}"


def youtube_thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def vimeo_embed_url(video_id: str) -> str:
    return f"https://player.vimeo.com/video/{video_id}?{VIMEO_EMBED_PARAMS}"


def vimeo_fallback_thumbnail_url(video_id: str) -> str:
    return f"https://i.vimeocdn.com/video/{video_id}_640x360.jpg"


def is_valid_uuid(value: Optional[str]) -> bool:
    return bool(value) and _UUID_RE.match(value or "") is not None


def extract_tags_from_role(role: Optional[str]) -> List[str]:
    """Split a comma-separated role string into trimmed, non-empty tags."""
    if not role:
        return []
    return [tag.strip() for tag in role.split(",") if tag.strip()]


def normalize_url(url: Optional[str]) -> str:
    """
    Canonical form of a media URL for duplicate detection.

    Drops utm_* tracking parameters and collapses YouTube and Vimeo links to
    their watch-page form. Strings that are not absolute URLs come back unchanged.
    """
    if not url:
        return ""

    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return url

    host = parts.netloc.lower()
    if "youtube.com" in host or "youtu.be" in host:
        info = extract_video_info(url)
        if info:
            return f"https://www.youtube.com/watch?v={info.id}"
    if "vimeo.com" in host:
        info = extract_video_info(url)
        if info:
            return f"https://vimeo.com/{info.id}"

    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in _TRACKING_PARAMS
    ]
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", urlencode(query), parts.fragment))
