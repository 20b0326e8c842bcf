"""Turn pasted video URLs into embed/thumbnail data."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
import logging
from typing import Any, Dict, Optional

from ..core.constants import GENERIC_VIDEO_ICON
from ..core.enums import VideoPlatform
from ..integrations.vimeo_client import VimeoClient
from ..utils.video import (
    extract_video_info,
    vimeo_embed_url,
    vimeo_fallback_thumbnail_url,
    youtube_embed_url,
    youtube_thumbnail_url,
)

logger = logging.getLogger(__name__)


@dataclass
class ProcessedVideo:
    platform: str
    id: str
    url: str
    embed_url: str
    thumbnail_url: str
    title: str
    upload_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_vimeo_date(value: Any) -> Optional[str]:
    # Vimeo v2 returns "YYYY-MM-DD HH:MM:SS"
    if not value:
        return None
    try:
        return datetime.strptime(str(value), "%Y-%m-%d %H:%M:%S").isoformat()
    except ValueError:
        return None


class VideoService:
    """Stateless helper; the Vimeo client is injectable for tests."""

    def __init__(self, vimeo: Optional[VimeoClient] = None):
        self.vimeo = vimeo or VimeoClient()

    def process_video_url(self, url: str) -> Optional[ProcessedVideo]:
        info = extract_video_info(url)
        if info is None:
            return None

        if info.platform == VideoPlatform.YOUTUBE.value:
            return ProcessedVideo(
                platform=info.platform,
                id=info.id,
                url=url,
                embed_url=youtube_embed_url(info.id),
                thumbnail_url=youtube_thumbnail_url(info.id),
                title=f"YouTube Video {info.id}",
            )

        if info.platform == VideoPlatform.VIMEO.value:
            metadata = self.vimeo.get_video(info.id) or {}
            return ProcessedVideo(
                platform=info.platform,
                id=info.id,
                url=url,
                embed_url=vimeo_embed_url(info.id),
                thumbnail_url=metadata.get("thumbnail_large")
                or vimeo_fallback_thumbnail_url(info.id),
                title=metadata.get("title") or f"Vimeo Video {info.id}",
                upload_date=_parse_vimeo_date(metadata.get("upload_date")),
            )

        # LinkedIn posts cannot be embedded as players; link out with a generic icon
        return ProcessedVideo(
            platform=info.platform,
            id=info.id,
            url=url,
            embed_url=url,
            thumbnail_url=GENERIC_VIDEO_ICON,
            title=f"LinkedIn Post {info.id}",
        )
