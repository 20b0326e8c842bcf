"""Vimeo oEmbed-style metadata lookups (public v2 API, no auth)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

VIMEO_API_URL = "https://vimeo.com/api/v2/video"


class VimeoClient:
    def __init__(
        self,
        *,
        base_url: str = VIMEO_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def get_video(self, video_id: str) -> Optional[Dict[str, Any]]:
        """
        Metadata for a public Vimeo video, or None.

        Private and deleted videos answer 404; callers fall back to the CDN
        thumbnail pattern in that case.
        """
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = client.get(f"{self._base_url}/{video_id}.json")
            except httpx.RequestError as exc:
                logger.warning(
                    "Vimeo metadata request failed",
                    extra={"evt": "vimeo_metadata_failed", "video_id": video_id, "error": str(exc)},
                )
                return None

        if response.status_code != 200:
            logger.warning(
                "Vimeo metadata unavailable",
                extra={
                    "evt": "vimeo_metadata_unavailable",
                    "video_id": video_id,
                    "status_code": response.status_code,
                },
            )
            return None

        payload = response.json()
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            return payload[0]
        return None
