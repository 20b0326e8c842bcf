"""Supabase Storage REST client used by the status and setup checks."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
from pydantic import SecretStr

logger = logging.getLogger(__name__)


class SupabaseStorageError(RuntimeError):
    """Raised when the Storage API cannot be reached or rejects the request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SupabaseStorageClient:
    def __init__(
        self,
        *,
        base_url: str,
        service_role_key: str | SecretStr,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        key = (
            service_role_key.get_secret_value()
            if isinstance(service_role_key, SecretStr)
            else service_role_key
        )
        if not base_url or not key:
            raise ValueError("Supabase URL and service role key must be provided")

        self._storage_url = f"{base_url.rstrip('/')}/storage/v1"
        self._headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        self._timeout = timeout
        self._transport = transport

    def list_buckets(self) -> List[Dict[str, Any]]:
        with httpx.Client(
            timeout=self._timeout, transport=self._transport, headers=self._headers
        ) as client:
            try:
                response = client.get(f"{self._storage_url}/bucket")
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "Supabase storage error %s listing buckets: %s",
                    exc.response.status_code,
                    exc.response.text[:500],
                )
                raise SupabaseStorageError(
                    f"Storage API responded with status {exc.response.status_code}",
                    exc.response.status_code,
                ) from exc
            except httpx.RequestError as exc:
                logger.error("Supabase storage request failure: %s", str(exc))
                raise SupabaseStorageError("Failed to reach Supabase Storage") from exc

        payload = response.json()
        return payload if isinstance(payload, list) else []

    def bucket_names(self) -> List[str]:
        return [str(bucket.get("name") or bucket.get("id")) for bucket in self.list_buckets()]


def build_storage_client() -> SupabaseStorageClient | None:
    from ..core.config import settings

    if not settings.supabase_storage_configured:
        return None
    return SupabaseStorageClient(
        base_url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        timeout=settings.outbound_timeout_seconds,
    )
