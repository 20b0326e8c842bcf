"""Minimal Clerk Backend API client for user metadata and role mirroring."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, cast

import httpx
from pydantic import SecretStr

logger = logging.getLogger(__name__)


class ClerkError(RuntimeError):
    """Raised when the Clerk Backend API responds with an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        *,
        error_type: str | None = None,
        error_body: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_type = error_type
        self.error_body = error_body


class ClerkClient:
    """Thin client for the Clerk Backend REST API."""

    def __init__(
        self,
        *,
        secret_key: str | SecretStr,
        base_url: str = "https://api.clerk.com/v1",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        secret_value = (
            secret_key.get_secret_value() if isinstance(secret_key, SecretStr) else secret_key
        )
        if not secret_value:
            raise ValueError("Clerk secret key must be provided")

        self._secret_key = secret_value
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def get_user(self, user_id: str) -> Dict[str, Any]:
        """Fetch a Clerk user (including ``public_metadata``)."""

        if not user_id:
            raise ValueError("user_id must be provided")
        return self.request("GET", f"/users/{user_id}")

    def get_public_metadata(self, user_id: str) -> Dict[str, Any]:
        user = self.get_user(user_id)
        metadata = user.get("public_metadata")
        return metadata if isinstance(metadata, dict) else {}

    def update_public_metadata(self, user_id: str, public_metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``public_metadata`` into the user's existing metadata."""

        return self.request(
            "PATCH",
            f"/users/{user_id}/metadata",
            json_body={"public_metadata": public_metadata},
        )

    def set_roles(self, user_id: str, roles: List[str]) -> Dict[str, Any]:
        return self.update_public_metadata(user_id, {"roles": sorted(set(roles))})

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Dict[str, Any] | None = None,
        params: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Perform a raw Clerk API request and return the parsed JSON payload."""

        url = f"{self._base_url}{path}"
        with httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self._secret_key}",
            },
        ) as client:
            logger.debug(
                "ClerkClient request",
                extra={"evt": "clerk_request", "method": method, "path": path},
            )
            try:
                response = client.request(method, url, json=json_body, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                error_payload: Any | None = None
                error_type: str | None = None
                try:
                    error_payload = exc.response.json()
                    if isinstance(error_payload, dict):
                        errors = error_payload.get("errors") or []
                        if errors and isinstance(errors[0], dict):
                            error_type = errors[0].get("code")
                except json.JSONDecodeError:
                    error_payload = exc.response.text

                logger.error(
                    "Clerk API error %s for %s %s: %s",
                    status,
                    method,
                    path,
                    exc.response.text[:500],
                )
                raise ClerkError(
                    message=f"Clerk API responded with status {status}",
                    status_code=status,
                    error_type=error_type,
                    error_body=error_payload,
                ) from exc
            except httpx.RequestError as exc:
                logger.error("Clerk request failure for %s %s: %s", method, path, str(exc))
                raise ClerkError("Failed to reach Clerk API") from exc

        try:
            return cast(Dict[str, Any], response.json())
        except json.JSONDecodeError as exc:
            logger.error("Invalid JSON from Clerk for %s %s: %s", method, path, response.text)
            raise ClerkError("Received malformed JSON from Clerk") from exc


def build_clerk_client() -> ClerkClient | None:
    """Client from settings, or None when no secret key is configured."""
    from ..core.config import settings

    if not settings.clerk_secret_key.get_secret_value():
        return None
    return ClerkClient(
        secret_key=settings.clerk_secret_key,
        base_url=settings.clerk_api_url,
        timeout=settings.outbound_timeout_seconds,
    )
