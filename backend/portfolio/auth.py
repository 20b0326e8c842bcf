"""Clerk session token verification using the instance JWKS."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
import json
import logging
from typing import Any, Optional

import httpx
import jwt
from jwt.algorithms import RSAAlgorithm
from pydantic import BaseModel, ConfigDict

from .core.config import settings

logger = logging.getLogger(__name__)


class ClerkSessionClaims(BaseModel):
    """Claims from a verified Clerk session JWT."""

    model_config = ConfigDict(extra="allow")

    sub: str
    exp: int
    iat: Optional[int] = None
    iss: Optional[str] = None
    sid: Optional[str] = None
    azp: Optional[str] = None


class JWKSCache:
    """Cache for the Clerk JWKS with 1-hour TTL."""

    def __init__(self, jwks_url: str | None = None, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._jwks_url = jwks_url
        self._transport = transport
        self._keys: Optional[dict[str, dict[str, object]]] = None
        self._fetched_at: Optional[datetime] = None
        self._ttl = timedelta(hours=1)
        self._lock = asyncio.Lock()

    @property
    def jwks_url(self) -> str:
        return self._jwks_url or settings.clerk_jwks_url

    async def get_signing_key(self, token: str) -> dict[str, object]:
        """Get the signing key for a token, fetching JWKS if needed."""
        if not self.jwks_url:
            raise ValueError("Clerk JWKS URL not configured")

        unverified_header = jwt.get_unverified_header(token)
        kid = unverified_header.get("kid")
        if not kid:
            raise ValueError("Missing kid in token header")

        if self._should_refresh():
            await self._fetch_jwks()

        if not self._keys or kid not in self._keys:
            # key rotation: refetch once before giving up
            await self._fetch_jwks(force=True)
            if not self._keys or kid not in self._keys:
                raise ValueError(f"Unknown signing key: {kid}")

        return self._keys[kid]

    def _should_refresh(self) -> bool:
        if self._keys is None or self._fetched_at is None:
            return True
        return datetime.now(timezone.utc) - self._fetched_at > self._ttl

    async def _fetch_jwks(self, *, force: bool = False) -> None:
        async with self._lock:
            if not force and not self._should_refresh() and self._keys:
                return
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
                jwks = response.json()

            self._keys = {key["kid"]: key for key in jwks.get("keys", []) if "kid" in key}
            self._fetched_at = datetime.now(timezone.utc)

    def clear(self) -> None:
        self._keys = None
        self._fetched_at = None


_jwks_cache = JWKSCache()


async def verify_session_token(
    token: str, *, cache: JWKSCache | None = None
) -> Optional[ClerkSessionClaims]:
    """
    Verify a Clerk session JWT (RS256) and return its claims.

    Returns None for any token that is missing, malformed, expired, signed by an
    unknown key or issued by an unexpected issuer.
    """
    if not token:
        return None
    cache = cache or _jwks_cache

    try:
        signing_key = await cache.get_signing_key(token)
        public_key: Any = RSAAlgorithm.from_jwk(json.dumps(signing_key))
        payload = jwt.decode(
            token,
            public_key,
            algorithms=["RS256"],
            issuer=settings.clerk_issuer or None,
            options={"verify_aud": False, "require": ["exp", "sub"]},
        )
        return ClerkSessionClaims(**payload)
    except jwt.ExpiredSignatureError:
        logger.debug("Clerk session token expired")
        return None
    except (jwt.InvalidTokenError, ValueError) as exc:
        logger.info("Rejected Clerk session token", extra={"evt": "auth_rejected", "reason": str(exc)})
        return None
    except httpx.HTTPError as exc:
        logger.warning("Could not fetch Clerk JWKS", extra={"evt": "jwks_fetch_failed", "error": str(exc)})
        return None
