# backend/portfolio/routes/v1/webhooks_clerk.py
"""
Clerk webhook endpoint (delivered through Svix).

Mounted at /api/v1/webhooks/clerk. User lifecycle events keep ``user_roles``
in step with Clerk public metadata.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import hashlib
import hmac
import json
import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ...api.dependencies.services import get_role_sync_service, get_webhook_ledger_service
from ...core.config import settings
from ...core.exceptions import RepositoryException
from ...core.metrics import CLERK_WEBHOOK_TOTAL
from ...models.webhook_event import WebhookEvent
from ...schemas.roles import WebhookAckResponse
from ...services.role_sync_service import RoleSyncService
from ...services.webhook_ledger_service import WebhookLedgerService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

WEBHOOK_SOURCE = "clerk"
_SECRET_PREFIX = "whsec_"


def _decode_secret(secret: str) -> bytes:
    raw = secret[len(_SECRET_PREFIX) :] if secret.startswith(_SECRET_PREFIX) else secret
    try:
        return base64.b64decode(raw)
    except (binascii.Error, ValueError):
        logger.error("Clerk webhook secret is not valid base64")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook authentication not configured",
        ) from None


def compute_svix_signature(secret: str, msg_id: str, timestamp: str, raw_body: bytes) -> str:
    """Base64 HMAC-SHA256 of ``{id}.{timestamp}.{body}`` keyed with the decoded secret."""
    signed = f"{msg_id}.{timestamp}.".encode("utf-8") + raw_body
    digest = hmac.new(_decode_secret(secret), signed, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_svix_signature(
    *,
    secret: str,
    msg_id: str,
    timestamp: str,
    signature_header: str,
    raw_body: bytes,
    tolerance_seconds: int,
    now: Optional[float] = None,
) -> None:
    """Raise 401 unless one ``v1,`` entry in the header matches and the timestamp is fresh."""
    try:
        sent_at = int(timestamp)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook timestamp"
        ) from None

    current = time.time() if now is None else now
    if abs(current - sent_at) > tolerance_seconds:
        logger.warning(
            "Clerk webhook timestamp outside tolerance",
            extra={"evt": "webhook_stale", "svix_id": msg_id, "skew_s": int(current - sent_at)},
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Stale webhook")

    expected = compute_svix_signature(secret, msg_id, timestamp, raw_body)
    for entry in signature_header.split():
        version, _, candidate = entry.partition(",")
        if version == "v1" and hmac.compare_digest(candidate, expected):
            return

    logger.warning(
        "Clerk webhook signature mismatch",
        extra={"evt": "webhook_invalid_sig", "svix_id": msg_id},
    )
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")


def _handle_event(
    role_sync: RoleSyncService, event_type: str, data: dict[str, Any]
) -> tuple[str, Optional[str]]:
    """Apply one event; returns the ledger status and the affected user id."""
    user_id = data.get("id") if isinstance(data.get("id"), str) else None

    if event_type in {"user.created", "user.updated"}:
        if not user_id:
            raise ValueError(f"{event_type} payload has no user id")
        metadata = data.get("public_metadata") or {}
        role_sync.sync_user_roles(
            user_id,
            metadata if isinstance(metadata, dict) else {},
            prune=event_type == "user.updated",
            trigger="webhook",
        )
        return "processed", user_id

    if event_type == "user.deleted":
        if user_id:
            role_sync.remove_all_roles(user_id)
        return "processed", user_id

    return "ignored", user_id


def _log_received(
    ledger: WebhookLedgerService, event_type: str, payload: dict[str, Any], msg_id: str
) -> WebhookEvent:
    event = ledger.log_received(
        source=WEBHOOK_SOURCE, event_type=event_type, payload=payload, event_id=msg_id
    )
    ledger.db.commit()
    return event


def _finish(ledger: WebhookLedgerService, event: WebhookEvent, **kwargs: Any) -> None:
    error = kwargs.pop("error", None)
    if error is not None:
        ledger.mark_failed(event, error=error, **kwargs)
    else:
        ledger.mark_processed(event, **kwargs)
    ledger.db.commit()


@router.post("", response_model=WebhookAckResponse)
async def clerk_webhook(
    request: Request,
    ledger: WebhookLedgerService = Depends(get_webhook_ledger_service),
    role_sync: RoleSyncService = Depends(get_role_sync_service),
) -> Any:
    msg_id = request.headers.get("svix-id")
    timestamp = request.headers.get("svix-timestamp")
    signature = request.headers.get("svix-signature")
    if not msg_id or not timestamp or not signature:
        CLERK_WEBHOOK_TOTAL.labels(event_type="unknown", outcome="rejected").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing svix headers")

    secret = settings.clerk_webhook_secret.get_secret_value()
    if not secret:
        logger.error("Clerk webhook secret is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook authentication not configured",
        )

    raw_body = await request.body()
    try:
        verify_svix_signature(
            secret=secret,
            msg_id=msg_id,
            timestamp=timestamp,
            signature_header=signature,
            raw_body=raw_body,
            tolerance_seconds=settings.webhook_tolerance_seconds,
        )
    except HTTPException:
        CLERK_WEBHOOK_TOTAL.labels(event_type="unknown", outcome="rejected").inc()
        raise

    try:
        payload = json.loads(raw_body or b"{}")
    except json.JSONDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON") from None
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")

    event_type = str(payload.get("type") or "unknown")
    data = payload.get("data") if isinstance(payload.get("data"), dict) else {}

    existing = await asyncio.to_thread(ledger.find_existing, source=WEBHOOK_SOURCE, event_id=msg_id)
    if ledger.already_handled(existing):
        CLERK_WEBHOOK_TOTAL.labels(event_type=event_type, outcome="duplicate").inc()
        logger.info(
            "Duplicate Clerk webhook acknowledged",
            extra={"evt": "webhook_dedup", "svix_id": msg_id, "type": event_type},
        )
        return WebhookAckResponse(ok=True, duplicate=True, event_type=event_type)

    try:
        event = await asyncio.to_thread(_log_received, ledger, event_type, payload, msg_id)
    except RepositoryException as exc:
        logger.warning("Unable to persist webhook ledger entry: %s", str(exc))
        event = None

    start = time.monotonic()
    try:
        outcome, user_id = await asyncio.to_thread(_handle_event, role_sync, event_type, data)
    except Exception as exc:
        CLERK_WEBHOOK_TOTAL.labels(event_type=event_type, outcome="error").inc()
        logger.exception(
            "Clerk webhook processing failed",
            extra={"evt": "webhook_failed", "svix_id": msg_id, "type": event_type, "error": str(exc)},
        )
        if event is not None:
            await asyncio.to_thread(
                _finish, ledger, event, error=str(exc), duration_ms=ledger.elapsed_ms(start)
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Webhook processing failed"},
        )

    if event is not None:
        await asyncio.to_thread(
            _finish,
            ledger,
            event,
            related_user_id=user_id,
            duration_ms=ledger.elapsed_ms(start),
            status=outcome,
        )
    CLERK_WEBHOOK_TOTAL.labels(event_type=event_type, outcome=outcome).inc()
    logger.info(
        "Clerk webhook handled",
        extra={"evt": "webhook_handled", "svix_id": msg_id, "type": event_type, "outcome": outcome},
    )
    return WebhookAckResponse(ok=True, event_type=event_type, outcome=outcome)
