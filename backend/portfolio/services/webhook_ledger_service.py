"""Service for logging inbound webhooks and recognising redeliveries."""

from __future__ import annotations

from datetime import datetime, timezone
import time
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.webhook_event import WebhookEvent
from ..repositories.webhook_event_repository import WebhookEventRepository
from .base import BaseService

TERMINAL_STATUSES = {"processed", "ignored"}


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class WebhookLedgerService(BaseService):
    """Business logic for webhook ledger entries."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.repository = WebhookEventRepository(db)

    @BaseService.measure_operation("webhook_ledger.find_existing")
    def find_existing(self, *, source: str, event_id: str | None) -> WebhookEvent | None:
        if not event_id:
            return None
        return self.repository.find_by_source_and_event_id(source, event_id)

    @staticmethod
    def already_handled(event: WebhookEvent | None) -> bool:
        return event is not None and event.status in TERMINAL_STATUSES

    @BaseService.measure_operation("webhook_ledger.log_received")
    def log_received(
        self,
        *,
        source: str,
        event_type: str,
        payload: dict[str, Any],
        event_id: str | None = None,
    ) -> WebhookEvent:
        """
        Log a received webhook before processing.

        A redelivery of a known event id bumps ``retry_count`` on the existing row
        instead of inserting a new one.
        """
        existing = self.find_existing(source=source, event_id=event_id)
        if existing:
            existing.retry_count = (existing.retry_count or 0) + 1
            self.repository.flush()
            return existing

        try:
            return self.repository.create(
                source=source,
                event_type=event_type or "unknown",
                event_id=event_id,
                payload=payload,
                status="received",
                received_at=_now_utc(),
                retry_count=0,
            )
        except RepositoryException as exc:
            # Another worker inserted the same delivery first.
            if isinstance(exc.__cause__, IntegrityError):
                self.db.rollback()
                existing = self.find_existing(source=source, event_id=event_id)
                if existing is not None:
                    existing.retry_count = (existing.retry_count or 0) + 1
                    self.repository.flush()
                    return existing
            raise

    @BaseService.measure_operation("webhook_ledger.mark_processed")
    def mark_processed(
        self,
        event: WebhookEvent,
        *,
        related_user_id: str | None = None,
        duration_ms: int | None = None,
        status: str = "processed",
    ) -> WebhookEvent:
        """Mark webhook as successfully processed."""
        event.status = status
        event.processed_at = _now_utc()
        event.processing_error = None
        event.related_user_id = related_user_id
        event.processing_duration_ms = duration_ms
        self.repository.flush()
        return event

    @BaseService.measure_operation("webhook_ledger.mark_failed")
    def mark_failed(
        self,
        event: WebhookEvent,
        *,
        error: str,
        duration_ms: int | None = None,
    ) -> WebhookEvent:
        """Mark webhook as failed."""
        event.status = "failed"
        event.processing_error = error[:2000]
        event.processed_at = _now_utc()
        event.processing_duration_ms = duration_ms
        self.repository.flush()
        return event

    @BaseService.measure_operation("webhook_ledger.list_events")
    def list_events(
        self,
        *,
        source: str | None = None,
        status: str | None = None,
        since_hours: int = 24,
        limit: int = 50,
    ) -> list[WebhookEvent]:
        return self.repository.list_events(
            source=source, status=status, since_hours=since_hours, limit=limit
        )

    @staticmethod
    def elapsed_ms(start: float) -> int:
        return int((time.monotonic() - start) * 1000)
