"""Repository for the inbound webhook ledger."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ..models.webhook_event import WebhookEvent
from .base_repository import BaseRepository


class WebhookEventRepository(BaseRepository[WebhookEvent]):
    def __init__(self, db: Session) -> None:
        super().__init__(db, WebhookEvent)

    def find_by_source_and_event_id(self, source: str, event_id: str) -> WebhookEvent | None:
        return self.find_one_by(source=source, event_id=event_id)

    def list_events(
        self,
        *,
        source: str | None = None,
        status: str | None = None,
        since_hours: int = 24,
        limit: int = 50,
    ) -> list[WebhookEvent]:
        cutoff = datetime.now(timezone.utc) - timedelta(hours=since_hours)
        query = self._build_query().filter(WebhookEvent.received_at >= cutoff)
        if source:
            query = query.filter(WebhookEvent.source == source)
        if status:
            query = query.filter(WebhookEvent.status == status)
        return self._execute_query(query.order_by(WebhookEvent.received_at.desc()).limit(limit))
