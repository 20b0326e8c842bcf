"""Services for site settings, tag ordering and contact messages."""

import json
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_SITE_SETTINGS
from ..core.exceptions import ValidationException
from ..models.site_content import ContactMessage, TagOrder
from ..repositories.site_content_repository import (
    ContactMessageRepository,
    SiteSettingRepository,
    TagOrderRepository,
)
from .base import BaseService


def _stringify(value: Any) -> Optional[str]:
    """Settings are stored as text; non-string JSON values are kept as JSON."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


class SettingsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = SiteSettingRepository(db)

    @BaseService.measure_operation("get_settings")
    def get_settings(self) -> Dict[str, Optional[str]]:
        return self.repository.get_map()

    @BaseService.measure_operation("save_settings")
    def save_settings(self, payload: Any) -> List[str]:
        if not isinstance(payload, dict):
            raise ValidationException("Invalid settings data", code="INVALID_SETTINGS")
        if not payload:
            return []

        with self.transaction():
            for key, value in payload.items():
                self.repository.upsert(str(key), _stringify(value))

        keys = sorted(str(key) for key in payload)
        self.logger.info("Site settings saved", extra={"evt": "settings_saved", "keys": keys})
        return keys

    @BaseService.measure_operation("seed_default_settings")
    def seed_defaults(self, *, overwrite: bool = False) -> int:
        """Insert the default settings. Existing keys are left alone unless ``overwrite``."""
        existing = self.repository.get_map()
        seeded = 0
        with self.transaction():
            for key, value in DEFAULT_SITE_SETTINGS.items():
                if key in existing and not overwrite:
                    continue
                self.repository.upsert(key, value)
                seeded += 1
        return seeded


class TagOrderService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = TagOrderRepository(db)

    @BaseService.measure_operation("list_tag_order")
    def list_order(self, tag_type: Optional[str] = None) -> List[TagOrder]:
        return self.repository.list_ordered(tag_type)

    @BaseService.measure_operation("save_tag_order")
    def save_order(self, tag_type: str, tags: List[str]) -> List[TagOrder]:
        if not tag_type:
            raise ValidationException("Invalid request format")
        names: List[str] = []
        for tag in tags:
            name = tag.strip() if isinstance(tag, str) else ""
            if name and name not in names:
                names.append(name)

        with self.transaction():
            rows = self.repository.replace(tag_type, names)
        return rows


class ContactService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = ContactMessageRepository(db)

    @BaseService.measure_operation("submit_contact_message")
    def submit(self, name: str, email: str, message: str) -> ContactMessage:
        with self.transaction():
            row = self.repository.create(name=name, email=email, message=message)
        self.logger.info("Contact message stored", extra={"evt": "contact_received", "id": row.id})
        return row

    @BaseService.measure_operation("list_contact_messages")
    def list_recent(self, limit: int = 50) -> List[ContactMessage]:
        return self.repository.list_recent(limit)
