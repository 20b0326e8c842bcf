# backend/portfolio/services/setup_service.py
"""
Unified setup: create missing tables for selected feature areas.

Alembic owns the schema in deployed environments. This service covers the
first-run path the admin setup page uses, creating only what is missing and
seeding the default site settings.
"""

from typing import Dict, Iterable, List

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models  # noqa: F401  (populates Base.metadata)
from ..core.exceptions import ServiceException, ValidationException
from ..database import Base
from ..database.schema import SchemaRegistryError, creation_order, get_table_config
from .base import BaseService
from .site_content_service import SettingsService

SETUP_TYPES: Dict[str, tuple[str, ...]] = {
    "settings": ("site_settings",),
    "projects": ("projects",),
    "media": ("media",),
    "main_media": ("main_media",),
    "bts": ("bts_images",),
    "dependencies": ("dependencies", "dependency_settings"),
    "security": ("user_roles", "security_audits"),
    "webhooks": ("webhook_events",),
    "tags": ("tag_order",),
    "contact": ("contact_messages",),
}


def parse_setup_types(raw: str | None) -> List[str]:
    """``all`` or a comma-separated subset of SETUP_TYPES."""
    requested = [token.strip() for token in (raw or "all").split(",") if token.strip()]
    if not requested or "all" in requested:
        return list(SETUP_TYPES)
    unknown = [token for token in requested if token not in SETUP_TYPES]
    if unknown:
        raise ValidationException(
            f"Unknown setup type(s): {', '.join(unknown)}",
            code="INVALID_SETUP_TYPE",
            details={"allowed": sorted(SETUP_TYPES)},
        )
    return requested


class SetupService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def _existing_tables(self) -> set[str]:
        return set(inspect(self.db.connection()).get_table_names())

    @BaseService.measure_operation("unified_setup")
    def run(self, setup_types: Iterable[str]) -> Dict[str, Dict[str, object]]:
        types = list(setup_types)
        wanted = [table for setup_type in types for table in SETUP_TYPES[setup_type]]
        try:
            ordered = creation_order(wanted)
        except SchemaRegistryError as exc:
            raise ServiceException(str(exc), code="SCHEMA_REGISTRY_ERROR") from exc

        existing = self._existing_tables()
        created: List[str] = []
        failed: Dict[str, str] = {}
        for name in ordered:
            if name in existing:
                continue
            table = Base.metadata.tables.get(name)
            if table is None:
                failed[name] = "No model is registered for this table"
                continue
            try:
                table.create(bind=self.db.connection(), checkfirst=True)
                self.db.commit()
                created.append(name)
            except SQLAlchemyError as exc:
                self.db.rollback()
                failed[name] = str(exc)
                self.logger.error(
                    "Table creation failed",
                    extra={"evt": "setup_table_failed", "table": name, "error": str(exc)},
                )

        seeded = 0
        if "settings" in types and "site_settings" not in failed:
            settings_service = SettingsService(self.db)
            if "site_settings" in created or not settings_service.get_settings():
                seeded = settings_service.seed_defaults()

        results: Dict[str, Dict[str, object]] = {}
        for setup_type in types:
            tables = SETUP_TYPES[setup_type]
            errors = [f"{name}: {failed[name]}" for name in tables if name in failed]
            made = [name for name in tables if name in created]
            if errors:
                results[setup_type] = {"success": False, "message": "; ".join(errors)}
                continue
            labels = ", ".join(_display(name) for name in tables)
            message = f"{labels} created" if made else f"{labels} already exists"
            if setup_type == "settings" and seeded:
                message += f" ({seeded} default settings inserted)"
            results[setup_type] = {"success": True, "message": message, "tables": list(tables)}

        self.logger.info(
            "Unified setup finished",
            extra={"evt": "unified_setup", "tables_created": created, "failed": sorted(failed)},
        )
        return results


def _display(name: str) -> str:
    config = get_table_config(name)
    return config.display_name if config else name
