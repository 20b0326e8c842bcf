"""Compare the live database with the registered tables and models."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models  # noqa: F401  (populates Base.metadata)
from ..database import Base, get_db_pool_status
from ..database.schema import CURRENT_SCHEMA_VERSION, TableConfig, get_all_tables
from ..database.session_utils import get_dialect_name

logger = logging.getLogger(__name__)


@dataclass
class TableStatus:
    name: str
    display_name: str
    required: bool
    exists: bool
    status: str
    missing_columns: List[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    status: str
    version: int
    tables: List[TableStatus]
    missing_tables: List[str]
    incomplete_tables: List[str]
    checked_at: datetime

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "total": len(self.tables),
            "ok": sum(1 for table in self.tables if table.status == "ok"),
            "missing": len(self.missing_tables),
            "incomplete": len(self.incomplete_tables),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["counts"] = self.counts
        return data


class DatabaseValidator:
    """
    Check each registered table for existence and missing columns.

    The overall status is ``healthy`` when every required table exists and
    ``needs_setup`` otherwise; incomplete optional tables are reported but do
    not change it.
    """

    def __init__(self, db: Session):
        self.db = db

    def _check_table(self, config: TableConfig, existing: set[str], inspector: Any) -> TableStatus:
        status = TableStatus(
            name=config.name,
            display_name=config.display_name,
            required=config.required,
            exists=config.name in existing,
            status="missing",
        )
        if not status.exists:
            return status

        model_table = Base.metadata.tables.get(config.name)
        if model_table is None:
            status.status = "ok"
            return status

        live_columns = {column["name"] for column in inspector.get_columns(config.name)}
        status.missing_columns = [
            column.name for column in model_table.columns if column.name not in live_columns
        ]
        status.status = "incomplete" if status.missing_columns else "ok"
        return status

    def validate(self) -> ValidationReport:
        inspector = inspect(self.db.connection())
        existing = set(inspector.get_table_names())
        tables = [self._check_table(config, existing, inspector) for config in get_all_tables()]

        missing = [table.name for table in tables if not table.exists]
        incomplete = [table.name for table in tables if table.status == "incomplete"]
        required_missing = [table.name for table in tables if table.required and not table.exists]
        report = ValidationReport(
            status="needs_setup" if required_missing else "healthy",
            version=CURRENT_SCHEMA_VERSION,
            tables=tables,
            missing_tables=missing,
            incomplete_tables=incomplete,
            checked_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Database validated",
            extra={"evt": "database_validated", "status": report.status, "missing": missing},
        )
        return report

    def diagnostics(self) -> Dict[str, Any]:
        """Dialect, pool statistics and row counts for the registered tables."""
        inspector = inspect(self.db.connection())
        existing = set(inspector.get_table_names())
        row_counts: Dict[str, Optional[int]] = {}
        for config in get_all_tables():
            table = Base.metadata.tables.get(config.name)
            if table is None or config.name not in existing:
                row_counts[config.name] = None
                continue
            try:
                row_counts[config.name] = int(
                    self.db.execute(select(func.count()).select_from(table)).scalar_one()
                )
            except SQLAlchemyError as exc:
                logger.warning(
                    "Row count failed",
                    extra={"evt": "row_count_failed", "table": config.name, "error": str(exc)},
                )
                self.db.rollback()
                row_counts[config.name] = None

        return {
            "dialect": get_dialect_name(self.db),
            "pool": get_db_pool_status(),
            "tables": row_counts,
            "checked_at": datetime.now(timezone.utc),
        }
