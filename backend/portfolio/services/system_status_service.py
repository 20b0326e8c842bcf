# backend/portfolio/services/system_status_service.py
"""
Unified system status.

Runs any subset of four checks (database, essential tables, storage buckets,
the API's own health endpoints) and folds them into one overall status:
``error`` if any check errored, ``warning`` if any is incomplete or degraded,
``healthy`` otherwise.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import ESSENTIAL_TABLES
from ..core.enums import CheckStatus
from ..core.exceptions import ValidationException
from ..core.metrics import STATUS_CHECK_TOTAL
from ..integrations.supabase_storage import (
    SupabaseStorageClient,
    SupabaseStorageError,
    build_storage_client,
)

logger = logging.getLogger(__name__)

CHECK_NAMES = ("database", "tables", "storage", "api")
STATUS_FORMATS = ("detailed", "simple")
API_PROBE_PATHS = ("/api/v1/health", "/api/v1/health/lite")


def parse_checks(raw: Optional[str]) -> List[str]:
    requested = [token.strip() for token in (raw or "all").split(",") if token.strip()]
    if not requested or "all" in requested:
        return list(CHECK_NAMES)
    unknown = [token for token in requested if token not in CHECK_NAMES]
    if unknown:
        raise ValidationException(f"Unknown check(s): {', '.join(unknown)}", code="INVALID_CHECK")
    return requested


def overall_status(results: Dict[str, Dict[str, Any]]) -> str:
    statuses = {result.get("status") for result in results.values()}
    if CheckStatus.ERROR.value in statuses:
        return "error"
    if statuses & {CheckStatus.INCOMPLETE.value, CheckStatus.DEGRADED.value}:
        return "warning"
    return "healthy"


class SystemStatusService:
    def __init__(
        self,
        db: Session,
        *,
        storage: Optional[SupabaseStorageClient] = None,
        api_base_url: Optional[str] = None,
        api_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.db = db
        self.storage = storage if storage is not None else build_storage_client()
        self.api_base_url = api_base_url or settings.api_base_url
        self._api_transport = api_transport

    # Individual checks

    def check_database(self) -> Dict[str, Any]:
        start = time.monotonic()
        try:
            self.db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            self.db.rollback()
            return {"status": CheckStatus.ERROR.value, "connected": False, "error": str(exc)}
        return {
            "status": CheckStatus.OK.value,
            "connected": True,
            "latency_ms": round((time.monotonic() - start) * 1000, 2),
        }

    def check_tables(self) -> Dict[str, Any]:
        try:
            existing = set(inspect(self.db.connection()).get_table_names())
        except SQLAlchemyError as exc:
            self.db.rollback()
            return {"status": CheckStatus.ERROR.value, "error": str(exc)}
        details = {
            name: {"exists": name in existing, "status": "ok" if name in existing else "missing"}
            for name in ESSENTIAL_TABLES
        }
        complete = all(item["exists"] for item in details.values())
        return {
            "status": CheckStatus.OK.value if complete else CheckStatus.INCOMPLETE.value,
            "details": details,
        }

    def check_storage(self, *, detailed: bool) -> Dict[str, Any]:
        if self.storage is None:
            return {"status": CheckStatus.ERROR.value, "error": "Supabase storage is not configured"}
        try:
            names = self.storage.bucket_names()
        except SupabaseStorageError as exc:
            return {"status": CheckStatus.ERROR.value, "error": str(exc)}

        existing = set(names)
        missing = [name for name in settings.storage_required_buckets if name not in existing]
        result: Dict[str, Any] = {
            "status": CheckStatus.OK.value if not missing else CheckStatus.INCOMPLETE.value,
            "buckets_count": len(existing),
            "missing": missing,
            "has_all_required": not missing,
        }
        if detailed:
            result["buckets"] = sorted(existing)
        return result

    async def check_api(self) -> Dict[str, Any]:
        endpoints: Dict[str, Dict[str, Any]] = {}
        async with httpx.AsyncClient(
            base_url=self.api_base_url,
            timeout=settings.outbound_timeout_seconds,
            transport=self._api_transport,
        ) as client:
            for path in API_PROBE_PATHS:
                start = time.monotonic()
                try:
                    response = await client.get(path)
                except httpx.RequestError as exc:
                    endpoints[path] = {"status": "error", "error": str(exc)}
                    continue
                endpoints[path] = {
                    "status": "ok" if response.is_success else "error",
                    "status_code": response.status_code,
                    "response_time_ms": round((time.monotonic() - start) * 1000, 2),
                }
        healthy = all(item["status"] == "ok" for item in endpoints.values())
        return {
            "status": CheckStatus.OK.value if healthy else CheckStatus.DEGRADED.value,
            "endpoints": endpoints,
        }

    # Aggregate

    async def get_status(self, checks: List[str], fmt: str = "detailed") -> Dict[str, Any]:
        if fmt not in STATUS_FORMATS:
            raise ValidationException(f"Unknown format: {fmt}", code="INVALID_FORMAT")

        results: Dict[str, Dict[str, Any]] = {}
        # database work stays on this thread; the session is not thread-safe
        if "database" in checks:
            results["database"] = self.check_database()
        if "tables" in checks:
            results["tables"] = self.check_tables()
        if "storage" in checks:
            results["storage"] = await asyncio.to_thread(
                self.check_storage, detailed=fmt == "detailed"
            )
        if "api" in checks:
            results["api"] = await self.check_api()

        for name, result in results.items():
            STATUS_CHECK_TOTAL.labels(check=name, status=result["status"]).inc()

        status = overall_status(results)
        payload: Dict[str, Any] = {
            "system": {
                "status": status,
                "healthy": status == "healthy",
                "timestamp": datetime.now(timezone.utc),
                "checks_requested": checks,
                "format": fmt,
            },
            "results": results,
        }
        if fmt == "simple":
            payload["summary"] = {
                name: results.get(name, {}).get("status", CheckStatus.NOT_CHECKED.value)
                for name in CHECK_NAMES
            }
        if status != "healthy":
            logger.warning(
                "System status degraded",
                extra={"evt": "system_status", "status": status, "checks": checks},
            )
        return payload
