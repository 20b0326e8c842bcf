# backend/portfolio/tasks/dependency_tasks.py
"""Scheduled dependency updates."""

import logging
from typing import Any, Callable, Dict, TypeVar, cast

from celery import shared_task

from ..core.config import settings
from ..database import get_db_session, with_db_retry
from ..integrations.package_manager import build_package_manager
from ..services.dependency_service import DependencyService

logger = logging.getLogger(__name__)

_TaskFunc = TypeVar("_TaskFunc", bound=Callable[..., Any])


def _typed_shared_task(*args: Any, **kwargs: Any) -> Callable[[_TaskFunc], _TaskFunc]:
    """Typed wrapper for Celery's shared_task decorator."""
    return cast(Callable[[_TaskFunc], _TaskFunc], shared_task(*args, **kwargs))


def run_scheduled_update() -> Dict[str, Any]:
    """Apply updates with the stored global mode; a no-op while auto-update is off."""
    if not settings.dependency_auto_update_enabled:
        logger.info("[DEPS] Auto-update disabled, skipping scheduled run")
        return {"success": True, "skipped": True, "updated": 0, "failed": 0, "results": []}

    with get_db_session() as db:
        service = DependencyService(db, build_package_manager())
        result = with_db_retry("dependencies.scheduled_update", service.apply_updates)

    logger.info(
        "[DEPS] Scheduled update finished",
        extra={"evt": "dependency_scheduled_update", "updated": result["updated"], "failed": result["failed"]},
    )
    return result


@_typed_shared_task(name="dependencies.scheduled_update", ignore_result=True)
def scheduled_update() -> Dict[str, Any]:
    return run_scheduled_update()
