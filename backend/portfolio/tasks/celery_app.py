# backend/portfolio/tasks/celery_app.py
"""
Celery application configuration.

Redis is the broker. The only periodic job is the scheduled dependency
update, registered when DEPENDENCY_AUTO_UPDATE_ENABLED is set.
"""

import logging
import os
from typing import Any, Dict

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from ..core.config import settings


def get_beat_schedule() -> Dict[str, Dict[str, Any]]:
    if not settings.dependency_auto_update_enabled:
        return {}
    return {
        "dependencies-scheduled-update": {
            "task": "dependencies.scheduled_update",
            "schedule": crontab(hour=settings.dependency_auto_update_cron_hour, minute=0),
            "options": {"queue": "maintenance"},
        }
    }


def create_celery_app() -> Celery:
    """
    Create and configure the Celery application.

    Returns:
        Celery: Configured Celery application instance
    """
    # Priority: CELERY_BROKER_URL -> settings.redis_url
    broker_url = os.getenv("CELERY_BROKER_URL") or settings.redis_url
    # Ensure Redis URL includes database number
    if not any(broker_url.endswith(f"/{i}") for i in range(16)):
        broker_url = f"{broker_url}/0"

    celery_app = Celery("portfolio", broker=broker_url)
    celery_app.conf.update(
        {
            "task_serializer": "json",
            "accept_content": ["json"],
            "result_serializer": "json",
            "timezone": "UTC",
            "enable_utc": True,
            "task_ignore_result": True,
            # Package installs can be slow
            "task_soft_time_limit": 900,
            "task_time_limit": 1200,
            "task_acks_late": True,
            "worker_prefetch_multiplier": 1,
            "worker_hijack_root_logger": False,
            "beat_schedule_filename": "celerybeat-schedule",
            "broker_transport_options": {"visibility_timeout": 3600},
        }
    )
    celery_app.conf.imports = ("portfolio.tasks.dependency_tasks",)
    celery_app.conf.task_routes = {"dependencies.*": {"queue": "maintenance"}}
    celery_app.conf.beat_schedule = get_beat_schedule()
    return celery_app


# Disable Celery's default logging configuration
@setup_logging.connect  # type: ignore[misc]
def config_loggers(*args: Any, **kwargs: Any) -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


celery_app = create_celery_app()
