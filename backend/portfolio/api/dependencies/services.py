# backend/portfolio/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Factories here build service instances per request with their database
session and external clients. Tests override the client factories to swap in
stubs.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ...integrations.clerk_client import ClerkClient, build_clerk_client
from ...integrations.package_manager import PackageManager, build_package_manager
from ...integrations.supabase_storage import SupabaseStorageClient, build_storage_client
from ...integrations.vimeo_client import VimeoClient
from ...services.bts_image_service import BtsImageService
from ...services.database_validator import DatabaseValidator
from ...services.dependency_service import DependencyService
from ...services.layout_service import LayoutService
from ...services.main_media_service import MainMediaService
from ...services.media_service import MediaService
from ...services.project_service import ProjectService
from ...services.role_sync_service import RoleSyncService
from ...services.setup_service import SetupService
from ...services.site_content_service import ContactService, SettingsService, TagOrderService
from ...services.system_status_service import SystemStatusService
from ...services.video_service import VideoService
from ...services.webhook_ledger_service import WebhookLedgerService
from .database import get_db


@lru_cache(maxsize=1)
def _clerk_client_singleton() -> Optional[ClerkClient]:
    return build_clerk_client()


def get_clerk_client() -> Optional[ClerkClient]:
    """Shared Clerk Backend API client, or None when Clerk is not configured."""
    return _clerk_client_singleton()


def get_storage_client() -> Optional[SupabaseStorageClient]:
    return build_storage_client()


def get_package_manager() -> PackageManager:
    return build_package_manager()


def get_video_service() -> VideoService:
    return VideoService(VimeoClient())


def get_role_sync_service(
    db: Session = Depends(get_db),
    clerk: Optional[ClerkClient] = Depends(get_clerk_client),
) -> RoleSyncService:
    return RoleSyncService(db, clerk)


def get_webhook_ledger_service(db: Session = Depends(get_db)) -> WebhookLedgerService:
    return WebhookLedgerService(db)


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


def get_main_media_service(
    db: Session = Depends(get_db),
    video_service: VideoService = Depends(get_video_service),
) -> MainMediaService:
    return MainMediaService(db, video_service)


def get_bts_image_service(db: Session = Depends(get_db)) -> BtsImageService:
    return BtsImageService(db)


def get_media_service(
    db: Session = Depends(get_db),
    video_service: VideoService = Depends(get_video_service),
) -> MediaService:
    return MediaService(db, video_service)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_tag_order_service(db: Session = Depends(get_db)) -> TagOrderService:
    return TagOrderService(db)


def get_contact_service(db: Session = Depends(get_db)) -> ContactService:
    return ContactService(db)


def get_layout_service(db: Session = Depends(get_db)) -> LayoutService:
    return LayoutService(db)


def get_dependency_service(
    db: Session = Depends(get_db),
    manager: PackageManager = Depends(get_package_manager),
) -> DependencyService:
    return DependencyService(db, manager)


def get_setup_service(db: Session = Depends(get_db)) -> SetupService:
    return SetupService(db)


def get_database_validator(db: Session = Depends(get_db)) -> DatabaseValidator:
    return DatabaseValidator(db)


def get_system_status_service(
    db: Session = Depends(get_db),
    storage: Optional[SupabaseStorageClient] = Depends(get_storage_client),
) -> SystemStatusService:
    return SystemStatusService(db, storage=storage)
