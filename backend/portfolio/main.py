# backend/portfolio/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import (
    admin_roles as admin_roles_v1,
    contact as contact_v1,
    dependencies as dependencies_v1,
    health as health_v1,
    media as media_v1,
    projects as projects_v1,
    prometheus as prometheus_v1,
    settings as settings_v1,
    storage as storage_v1,
    system as system_v1,
    tag_order as tag_order_v1,
    webhooks_clerk as webhooks_clerk_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    if not settings.clerk_jwks_url:
        logger.warning("CLERK_JWKS_URL is not set; authenticated routes will return 401")
    if not settings.clerk_webhook_secret.get_secret_value():
        logger.warning("CLERK_WEBHOOK_SECRET is not set; Clerk webhooks will be rejected")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    # Register unified error envelope handlers
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
    logger.info("CORS allow_origins=%s", settings.cors_allowed_origins)

    api_v1 = APIRouter(prefix="/api/v1")

    # Note: Route order matters - fixed paths inside each router come before /{id} routes
    api_v1.include_router(health_v1.router, prefix="/health")
    api_v1.include_router(projects_v1.router, prefix="/projects")
    api_v1.include_router(media_v1.router, prefix="/media")
    api_v1.include_router(storage_v1.router, prefix="/storage")
    api_v1.include_router(settings_v1.router, prefix="/settings")
    api_v1.include_router(tag_order_v1.router, prefix="/tag-order")
    api_v1.include_router(contact_v1.router, prefix="/contact")
    api_v1.include_router(admin_roles_v1.router, prefix="/admin/roles")
    api_v1.include_router(webhooks_clerk_v1.router, prefix="/webhooks/clerk")
    api_v1.include_router(dependencies_v1.router, prefix="/dependencies")
    api_v1.include_router(system_v1.router)

    app.include_router(api_v1)
    app.include_router(prometheus_v1.router)
    return app


app = create_app()
