# backend/tests/conftest.py
"""
Pytest configuration.

Tests run against in-memory SQLite. Clerk, Supabase Storage, Vimeo, the
package manager and the package registry are replaced with stubs through
FastAPI dependency overrides, and the caller is identified by the
``X-Test-User`` header instead of a Clerk session token.
"""

import base64
import os
from typing import Iterator, Optional

# Set testing mode BEFORE any portfolio imports
os.environ["PORTFOLIO_TESTING"] = "1"
os.environ["CLERK_WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(b"test-webhook-secret").decode()
os.environ["CI"] = "1"

from fastapi import HTTPException, Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from portfolio import models  # noqa: F401,E402
from portfolio.api.dependencies.auth import (  # noqa: E402
    get_current_user_id,
    get_current_user_id_optional,
)
from portfolio.api.dependencies.database import get_db  # noqa: E402
from portfolio.api.dependencies.services import (  # noqa: E402
    get_clerk_client,
    get_dependency_service,
    get_storage_client,
    get_video_service,
)
from portfolio.database import Base, SessionLocal, engine  # noqa: E402
from portfolio.integrations.package_manager import PipPackageManager  # noqa: E402
from portfolio.main import app  # noqa: E402
from portfolio.models.user_role import UserRole  # noqa: E402
from portfolio.services.dependency_service import DependencyService  # noqa: E402
from portfolio.services.video_service import VideoService  # noqa: E402
from tests.helpers import (  # noqa: E402
    ADMIN_USER_ID,
    SUPER_ADMIN_USER_ID,
    TEST_USER_HEADER,
    FakeRunner,
    StubClerk,
    StubRegistry,
    StubStorage,
    StubVimeo,
)

WEBHOOK_SECRET = os.environ["CLERK_WEBHOOK_SECRET"]


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def grant_role(db: Session):
    def _grant(user_id: str, role: str = "admin") -> None:
        db.add(UserRole(user_id=user_id, role=role))
        db.commit()

    return _grant


@pytest.fixture
def admin_user(grant_role) -> str:
    grant_role(ADMIN_USER_ID, "admin")
    return ADMIN_USER_ID


@pytest.fixture
def clerk_stub() -> StubClerk:
    return StubClerk({SUPER_ADMIN_USER_ID: {"superAdmin": True}})


@pytest.fixture
def storage_stub() -> StubStorage:
    return StubStorage()


@pytest.fixture
def vimeo_stub() -> StubVimeo:
    return StubVimeo(
        {
            "76979871": {
                "title": "The New Vimeo Player",
                "thumbnail_large": "https://i.vimeocdn.com/video/452001751_640.jpg",
                "upload_date": "2013-10-15 14:08:29",
            }
        }
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def package_manager(tmp_path, runner) -> PipPackageManager:
    (tmp_path / "pyproject.toml").write_text(
        "[project]\n"
        'name = "demo"\n'
        'dependencies = ["fastapi>=0.110", "httpx==0.27.0"]\n'
        "[project.optional-dependencies]\n"
        'test = ["pytest>=8.0"]\n',
        encoding="utf-8",
    )
    return PipPackageManager(tmp_path, runner=runner)


@pytest.fixture
def registry_stub() -> StubRegistry:
    return StubRegistry({"fastapi": "FastAPI framework", "httpx": "The next generation HTTP client."})


@pytest.fixture
def dependency_service(db: Session, package_manager, registry_stub) -> DependencyService:
    return DependencyService(db, package_manager, registry_stub)


def _header_user(request: Request) -> Optional[str]:
    return request.headers.get(TEST_USER_HEADER)


@pytest.fixture
def client(db: Session, clerk_stub, storage_stub, vimeo_stub, package_manager, registry_stub):
    """Create a test client with the test database and stubbed integrations."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    async def override_current_user_id(request: Request) -> str:
        user_id = _header_user(request)
        if not user_id:
            raise HTTPException(status_code=401, detail="Authentication required")
        return user_id

    async def override_current_user_id_optional(request: Request) -> Optional[str]:
        return _header_user(request)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = override_current_user_id
    app.dependency_overrides[get_current_user_id_optional] = override_current_user_id_optional
    app.dependency_overrides[get_clerk_client] = lambda: clerk_stub
    app.dependency_overrides[get_storage_client] = lambda: storage_stub
    app.dependency_overrides[get_video_service] = lambda: VideoService(vimeo_stub)
    app.dependency_overrides[get_dependency_service] = lambda: DependencyService(
        db, package_manager, registry_stub
    )

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()
