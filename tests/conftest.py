# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from core.cache import get_cache
from core.config import Settings, get_settings
from core.supabase_client import get_db, get_supabase_client
from main import create_app
from models.principal import Principal
from tests.fake_supabase import FakeSupabase


SUPER_ADMIN_EMAIL = "root@buzzvar.io"
ADMIN_EMAIL = "mod@buzzvar.io"


@pytest.fixture
def settings() -> Settings:
    """Known allow-lists; schema flags left at their deployed defaults."""
    return Settings(
        SUPER_ADMIN_EMAILS=f"{SUPER_ADMIN_EMAIL.upper()}, other-root@buzzvar.io",
        ADMIN_EMAILS=ADMIN_EMAIL,
        SITE_URL="https://admin.buzzvar.io",
    )


@pytest.fixture
def flagged_settings(settings) -> Settings:
    """Schema with admin_users and both is_active columns present."""
    return settings.model_copy(update={
        "ADMIN_USERS_TABLE": True,
        "USERS_IS_ACTIVE_COLUMN": True,
        "VENUES_IS_ACTIVE_COLUMN": True,
    })


# -------------------------------------------------
# Principals
# -------------------------------------------------
@pytest.fixture
def super_admin() -> Principal:
    return Principal(id="super-1", email=SUPER_ADMIN_EMAIL)


@pytest.fixture
def admin() -> Principal:
    return Principal(id="admin-1", email=ADMIN_EMAIL)


@pytest.fixture
def owner() -> Principal:
    return Principal(id="owner-1", email="owner@club.io")


@pytest.fixture
def other_owner() -> Principal:
    return Principal(id="owner-2", email="rival@club.io")


@pytest.fixture
def stranger() -> Principal:
    return Principal(id="nobody-1", email="nobody@example.io")


# -------------------------------------------------
# Data
# -------------------------------------------------
@pytest.fixture
def db() -> FakeSupabase:
    """
    Two venues: v1 owned by owner-1, v2 owned by owner-2.
    """
    return FakeSupabase({
        "users": [
            {"id": "super-1", "email": SUPER_ADMIN_EMAIL, "created_at": "2025-01-01T00:00:00Z", "auth_provider": "google"},
            {"id": "admin-1", "email": ADMIN_EMAIL, "created_at": "2025-01-02T00:00:00Z", "auth_provider": "google"},
            {"id": "owner-1", "email": "owner@club.io", "created_at": "2025-01-03T00:00:00Z", "auth_provider": "google"},
            {"id": "owner-2", "email": "rival@club.io", "created_at": "2025-01-04T00:00:00Z", "auth_provider": "email"},
            {"id": "nobody-1", "email": "nobody@example.io", "created_at": "2025-01-05T00:00:00Z", "auth_provider": "email"},
        ],
        "user_profiles": [
            {"user_id": "owner-1", "first_name": "Olive", "last_name": "Owner"},
        ],
        "venues": [
            {"id": "v1", "name": "Blue Room", "address": "1 Main St", "city": "Lisbon", "country": "PT",
             "is_verified": False, "created_at": "2025-02-01T00:00:00Z"},
            {"id": "v2", "name": "Red Door", "address": "2 Side St", "city": "Porto", "country": "PT",
             "is_verified": True, "created_at": "2025-02-02T00:00:00Z"},
        ],
        "venue_owners": [
            {"id": "vo1", "user_id": "owner-1", "venue_id": "v1", "role": "owner"},
            {"id": "vo2", "user_id": "owner-2", "venue_id": "v2", "role": "owner"},
        ],
        "events": [],
        "reviews": [],
        "promotions": [],
        "venue_images": [],
        "venue_analytics": [],
        "user_interactions": [],
    })


# -------------------------------------------------
# App
# -------------------------------------------------
@pytest.fixture(scope="function")
def app(db, settings):
    """Create a test FastAPI application instance wired to the fake client."""
    application = create_app()
    application.dependency_overrides[get_db] = lambda: db
    application.dependency_overrides[get_supabase_client] = lambda: db
    application.dependency_overrides[get_settings] = lambda: settings
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(db):
    """
    login(principal) → Authorization header for a token the fake
    auth service accepts.
    """
    def _login(principal: Principal) -> dict:
        token = f"token-{principal.id}"
        db.auth.tokens[token] = (principal.id, principal.email)
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset view cache before each test."""
    get_cache().clear()
    yield
    get_cache().clear()
