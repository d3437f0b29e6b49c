# tests/test_routes.py

"""
HTTP-level tests: area gates, response rendering and view caching.
"""

import pytest
from fastapi.testclient import TestClient
from starlette.routing import BaseRoute, Match

from core.storage import MAX_VIDEO_BYTES
from services import venue_images


class PathlessRoute(BaseRoute):
    """Route object with no path attribute, as some mounts and extensions register."""

    def matches(self, scope):
        return Match.NONE, {}


# -------------------------------------------------
# Area gates
# -------------------------------------------------
@pytest.mark.parametrize("path", ["/super-admin/users", "/admin/venues", "/club-owner/venues"])
def test_no_session_redirects_to_login(client, path):
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


def test_bad_token_redirects_to_login(client):
    response = client.get(
        "/admin/venues",
        headers={"Authorization": "Bearer forged"},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/auth/login"


@pytest.mark.parametrize("path, who", [
    ("/super-admin/users", "admin"),
    ("/admin/venues", "owner"),
    ("/club-owner/venues", "admin"),
    ("/club-owner/venues", "stranger"),
])
def test_wrong_role_redirects_to_unauthorized(client, login, request, path, who):
    principal = request.getfixturevalue(who)
    response = client.get(path, headers=login(principal), follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/unauthorized"


def test_super_admin_may_open_club_owner_area(client, login, super_admin):
    response = client.get("/club-owner/venues", headers=login(super_admin))
    assert response.status_code == 200
    # Scoped to ownership records, and the super admin has none
    assert response.json()["data"] == []


def test_unauthorized_landing(client):
    response = client.get("/unauthorized")
    assert response.status_code == 403
    assert response.json()["code"] == "ACCESS_DENIED"


# -------------------------------------------------
# Rendering
# -------------------------------------------------
def test_other_owners_venue_is_a_plain_404(client, login, owner):
    response = client.get("/club-owner/venues/v2", headers=login(owner))
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not found", "code": "NOT_FOUND", "details": None}


def test_missing_venue_looks_the_same(client, login, owner):
    other = client.get("/club-owner/venues/v2", headers=login(owner)).json()
    missing = client.get("/club-owner/venues/nope", headers=login(owner)).json()
    assert other == missing


def test_admin_routes_hide_technical_details(client, login, db, admin):
    db.fail_on("venues", "select", message="relation does not exist", code="42P01")

    response = client.get("/admin/venues", headers=login(admin))

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "DATABASE_ERROR"
    assert body["details"] is None


def test_super_admin_routes_show_technical_details(client, login, db, super_admin):
    db.fail_on("venues", "select", message="relation does not exist", code="42P01")

    body = client.get("/super-admin/venues", headers=login(super_admin)).json()

    assert body["details"]["pg_code"] == "42P01"
    assert body["details"]["detail"] == "relation does not exist"


def test_validation_issues_always_shown(client, login, admin):
    response = client.patch("/admin/venues/v1", json={"website": "ftp://x"}, headers=login(admin))
    assert response.status_code == 422
    assert "website" in response.json()["details"]["issues"]


def test_feature_unavailable_status(client, login, admin):
    response = client.patch("/admin/venues/v1/status", json={"is_active": False}, headers=login(admin))
    assert response.status_code == 501
    assert response.json()["code"] == "FEATURE_UNAVAILABLE"


def test_self_deactivation_refused(client, login, super_admin):
    response = client.patch("/super-admin/users/super-1/status", json={"is_active": False}, headers=login(super_admin))
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot deactivate your own account"


def test_delete_venue_with_events_conflicts(client, login, db, admin):
    db.tables["events"].append({"id": "e1", "venue_id": "v1", "is_active": True})
    response = client.delete("/admin/venues/v1", headers=login(admin))
    assert response.status_code == 409


# -------------------------------------------------
# View cache
# -------------------------------------------------
def test_club_owner_list_is_cached_until_a_write(client, login, db, owner):
    headers = login(owner)
    assert [v["id"] for v in client.get("/club-owner/venues", headers=headers).json()["data"]] == ["v1"]

    # Out-of-band change is not visible while the view is cached
    db.tables["venue_owners"].append({"id": "vo9", "user_id": "owner-1", "venue_id": "v2", "role": "manager"})
    assert len(client.get("/club-owner/venues", headers=headers).json()["data"]) == 1

    created = client.post(
        "/club-owner/venues",
        json={"name": "Green Hall", "address": "3 Park Ave", "city": "Lisbon", "country": "PT"},
        headers=headers,
    )
    assert created.status_code == 201

    ids = [v["id"] for v in client.get("/club-owner/venues", headers=headers).json()["data"]]
    assert len(ids) == 3
    assert created.json()["data"]["id"] in ids


def test_super_admin_delete_refreshes_owner_list(client, login, owner, super_admin):
    owner_headers = login(owner)
    assert [v["id"] for v in client.get("/club-owner/venues", headers=owner_headers).json()["data"]] == ["v1"]

    assert client.delete("/super-admin/venues/v1", headers=login(super_admin)).status_code == 200

    assert client.get("/club-owner/venues", headers=owner_headers).json()["data"] == []


def test_owner_create_refreshes_super_admin_list(client, login, owner, super_admin):
    admin_headers = login(super_admin)
    before = client.get("/super-admin/venues", headers=admin_headers).json()["data"]

    created = client.post(
        "/club-owner/venues",
        json={"name": "Green Hall", "address": "3 Park Ave", "city": "Lisbon", "country": "PT"},
        headers=login(owner),
    )
    assert created.status_code == 201

    after = client.get("/super-admin/venues", headers=admin_headers).json()["data"]
    assert len(after) == len(before) + 1
    assert created.json()["data"]["id"] in [v["id"] for v in after]


def test_super_admin_users_cache_keys_on_query(client, login, super_admin):
    headers = login(super_admin)
    first = client.get("/super-admin/users?page=1&page_size=2", headers=headers).json()
    second = client.get("/super-admin/users?page=2&page_size=2", headers=headers).json()
    assert first["data"]["users"] != second["data"]["users"]

    client.delete("/super-admin/users/nobody-1", headers=headers)

    refreshed = client.get("/super-admin/users?page=1&page_size=2", headers=headers).json()
    assert refreshed["data"]["total"] == 4


# -------------------------------------------------
# Club owner media / promotions
# -------------------------------------------------
def test_upload_media(client, login, db, owner):
    response = client.post(
        "/club-owner/venues/v1/images",
        files={"file": ("night.png", b"\x89PNG....", "image/png")},
        headers=login(owner),
    )
    assert response.status_code == 201
    assert response.json()["data"]["type"] == "image"
    assert db.uploads[0]["path"].startswith("venues/owner-1/v1/")


def test_oversized_upload_is_read_up_to_the_limit(client, login, monkeypatch, owner):
    received = []
    real_upload = venue_images.upload_venue_image

    def recording_upload(client, principal, venue_id, filename, content_type, content, settings):
        received.append(len(content))
        return real_upload(client, principal, venue_id, filename, content_type, content, settings)

    monkeypatch.setattr(venue_images, "upload_venue_image", recording_upload)

    response = client.post(
        "/club-owner/venues/v1/images",
        files={"file": ("clip.mp4", b"x" * (MAX_VIDEO_BYTES + 4096), "video/mp4")},
        headers=login(owner),
    )

    assert response.status_code == 413
    assert response.json()["code"] == "FILE_TOO_LARGE"
    assert received == [MAX_VIDEO_BYTES + 1]


def test_upload_without_file(client, login, owner):
    response = client.post("/club-owner/venues/v1/images", headers=login(owner))
    assert response.status_code == 400
    assert response.json()["code"] == "NO_FILE_PROVIDED"


def test_venue_analytics_needs_dates(client, login, owner):
    response = client.get("/club-owner/venues/v1/analytics", headers=login(owner))
    assert response.status_code == 422


def test_dashboard_route(client, login, owner):
    response = client.get("/club-owner/venues/v1/dashboard", headers=login(owner))
    assert response.status_code == 200
    assert set(response.json()["data"]) == {"venue", "summary", "recent_activity", "top_reviews"}


# -------------------------------------------------
# Auth / health
# -------------------------------------------------
def test_me_reports_role_and_permissions(client, login, owner):
    body = client.get("/auth/me", headers=login(owner)).json()
    assert body["role"] == "club_owner"
    assert body["role_display_name"] == "Club Owner"
    assert body["permissions"]["can_manage_own_venues"] is True
    assert body["permissions"]["can_manage_venues"] is False


def test_me_without_session(client):
    response = client.get("/auth/me")
    assert response.status_code == 401


def test_login_returns_provider_url(client):
    body = client.get("/auth/login").json()
    assert body["provider"] == "google"
    assert "redirect_to=https://admin.buzzvar.io/auth/callback" in body["url"]


def test_profile_check_route(client, login, stranger):
    body = client.get("/auth/profile/check", headers=login(stranger)).json()
    assert body["data"] == {"has_profile": True, "is_venue_owner": False}


def test_profile_check_without_session(client):
    assert client.get("/auth/profile/check").status_code == 401


# -------------------------------------------------
# Venue setup
# -------------------------------------------------
NEW_VENUE = {"name": "Green Hall", "address": "3 Park Ave", "city": "Lisbon", "country": "PT"}


def test_newcomer_creates_first_venue_then_enters_club_owner_area(client, login, db, stranger):
    headers = login(stranger)
    assert client.get("/venue-setup", headers=headers).json()["data"]["is_venue_owner"] is False

    created = client.post("/venue-setup", json=NEW_VENUE, headers=headers)

    assert created.status_code == 201
    venue_id = created.json()["data"]["id"]
    assert {"user_id": "nobody-1", "venue_id": venue_id}.items() <= db.rows("venue_owners")[-1].items()

    listed = client.get("/club-owner/venues", headers=headers, follow_redirects=False)
    assert listed.status_code == 200
    assert [v["id"] for v in listed.json()["data"]] == [venue_id]


@pytest.mark.parametrize("who, home", [
    ("owner", "/club-owner/venues"),
    ("admin", "/admin/venues"),
    ("super_admin", "/super-admin/dashboard"),
])
def test_venue_setup_sends_role_holders_home(client, login, db, request, who, home):
    venues_before = len(db.rows("venues"))
    principal = request.getfixturevalue(who)

    response = client.post("/venue-setup", json=NEW_VENUE, headers=login(principal), follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == home
    assert len(db.rows("venues")) == venues_before


def test_venue_setup_without_session(client):
    response = client.post("/venue-setup", json=NEW_VENUE, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


def test_venue_setup_validation(client, login, stranger):
    response = client.post("/venue-setup", json={"name": ""}, headers=login(stranger))
    assert response.status_code == 422


def test_startup_tolerates_routes_without_path(app):
    app.router.routes.append(PathlessRoute())

    with TestClient(app) as test_client:
        assert test_client.get("/health/app").status_code == 200


def test_super_admin_dashboard(client, login, super_admin):
    body = client.get("/super-admin/dashboard?days=7", headers=login(super_admin)).json()
    assert body["metrics"]["success"] is True
    assert len(body["interactions"]["data"]) == 7


def test_health_app(client):
    response = client.get("/health/app")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_db(client, db):
    body = client.get("/health/db").json()
    assert body["status"] == "ok"

    db.fail_on("reviews")
    assert client.get("/health/db").json()["status"] == "degraded"
