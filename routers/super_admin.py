# routers/super_admin.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from supabase import Client

from core.cache import cached_view
from core.config import Settings, get_settings
from core.results import to_response
from core.supabase_client import get_db
from dependencies.auth import require_area
from models.enums import Role
from models.principal import Principal
from models.user import StatusToggle
from models.venue import VerificationToggle
from services import admin_users, system_analytics, users, venues


router = APIRouter(
    prefix="/super-admin",
    tags=["Super Admin"],
)

super_admin_area = require_area(Role.super_admin)


def _view_path(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


# ============================================================
# DASHBOARD / ANALYTICS
# ============================================================
@router.get("/dashboard", summary="System metrics and chart series")
def dashboard(
    days: int = Query(30),
    top: int = Query(10),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    sections = {
        "metrics": system_analytics.get_system_metrics(client, principal, settings),
        "user_growth": system_analytics.get_user_growth_data(client, principal, days, settings),
        "venue_activity": system_analytics.get_venue_activity_data(client, principal, days, settings),
        "interactions": system_analytics.get_interaction_data(client, principal, days, settings),
        "top_venues": system_analytics.get_top_venues(client, principal, top, settings),
    }
    return {name: result.model_dump(mode="json") for name, result in sections.items()}


@router.get("/analytics/metrics")
def analytics_metrics(
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(system_analytics.get_system_metrics(client, principal, settings), operator=True)


@router.get("/analytics/user-growth")
def analytics_user_growth(
    days: int = Query(30),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(system_analytics.get_user_growth_data(client, principal, days, settings), operator=True)


@router.get("/analytics/venue-activity")
def analytics_venue_activity(
    days: int = Query(30),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(system_analytics.get_venue_activity_data(client, principal, days, settings), operator=True)


@router.get("/analytics/interactions")
def analytics_interactions(
    days: int = Query(30),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(system_analytics.get_interaction_data(client, principal, days, settings), operator=True)


@router.get("/analytics/top-venues")
def analytics_top_venues(
    limit: int = Query(10),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(system_analytics.get_top_venues(client, principal, limit, settings), operator=True)


# ============================================================
# USERS
# ============================================================
@router.get("/users", summary="Paginated users list")
def list_users(
    request: Request,
    page: int = Query(1),
    page_size: int = Query(10),
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    auth_provider: Optional[str] = Query(None),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    filters = {
        k: v for k, v in {
            "search": search,
            "status": status,
            "role": role,
            "auth_provider": auth_provider,
        }.items() if v not in (None, "", "all")
    }

    result = cached_view(
        _view_path(request), principal.id, settings.VIEW_CACHE_TTL_SECONDS,
        lambda: users.get_users(client, principal, page, page_size, filters, settings),
    )
    return to_response(result, operator=True)


@router.get("/users/{user_id}")
def get_user(
    user_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(users.get_user_by_id(client, principal, user_id, settings), detail_page=True, operator=True)


@router.patch("/users/{user_id}/status")
def set_user_status(
    user_id: str,
    payload: StatusToggle,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(users.toggle_user_status(client, principal, user_id, payload.is_active, settings), operator=True)


@router.delete("/users/{user_id}")
def remove_user(
    user_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(users.delete_user(client, principal, user_id, settings), operator=True)


# ============================================================
# ADMIN USERS
# ============================================================
@router.get("/admin-users")
def list_admin_users(
    request: Request,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = cached_view(
        _view_path(request), principal.id, settings.VIEW_CACHE_TTL_SECONDS,
        lambda: admin_users.get_admin_users(client, principal, settings),
    )
    return to_response(result, operator=True)


@router.post("/admin-users")
def create_admin_user(
    payload: dict = Body(...),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(admin_users.create_admin_user(client, principal, payload, settings), operator=True, status_code=201)


@router.get("/admin-users/{admin_user_id}")
def get_admin_user(
    admin_user_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(
        admin_users.get_admin_user_by_id(client, principal, admin_user_id, settings),
        detail_page=True,
        operator=True,
    )


@router.patch("/admin-users/{admin_user_id}")
def update_admin_user(
    admin_user_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(admin_users.update_admin_user(client, principal, admin_user_id, payload, settings), operator=True)


@router.patch("/admin-users/{admin_user_id}/status")
def set_admin_user_status(
    admin_user_id: str,
    payload: StatusToggle,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(
        admin_users.toggle_admin_user_status(client, principal, admin_user_id, payload.is_active, settings),
        operator=True,
    )


@router.delete("/admin-users/{admin_user_id}")
def remove_admin_user(
    admin_user_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(admin_users.delete_admin_user(client, principal, admin_user_id, settings), operator=True)


# ============================================================
# VENUES
# ============================================================
@router.get("/venues")
def list_venues(
    request: Request,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = cached_view(
        _view_path(request), principal.id, settings.VIEW_CACHE_TTL_SECONDS,
        lambda: venues.get_venues(client, principal, settings),
    )
    return to_response(result, operator=True)


@router.get("/venues/{venue_id}")
def get_venue(
    venue_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.get_venue_by_id(client, principal, venue_id, settings), detail_page=True, operator=True)


@router.patch("/venues/{venue_id}/verification")
def set_venue_verification(
    venue_id: str,
    payload: VerificationToggle,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(
        venues.toggle_venue_verification(client, principal, venue_id, payload.is_verified, settings),
        operator=True,
    )


@router.patch("/venues/{venue_id}/status")
def set_venue_status(
    venue_id: str,
    payload: StatusToggle,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.toggle_venue_status(client, principal, venue_id, payload.is_active, settings), operator=True)


@router.patch("/venues/{venue_id}")
def update_venue(
    venue_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.update_venue_details(client, principal, venue_id, payload, settings), operator=True)


@router.delete("/venues/{venue_id}")
def remove_venue(
    venue_id: str,
    principal: Principal = Depends(super_admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.delete_venue(client, principal, venue_id, settings), operator=True)
