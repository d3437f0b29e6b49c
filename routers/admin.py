# routers/admin.py

from fastapi import APIRouter, Body, Depends
from supabase import Client

from core.config import Settings, get_settings
from core.results import to_response
from core.supabase_client import get_db
from dependencies.auth import require_area
from models.enums import Role
from models.principal import Principal
from models.user import StatusToggle
from models.venue import VerificationToggle
from services import venues


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)

admin_area = require_area(Role.admin, Role.super_admin)


# -----------------------------------------------------
# Venue moderation
# -----------------------------------------------------
@router.get("/venues", summary="All venues for moderation")
def list_venues(
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.get_venues(client, principal, settings))


@router.get("/venues/{venue_id}")
def get_venue(
    venue_id: str,
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.get_venue_by_id(client, principal, venue_id, settings), detail_page=True)


@router.patch("/venues/{venue_id}/verification")
def set_venue_verification(
    venue_id: str,
    payload: VerificationToggle,
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.toggle_venue_verification(client, principal, venue_id, payload.is_verified, settings))


@router.patch("/venues/{venue_id}/status")
def set_venue_status(
    venue_id: str,
    payload: StatusToggle,
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.toggle_venue_status(client, principal, venue_id, payload.is_active, settings))


@router.patch("/venues/{venue_id}")
def update_venue(
    venue_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.update_venue_details(client, principal, venue_id, payload, settings))


@router.delete("/venues/{venue_id}")
def remove_venue(
    venue_id: str,
    principal: Principal = Depends(admin_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.delete_venue(client, principal, venue_id, settings))
