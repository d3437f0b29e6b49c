# routers/venue_setup.py

from typing import Optional

from fastapi import APIRouter, Body, Depends
from supabase import Client

from core.config import Settings, get_settings
from core.errors import RedirectRequired
from core.logging_config import logger
from core.results import to_response
from core.roles import resolve_role
from core.supabase_client import get_db
from dependencies.auth import LOGIN_PATH, get_current_principal
from models.enums import Role
from models.principal import Principal
from services import profile, venues


router = APIRouter(
    prefix="/venue-setup",
    tags=["Venue Setup"],
)

# Where a signed-in user with a role lands instead of the setup form
ROLE_HOME = {
    Role.super_admin: "/super-admin/dashboard",
    Role.admin: "/admin/venues",
    Role.moderator: "/admin/venues",
    Role.club_owner: "/club-owner/venues",
}


def newcomer_gate(
    principal: Optional[Principal] = Depends(get_current_principal),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """
    Only signed-in users without a role get through. Everyone else is
    sent to login or to their own area.
    """
    if principal is None:
        raise RedirectRequired(LOGIN_PATH)

    role = resolve_role(client, principal, settings)
    if role != Role.none:
        logger.info(f"Venue setup skipped for {principal.email} ({role})")
        raise RedirectRequired(ROLE_HOME[role])

    return principal


@router.get("", summary="Setup state for a user without a venue")
def setup_state(
    principal: Principal = Depends(newcomer_gate),
    client: Client = Depends(get_db),
):
    return to_response(profile.check_user_profile(client, principal))


@router.post("", summary="Create the caller's first venue")
def create_first_venue(
    payload: dict = Body(...),
    principal: Principal = Depends(newcomer_gate),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    ensured = profile.ensure_user_exists(client, principal)
    if not ensured.success:
        return to_response(ensured)

    return to_response(venues.create_venue(client, principal, payload, settings), status_code=201)
