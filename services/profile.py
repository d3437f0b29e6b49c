# services/profile.py

from typing import Optional

from supabase import Client

from core.errors import AccessDenied, ConflictError, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import VENUE_ACCESS_DENIED, require_principal
from core.results import ActionResult, guarded_action, ok
from core.utils import utc_now_iso
from models.enums import VenueOwnerRole
from models.principal import Principal
from services.venues import revalidate_venue_views


def _ensure_user_row(client: Client, principal: Principal) -> bool:
    """
    Insert the users row for an authenticated principal if missing.
    Returns True when a row was created.
    """
    try:
        existing = client.table("users").select("id").eq("id", principal.id).limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Error checking user profile")

    if existing.data:
        return False

    try:
        client.table("users").insert({
            "id": principal.id,
            "email": principal.email or "",
            "created_at": utc_now_iso(),
        }).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create user profile")

    logger.info(f"Created user row for {principal.email}")
    return True


@guarded_action("ensureUserExists")
def ensure_user_exists(client: Client, principal: Optional[Principal]) -> ActionResult:
    principal = require_principal(principal)
    created = _ensure_user_row(client, principal)
    return ok({"created": created})


@guarded_action("checkUserProfile")
def check_user_profile(client: Client, principal: Optional[Principal]) -> ActionResult:
    """
    Every authenticated user has a profile once the users row exists;
    the interesting bit is whether they own a venue yet.
    """
    principal = require_principal(principal)
    _ensure_user_row(client, principal)

    try:
        owner = (
            client.table("venue_owners")
            .select("id")
            .eq("user_id", principal.id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Error checking user profile")

    return ok({"has_profile": True, "is_venue_owner": bool(owner.data)})


@guarded_action("createVenueOwnerProfile")
def create_venue_owner_profile(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    """
    Claim an unowned venue. Venues that already have an owner record
    can only gain owners through their existing owners.
    """
    principal = require_principal(principal)
    _ensure_user_row(client, principal)

    try:
        venue = client.table("venues").select("id").eq("id", venue_id).limit(1).execute()
        owners = client.table("venue_owners").select("user_id").eq("venue_id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create venue owner profile")

    # A missing venue and one owned by others answer the same way
    if not venue.data:
        raise AccessDenied(VENUE_ACCESS_DENIED)

    owner_ids = {row["user_id"] for row in owners.data or []}
    if principal.id in owner_ids:
        raise ConflictError("You already own this venue", code="ALREADY_EXISTS")
    if owner_ids:
        raise AccessDenied(VENUE_ACCESS_DENIED)

    try:
        client.table("venue_owners").insert({
            "user_id": principal.id,
            "venue_id": venue_id,
            "role": VenueOwnerRole.owner.value,
        }).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create venue owner profile")

    revalidate_venue_views(venue_id)
    return ok()
