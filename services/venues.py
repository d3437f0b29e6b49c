# services/venues.py

from typing import Dict, List, Optional

from supabase import Client

from core.cache import revalidate_path
from core.config import Settings, get_settings
from core.errors import (
    ConflictError,
    FeatureUnavailable,
    NotFound,
    ValidationError,
    handle_supabase_error,
    parse_form,
)
from core.logging_config import logger
from core.permission_helpers import (
    get_owned_venue_ids,
    require_admin_or_venue_owner,
    require_principal,
    require_role,
    require_venue_owner,
)
from core.results import ActionResult, guarded_action, ok
from core.roles import ADMIN_ROLES
from core.utils import utc_now_iso
from models.enums import VenueOwnerRole
from models.principal import Principal
from models.venue import VenueForm, VenueUpdate


VENUE_STATUS_UNAVAILABLE = "Venue status toggle is not available - is_active column doesn't exist"
VENUE_HAS_EVENTS = "Cannot delete venue with active events. Please deactivate all events first."

ADMIN_VENUES_PATH = "/super-admin/venues"
CLUB_OWNER_VENUES_PATH = "/club-owner/venues"


def revalidate_venue_views(venue_id: Optional[str] = None) -> None:
    """
    Drop the cached venue lists of both areas, plus the detail views
    of one venue when given. Every venue write calls this.
    """
    paths = [ADMIN_VENUES_PATH, CLUB_OWNER_VENUES_PATH]
    if venue_id:
        paths += [f"{ADMIN_VENUES_PATH}/{venue_id}", f"{CLUB_OWNER_VENUES_PATH}/{venue_id}"]
    revalidate_path(*paths)


# ============================================================
# Batch helpers (one query per table, grouped in Python)
# ============================================================
def count_by_venue(client: Client, table: str, venue_ids: List[str]) -> Dict[str, int]:
    counts = {vid: 0 for vid in venue_ids}
    if not venue_ids:
        return counts

    try:
        res = client.table(table).select("venue_id").in_("venue_id", venue_ids).execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to count {table}")

    for row in res.data or []:
        if row["venue_id"] in counts:
            counts[row["venue_id"]] += 1
    return counts


def attach_counts(client: Client, venues: List[dict], tables: List[str]) -> List[dict]:
    venue_ids = [v["id"] for v in venues]
    per_table = {t: count_by_venue(client, t, venue_ids) for t in tables}

    for venue in venues:
        venue["_count"] = {t: per_table[t].get(venue["id"], 0) for t in tables}
    return venues


def fetch_profiles(client: Client, user_ids: List[str]) -> Dict[str, dict]:
    if not user_ids:
        return {}
    try:
        res = (
            client.table("user_profiles")
            .select("user_id, first_name, last_name, username, avatar_url")
            .in_("user_id", user_ids)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch user profiles")

    return {p["user_id"]: p for p in res.data or []}


def attach_owners(client: Client, venues: List[dict]) -> List[dict]:
    """
    venue["venue_owners"] = [{id, role, user_id, user: {id, email, created_at, profile}}]
    """
    venue_ids = [v["id"] for v in venues]
    if not venue_ids:
        return venues

    try:
        owners = (
            client.table("venue_owners")
            .select("id, venue_id, user_id, role")
            .in_("venue_id", venue_ids)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venue owners")

    user_ids = list({o["user_id"] for o in owners})
    users = {}
    if user_ids:
        try:
            rows = (
                client.table("users")
                .select("id, email, created_at")
                .in_("id", user_ids)
                .execute()
            ).data or []
        except Exception as e:
            raise handle_supabase_error(e, "Failed to fetch venue owners")
        users = {u["id"]: u for u in rows}

    profiles = fetch_profiles(client, user_ids)

    for venue in venues:
        venue["venue_owners"] = [
            {
                **owner,
                "user": {
                    **users.get(owner["user_id"], {"id": owner["user_id"]}),
                    "profile": profiles.get(owner["user_id"]),
                },
            }
            for owner in owners
            if owner["venue_id"] == venue["id"]
        ]
    return venues


def fetch_venue(client: Client, venue_id: str, operation: str = "Failed to fetch venue") -> dict:
    try:
        res = client.table("venues").select("*").eq("id", venue_id).limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, operation)

    if not res.data:
        raise NotFound("Venue not found")
    return res.data[0]


# ============================================================
# Admin (admin / super_admin)
# ============================================================
@guarded_action("getVenues")
def get_venues(client: Client, principal: Optional[Principal], settings: Optional[Settings] = None) -> ActionResult:
    require_role(client, principal, ADMIN_ROLES, settings)

    try:
        venues = (
            client.table("venues")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venues")

    attach_owners(client, venues)
    attach_counts(client, venues, ["events", "reviews", "venue_images"])
    return ok(venues)


@guarded_action("getVenueById")
def get_venue_by_id(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    require_role(client, principal, ADMIN_ROLES, settings)

    venue = fetch_venue(client, venue_id)
    attach_owners(client, [venue])
    attach_counts(client, [venue], ["events", "reviews", "venue_images"])
    return ok(venue)


@guarded_action("toggleVenueVerification")
def toggle_venue_verification(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    is_verified: bool,
    settings: Optional[Settings] = None,
) -> ActionResult:
    require_role(client, principal, ADMIN_ROLES, settings)

    try:
        res = (
            client.table("venues")
            .update({"is_verified": is_verified, "updated_at": utc_now_iso()})
            .eq("id", venue_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update venue verification")

    if not res.data:
        raise NotFound("Venue not found")

    revalidate_venue_views(venue_id)
    return ok()


@guarded_action("toggleVenueStatus")
def toggle_venue_status(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    is_active: bool,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    require_role(client, principal, ADMIN_ROLES, settings)

    if not settings.VENUES_IS_ACTIVE_COLUMN:
        raise FeatureUnavailable(VENUE_STATUS_UNAVAILABLE)

    try:
        res = (
            client.table("venues")
            .update({"is_active": is_active, "updated_at": utc_now_iso()})
            .eq("id", venue_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update venue status")

    if not res.data:
        raise NotFound("Venue not found")

    revalidate_venue_views(venue_id)
    return ok()


@guarded_action("deleteVenue")
def delete_venue(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    Refused while the venue has any event row, active or not.
    """
    require_role(client, principal, ADMIN_ROLES, settings)

    try:
        events = (
            client.table("events")
            .select("id")
            .eq("venue_id", venue_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to check venue events")

    if events.data:
        raise ConflictError(VENUE_HAS_EVENTS)

    try:
        client.table("venues").delete().eq("id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete venue")

    logger.info(f"Venue {venue_id} deleted by {principal.id}")
    revalidate_venue_views(venue_id)
    return ok()


@guarded_action("updateVenueDetails")
def update_venue_details(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    updates,
    settings: Optional[Settings] = None,
) -> ActionResult:
    require_admin_or_venue_owner(client, principal, venue_id, settings)

    form = parse_form(VenueUpdate, updates)
    payload = form.model_dump(mode="json", exclude_unset=True)
    if not payload:
        raise ValidationError("No changes provided", details={"issues": {}})

    payload["updated_at"] = utc_now_iso()

    try:
        res = client.table("venues").update(payload).eq("id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update venue")

    if not res.data:
        raise NotFound("Venue not found")

    revalidate_venue_views(venue_id)
    return ok()


# ============================================================
# Club owner (ownership required per venue)
# ============================================================
@guarded_action("getClubOwnerVenues")
def get_club_owner_venues(client: Client, principal: Optional[Principal]) -> ActionResult:
    principal = require_principal(principal)

    venue_ids = get_owned_venue_ids(client, principal)
    if not venue_ids:
        return ok([])

    try:
        venues = (
            client.table("venues")
            .select("*")
            .in_("id", venue_ids)
            .order("created_at", desc=True)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venues")

    attach_owners(client, venues)
    attach_counts(client, venues, ["events", "reviews", "venue_images"])
    return ok(venues)


@guarded_action("getClubOwnerVenueById")
def get_club_owner_venue_by_id(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    venue = fetch_venue(client, venue_id)
    attach_owners(client, [venue])
    attach_counts(client, [venue], ["promotions", "reviews", "venue_images"])
    return ok(venue)


@guarded_action("createVenue")
def create_venue(
    client: Client,
    principal: Optional[Principal],
    form,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    Two writes, no transaction: venue insert, then the owner record.
    If the owner insert fails the venue row is deleted again.
    """
    principal = require_principal(principal)
    settings = settings or get_settings()

    venue_form = parse_form(VenueForm, form)
    payload = venue_form.model_dump(mode="json")
    payload["is_verified"] = False
    if settings.VENUES_IS_ACTIVE_COLUMN:
        payload["is_active"] = True

    try:
        res = client.table("venues").insert(payload).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create venue")

    venue = res.data[0]

    try:
        client.table("venue_owners").insert({
            "user_id": principal.id,
            "venue_id": venue["id"],
            "role": VenueOwnerRole.owner.value,
        }).execute()
    except Exception as e:
        logger.error(f"Venue owner insert failed for venue {venue['id']}; removing venue")
        try:
            client.table("venues").delete().eq("id", venue["id"]).execute()
        except Exception as cleanup_error:
            logger.error(f"Venue cleanup failed for {venue['id']}: {cleanup_error}")
        raise handle_supabase_error(e, "Failed to create venue ownership")

    logger.info(f"Venue {venue['id']} created by {principal.id}")
    revalidate_venue_views()
    return ok({"id": venue["id"]})


@guarded_action("updateClubOwnerVenue")
def update_club_owner_venue(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    form,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    venue_form = parse_form(VenueForm, form)
    payload = venue_form.model_dump(mode="json")
    payload["updated_at"] = utc_now_iso()

    try:
        client.table("venues").update(payload).eq("id", venue_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update venue")

    revalidate_venue_views(venue_id)
    return ok()
