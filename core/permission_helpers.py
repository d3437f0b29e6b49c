from typing import Iterable, List, Optional

from supabase import Client

from core.config import Settings
from core.errors import AccessDenied, Unauthorized, handle_supabase_error
from core.permissions import permissions_for
from core.roles import ADMIN_ROLES, resolve_role
from models.enums import Role
from models.principal import Principal


VENUE_ACCESS_DENIED = "Venue not found or access denied"


# -----------------------------------------------------
# Principal check (step 1 of every accessor)
# -----------------------------------------------------
def require_principal(principal: Optional[Principal]) -> Principal:
    if principal is None or principal.is_expired():
        raise Unauthorized()
    return principal


# -----------------------------------------------------
# Permission evaluation (role re-derived on every call)
# -----------------------------------------------------
def has_permission(
    client: Client,
    principal: Optional[Principal],
    flag: str,
    settings: Optional[Settings] = None,
) -> bool:
    if principal is None:
        return False
    role = resolve_role(client, principal, settings)
    return bool(getattr(permissions_for(role), flag, False))


def require_role(
    client: Client,
    principal: Optional[Principal],
    allowed: Iterable[Role],
    settings: Optional[Settings] = None,
) -> Role:
    """
    Resolve the caller's role afresh and reject anything outside `allowed`.
    Returns the resolved role so callers can branch on it.
    """
    principal = require_principal(principal)
    role = resolve_role(client, principal, settings)
    if role not in set(allowed):
        raise AccessDenied()
    return role


def require_permission(
    client: Client,
    principal: Optional[Principal],
    flag: str,
    settings: Optional[Settings] = None,
) -> Role:
    principal = require_principal(principal)
    role = resolve_role(client, principal, settings)
    if not getattr(permissions_for(role), flag, False):
        raise AccessDenied()
    return role


def is_admin_role(role: Role) -> bool:
    """admin or super_admin."""
    return role in ADMIN_ROLES


# ============================================================
# VENUE-LEVEL OWNERSHIP HELPERS
# ============================================================

def require_venue_owner(client: Client, principal: Optional[Principal], venue_id: str) -> dict:
    """
    Confirm an OwnershipRecord for (principal, venue).
    A missing venue and someone else's venue fail the same way.
    Lookup errors propagate as DatabaseError.
    """
    principal = require_principal(principal)

    try:
        result = (
            client.table("venue_owners")
            .select("*")
            .eq("user_id", principal.id)
            .eq("venue_id", venue_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to verify venue ownership")

    if not result.data:
        raise AccessDenied(VENUE_ACCESS_DENIED)

    return result.data[0]


def require_admin_or_venue_owner(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    settings: Optional[Settings] = None,
) -> Role:
    """
    Admins bypass the ownership check; everyone else needs a record.
    """
    principal = require_principal(principal)
    role = resolve_role(client, principal, settings)
    if is_admin_role(role):
        return role

    require_venue_owner(client, principal, venue_id)
    return role


def get_owned_venue_ids(client: Client, principal: Principal) -> List[str]:
    """Venue ids the principal holds any OwnershipRecord for."""
    try:
        result = (
            client.table("venue_owners")
            .select("venue_id")
            .eq("user_id", principal.id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venues")

    seen = []
    for row in result.data or []:
        if row["venue_id"] not in seen:
            seen.append(row["venue_id"])
    return seen
