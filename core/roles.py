# core/roles.py

from typing import Optional

from supabase import Client

from core.config import Settings, get_settings
from core.errors import handle_supabase_error
from models.enums import Role
from models.principal import Principal


# ============================================
# ROLE HIERARCHY (display + "at least" checks)
# ============================================
ROLE_HIERARCHY = {
    Role.super_admin: 4,
    Role.admin: 3,
    Role.moderator: 2,
    Role.club_owner: 1,
}

ROLE_DISPLAY_NAMES = {
    Role.super_admin: "Super Admin",
    Role.admin: "Admin",
    Role.moderator: "Moderator",
    Role.club_owner: "Club Owner",
}

ADMIN_ROLES = frozenset({Role.super_admin, Role.admin})


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


# ============================================
# Ownership lookup (point read by user_id)
# ============================================
def has_ownership_record(client: Client, user_id: str) -> bool:
    """
    True when the user owns / manages / staffs at least one venue.
    Storage errors propagate as DatabaseError; they never mean "no role".
    """
    try:
        res = (
            client.table("venue_owners")
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to resolve role")

    return bool(res.data)


# ============================================
# Identity Resolver
# ============================================
def resolve_role(
    client: Client,
    principal: Optional[Principal],
    settings: Optional[Settings] = None,
) -> Role:
    """
    First match wins:
      1. email in SUPER_ADMIN_EMAILS → super_admin
      2. email in ADMIN_EMAILS       → admin
      3. any venue_owners row        → club_owner
      4. otherwise                   → none

    Called at every authorization boundary; the result is never cached.
    The admin_users table is not consulted (absent from the deployed schema).
    """
    if principal is None:
        return Role.none

    settings = settings or get_settings()
    email = normalize_email(principal.email)

    if email and email in settings.super_admin_emails:
        return Role.super_admin

    if email and email in settings.admin_emails:
        return Role.admin

    if has_ownership_record(client, principal.id):
        return Role.club_owner

    return Role.none


def resolve_role_by_email(
    client: Client,
    email: str,
    settings: Optional[Settings] = None,
) -> Role:
    """
    Same precedence as resolve_role, for a user we only know by email
    (admin screens). Unknown emails resolve to none.
    """
    settings = settings or get_settings()
    normalized = normalize_email(email)

    if normalized and normalized in settings.super_admin_emails:
        return Role.super_admin
    if normalized and normalized in settings.admin_emails:
        return Role.admin

    try:
        res = (
            client.table("users")
            .select("id")
            .eq("email", email)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to resolve role")

    if not res.data:
        return Role.none

    if has_ownership_record(client, res.data[0]["id"]):
        return Role.club_owner

    return Role.none


# ============================================
# Helpers
# ============================================
def has_role_at_least(role: Role, required: Role) -> bool:
    if role == Role.none or required == Role.none:
        return False
    return ROLE_HIERARCHY[role] >= ROLE_HIERARCHY[required]


def role_display_name(role: Role) -> str:
    return ROLE_DISPLAY_NAMES.get(role, "No Role")
