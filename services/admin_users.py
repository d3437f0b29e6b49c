# services/admin_users.py

"""
Admin user management (super admin only).

The admin_users table is modelled but missing from the deployed schema.
Until settings.ADMIN_USERS_TABLE is switched on, every accessor here
returns FEATURE_UNAVAILABLE once the caller has passed the role check.
"""

from typing import Optional

from supabase import Client

from core.cache import revalidate_path
from core.config import Settings, get_settings
from core.errors import (
    ConflictError,
    FeatureUnavailable,
    NotFound,
    SelfTargetError,
    ValidationError,
    handle_supabase_error,
    parse_form,
)
from core.logging_config import logger
from core.permission_helpers import require_role
from core.results import ActionResult, guarded_action, ok
from core.utils import utc_now_iso
from models.admin_user import AdminUserCreate, AdminUserUpdate
from models.enums import AuthProvider, Role
from models.principal import Principal
from services.users import USER_STATUS_UNAVAILABLE


ADMIN_USERS_UNAVAILABLE = "Admin user management is not available - admin_users table doesn't exist"

ADMIN_USERS_PATH = "/super-admin/admin-users"


def _require_super_admin(client: Client, principal: Optional[Principal], settings: Settings):
    require_role(client, principal, [Role.super_admin], settings)
    if not settings.ADMIN_USERS_TABLE:
        raise FeatureUnavailable(ADMIN_USERS_UNAVAILABLE)


def _fetch_admin_user(client: Client, admin_user_id: str) -> dict:
    try:
        res = (
            client.table("admin_users")
            .select("*")
            .eq("id", admin_user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin user")

    if not res.data:
        raise NotFound("Admin user not found")
    return res.data[0]


def _attach_users(client: Client, admins: list) -> list:
    user_ids = list({a["user_id"] for a in admins})
    if not user_ids:
        return admins

    try:
        users = (
            client.table("users")
            .select("id, email, is_active, created_at, last_login, auth_provider")
            .in_("id", user_ids)
            .execute()
        ).data or []
        profiles = (
            client.table("user_profiles")
            .select("user_id, first_name, last_name, username, avatar_url")
            .in_("user_id", user_ids)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin users")

    user_map = {u["id"]: u for u in users}
    profile_map = {p["user_id"]: p for p in profiles}

    for admin in admins:
        user = user_map.get(admin["user_id"])
        admin["user"] = {**user, "profile": profile_map.get(admin["user_id"])} if user else None
    return admins


# ============================================================
# Reads
# ============================================================
@guarded_action("getAdminUsers")
def get_admin_users(client: Client, principal: Optional[Principal], settings: Optional[Settings] = None) -> ActionResult:
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    try:
        admins = (
            client.table("admin_users")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch admin users")

    return ok(_attach_users(client, admins))


@guarded_action("getAdminUserById")
def get_admin_user_by_id(
    client: Client,
    principal: Optional[Principal],
    admin_user_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    admin = _fetch_admin_user(client, admin_user_id)
    return ok(_attach_users(client, [admin])[0])


def count_admin_users(client: Client, settings: Optional[Settings] = None) -> int:
    """0 while the table is absent. Callers do their own role check."""
    settings = settings or get_settings()
    if not settings.ADMIN_USERS_TABLE:
        return 0

    try:
        res = client.table("admin_users").select("id", count="exact").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to count admin users")
    return res.count or 0


# ============================================================
# Writes
# ============================================================
@guarded_action("createAdminUser")
def create_admin_user(
    client: Client,
    principal: Optional[Principal],
    data,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    Reuse the users row for that email when there is one, otherwise
    create it with a basic profile (first name = email local part).
    """
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    form = parse_form(AdminUserCreate, data)
    email = str(form.email)

    try:
        existing = client.table("users").select("id").eq("email", email).limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to check existing user")

    if existing.data:
        user_id = existing.data[0]["id"]

        try:
            admin = client.table("admin_users").select("id").eq("user_id", user_id).limit(1).execute()
        except Exception as e:
            raise handle_supabase_error(e, "Failed to check existing admin user")

        if admin.data:
            raise ConflictError("User is already an admin", code="ALREADY_EXISTS")
    else:
        user_row = {"email": email, "auth_provider": AuthProvider.email.value}
        if settings.USERS_IS_ACTIVE_COLUMN:
            user_row["is_active"] = True

        try:
            created = client.table("users").insert(user_row).execute()
        except Exception as e:
            raise handle_supabase_error(e, "Failed to create user")

        user_id = created.data[0]["id"]

        try:
            client.table("user_profiles").insert({
                "user_id": user_id,
                "first_name": email.split("@")[0],
            }).execute()
        except Exception as e:
            # The admin record is still useful without a profile
            logger.warning(f"Profile creation failed for {user_id}: {e}")

    try:
        res = client.table("admin_users").insert({
            "user_id": user_id,
            "role": form.role.value,
            "permissions": form.permissions,
            "created_by": principal.id,
        }).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create admin user")

    revalidate_path(ADMIN_USERS_PATH)
    return ok({"id": res.data[0]["id"]})


@guarded_action("updateAdminUser")
def update_admin_user(
    client: Client,
    principal: Optional[Principal],
    admin_user_id: str,
    updates,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    form = parse_form(AdminUserUpdate, updates)
    payload = form.model_dump(mode="json", exclude_unset=True)
    if not payload:
        raise ValidationError("No changes provided", details={"issues": {}})

    try:
        res = client.table("admin_users").update(payload).eq("id", admin_user_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update admin user")

    if not res.data:
        raise NotFound("Admin user not found")

    revalidate_path(ADMIN_USERS_PATH, f"{ADMIN_USERS_PATH}/{admin_user_id}")
    return ok()


@guarded_action("deleteAdminUser")
def delete_admin_user(
    client: Client,
    principal: Optional[Principal],
    admin_user_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """Removes admin privileges only; the users row stays."""
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    admin = _fetch_admin_user(client, admin_user_id)
    if admin["user_id"] == principal.id:
        raise SelfTargetError("Cannot delete your own admin account")

    try:
        client.table("admin_users").delete().eq("id", admin_user_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete admin user")

    revalidate_path(ADMIN_USERS_PATH)
    return ok()


@guarded_action("toggleAdminUserStatus")
def toggle_admin_user_status(
    client: Client,
    principal: Optional[Principal],
    admin_user_id: str,
    is_active: bool,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    _require_super_admin(client, principal, settings)

    admin = _fetch_admin_user(client, admin_user_id)
    if admin["user_id"] == principal.id and not is_active:
        raise SelfTargetError("Cannot deactivate your own account")

    if not settings.USERS_IS_ACTIVE_COLUMN:
        raise FeatureUnavailable(USER_STATUS_UNAVAILABLE)

    try:
        client.table("users").update({
            "is_active": is_active,
            "updated_at": utc_now_iso(),
        }).eq("id", admin["user_id"]).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update user status")

    revalidate_path(ADMIN_USERS_PATH, f"{ADMIN_USERS_PATH}/{admin_user_id}")
    return ok()
