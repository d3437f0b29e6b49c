# services/users.py

from typing import Dict, List, Optional

from supabase import Client

from core.cache import revalidate_path
from core.config import Settings, get_settings
from core.errors import (
    FeatureUnavailable,
    NotFound,
    SelfTargetError,
    ValidationError,
    handle_supabase_error,
    parse_form,
)
from core.logging_config import logger
from core.permission_helpers import require_permission
from core.roles import normalize_email
from core.results import ActionResult, guarded_action, ok
from core.utils import utc_now_iso
from models.enums import Role, UserRoleFilter, UserStatusFilter
from models.principal import Principal
from models.user import (
    AdminRoleInfo,
    UserData,
    UserFilters,
    UserPage,
    UserProfile,
    VenueOwnerInfo,
)


USER_STATUS_UNAVAILABLE = "User status toggle is not available - is_active column doesn't exist"

USERS_PATH = "/super-admin/users"

MAX_PAGE_SIZE = 100


# -----------------------------------------------------
# Role decoration for list rows
# -----------------------------------------------------
def _admin_roles(client: Client, users: List[dict], settings: Settings) -> Dict[str, AdminRoleInfo]:
    """
    Admin role per user id: email allow-lists first, then admin_users
    rows when that table exists.
    """
    roles: Dict[str, AdminRoleInfo] = {}
    for user in users:
        email = normalize_email(user.get("email"))
        if email in settings.super_admin_emails:
            roles[user["id"]] = AdminRoleInfo(role=Role.super_admin.value)
        elif email in settings.admin_emails:
            roles[user["id"]] = AdminRoleInfo(role=Role.admin.value)

    if settings.ADMIN_USERS_TABLE and users:
        try:
            rows = (
                client.table("admin_users")
                .select("user_id, role, permissions")
                .in_("user_id", [u["id"] for u in users])
                .execute()
            ).data or []
        except Exception as e:
            raise handle_supabase_error(e, "Failed to fetch admin roles")

        for row in rows:
            roles.setdefault(row["user_id"], AdminRoleInfo(role=row["role"], permissions=row.get("permissions")))

    return roles


def _decorate(client: Client, users: List[dict], settings: Settings) -> List[UserData]:
    user_ids = [u["id"] for u in users]
    if not user_ids:
        return []

    try:
        profiles = (
            client.table("user_profiles")
            .select("*")
            .in_("user_id", user_ids)
            .execute()
        ).data or []
        ownerships = (
            client.table("venue_owners")
            .select("user_id, role")
            .in_("user_id", user_ids)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch users")

    profile_map = {p["user_id"]: p for p in profiles}
    owner_map: Dict[str, List[dict]] = {}
    for row in ownerships:
        owner_map.setdefault(row["user_id"], []).append(row)

    admin_roles = _admin_roles(client, users, settings)

    decorated = []
    for user in users:
        owned = owner_map.get(user["id"], [])
        profile = profile_map.get(user["id"])
        decorated.append(
            UserData(
                id=user["id"],
                email=user["email"],
                phone=user.get("phone"),
                created_at=user.get("created_at"),
                updated_at=user.get("updated_at"),
                last_login=user.get("last_login"),
                is_active=user.get("is_active", True) if settings.USERS_IS_ACTIVE_COLUMN else True,
                auth_provider=user.get("auth_provider"),
                auth_provider_id=user.get("auth_provider_id"),
                profile=UserProfile(**{k: v for k, v in profile.items() if k in UserProfile.model_fields}) if profile else None,
                admin_role=admin_roles.get(user["id"]),
                venue_owner=VenueOwnerInfo(role=owned[0]["role"], venue_count=len(owned)) if owned else None,
            )
        )
    return decorated


def _matches_role(user: UserData, role: UserRoleFilter) -> bool:
    if role == UserRoleFilter.all:
        return True
    if role == UserRoleFilter.user:
        return user.admin_role is None and user.venue_owner is None
    if role == UserRoleFilter.club_owner:
        return user.venue_owner is not None
    return user.admin_role is not None and user.admin_role.role == role.value


# ============================================================
# Accessors (manage_users → super_admin only)
# ============================================================
@guarded_action("getUsers")
def get_users(
    client: Client,
    principal: Optional[Principal],
    page: int = 1,
    page_size: int = 10,
    filters=None,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    One page of users, newest first.

    `total` is the storage count before the role post-filter, so a
    role-filtered page can hold fewer rows than `page_size`.
    """
    settings = settings or get_settings()
    require_permission(client, principal, "can_manage_users", settings)

    filters = parse_form(UserFilters, filters or {})
    if page < 1 or page_size < 1 or page_size > MAX_PAGE_SIZE:
        raise ValidationError(
            "Invalid pagination",
            details={"issues": {"page": [f"page >= 1 and 1 <= page_size <= {MAX_PAGE_SIZE}"]}},
        )

    if filters.status == UserStatusFilter.inactive and not settings.USERS_IS_ACTIVE_COLUMN:
        # Without the column every user is active
        return ok(UserPage(users=[], total=0, page=page, page_size=page_size).model_dump())

    query = client.table("users").select("*", count="exact")

    if filters.search:
        query = query.ilike("email", f"%{filters.search.strip()}%")

    if filters.status != UserStatusFilter.all and settings.USERS_IS_ACTIVE_COLUMN:
        query = query.eq("is_active", filters.status == UserStatusFilter.active)

    if filters.auth_provider:
        query = query.eq("auth_provider", filters.auth_provider.value)

    start = (page - 1) * page_size
    end = start + page_size - 1

    try:
        res = query.order("created_at", desc=True).range(start, end).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch users")

    users = [u for u in _decorate(client, res.data or [], settings) if _matches_role(u, filters.role)]

    return ok(
        UserPage(
            users=users,
            total=res.count or 0,
            page=page,
            page_size=page_size,
        ).model_dump()
    )


@guarded_action("getUserById")
def get_user_by_id(
    client: Client,
    principal: Optional[Principal],
    user_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    require_permission(client, principal, "can_manage_users", settings)

    try:
        res = client.table("users").select("*").eq("id", user_id).limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch user")

    if not res.data:
        raise NotFound("User not found")

    return ok(_decorate(client, res.data, settings)[0].model_dump())


@guarded_action("toggleUserStatus")
def toggle_user_status(
    client: Client,
    principal: Optional[Principal],
    user_id: str,
    is_active: bool,
    settings: Optional[Settings] = None,
) -> ActionResult:
    settings = settings or get_settings()
    require_permission(client, principal, "can_manage_users", settings)

    if user_id == principal.id and not is_active:
        raise SelfTargetError("Cannot deactivate your own account")

    if not settings.USERS_IS_ACTIVE_COLUMN:
        raise FeatureUnavailable(USER_STATUS_UNAVAILABLE)

    try:
        res = (
            client.table("users")
            .update({"is_active": is_active, "updated_at": utc_now_iso()})
            .eq("id", user_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update user status")

    if not res.data:
        raise NotFound("User not found")

    revalidate_path(USERS_PATH, f"{USERS_PATH}/{user_id}")
    return ok()


@guarded_action("deleteUser")
def delete_user(
    client: Client,
    principal: Optional[Principal],
    user_id: str,
    settings: Optional[Settings] = None,
) -> ActionResult:
    require_permission(client, principal, "can_manage_users", settings)

    if user_id == principal.id:
        raise SelfTargetError("Cannot delete your own account")

    try:
        client.table("users").delete().eq("id", user_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete user")

    logger.info(f"User {user_id} deleted by {principal.id}")
    revalidate_path(USERS_PATH)
    return ok()
