# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
from pydantic import BaseModel, ConfigDict

from models.enums import Role


class RolePermissions(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_view_system_analytics: bool = False
    can_manage_users: bool = False
    can_manage_venues: bool = False
    can_moderate_content: bool = False
    can_manage_own_venues: bool = False


NO_PERMISSIONS = RolePermissions()


ROLE_PERMISSIONS = {

    # =====================================================
    # SUPER ADMIN: Full access to everything
    # =====================================================
    Role.super_admin: RolePermissions(
        can_view_system_analytics=True,
        can_manage_users=True,
        can_manage_venues=True,
        can_moderate_content=True,
        can_manage_own_venues=True,
    ),

    # =====================================================
    # ADMIN: venues + moderation, no users / system analytics
    # =====================================================
    Role.admin: RolePermissions(
        can_manage_venues=True,
        can_moderate_content=True,
    ),

    # =====================================================
    # MODERATOR: content moderation only
    # =====================================================
    Role.moderator: RolePermissions(
        can_moderate_content=True,
    ),

    # =====================================================
    # CLUB OWNER: own venues only
    # =====================================================
    Role.club_owner: RolePermissions(
        can_manage_own_venues=True,
    ),

    # =====================================================
    # FALLBACK
    # =====================================================
    Role.none: NO_PERMISSIONS,
}


def permissions_for(role: Role) -> RolePermissions:
    """
    Pure lookup. admin_users.permissions blobs are never merged in.
    Role.none gets all-false flags; callers should already have rejected it.
    """
    return ROLE_PERMISSIONS.get(role, NO_PERMISSIONS)
