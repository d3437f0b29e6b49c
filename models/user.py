# models/user.py

from typing import Optional, List
from pydantic import BaseModel, Field

from .enums import AuthProvider, UserStatusFilter, UserRoleFilter


# ===============================================================
# USERS LIST (super admin)
# ===============================================================

class UserFilters(BaseModel):
    """
    Query-string filters for the users screen.
    `role` is applied after the page is fetched because it is derived
    (admin email lists / venue ownership), not stored on the row.
    """
    search: Optional[str] = None
    status: UserStatusFilter = UserStatusFilter.all
    role: UserRoleFilter = UserRoleFilter.all
    auth_provider: Optional[AuthProvider] = None


class UserProfile(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    location_city: Optional[str] = None
    location_country: Optional[str] = None


class AdminRoleInfo(BaseModel):
    role: str
    permissions: Optional[dict] = None


class VenueOwnerInfo(BaseModel):
    role: str
    venue_count: int = 0


class UserData(BaseModel):
    """
    Users row joined with profile, derived admin role and venue ownership.
    """
    id: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    last_login: Optional[str] = None
    is_active: bool = True
    auth_provider: Optional[str] = None
    auth_provider_id: Optional[str] = None

    profile: Optional[UserProfile] = None
    admin_role: Optional[AdminRoleInfo] = None
    venue_owner: Optional[VenueOwnerInfo] = None


class UserPage(BaseModel):
    users: List[UserData] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10


class StatusToggle(BaseModel):
    """Body for the users / admin-users / venues status switches."""
    is_active: bool
