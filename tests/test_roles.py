# tests/test_roles.py

"""
Tests for role resolution and the role → permissions table.
"""

import pytest

from core.errors import DatabaseError
from core.permission_helpers import has_permission
from core.permissions import ROLE_PERMISSIONS, permissions_for
from core.roles import (
    has_role_at_least,
    resolve_role,
    resolve_role_by_email,
    role_display_name,
)
from models.enums import Role
from models.principal import Principal


def test_no_principal_resolves_to_none(db, settings):
    assert resolve_role(db, None, settings) == Role.none


def test_super_admin_email_match_is_case_insensitive(db, settings):
    """Allow-list entries are upper-cased in the fixture."""
    principal = Principal(id="x", email="  Root@BuzzVar.io ")
    assert resolve_role(db, principal, settings) == Role.super_admin


def test_super_admin_wins_over_admin_list(db, settings):
    both = settings.model_copy(update={"ADMIN_EMAILS": "root@buzzvar.io"})
    principal = Principal(id="x", email="root@buzzvar.io")
    assert resolve_role(db, principal, both) == Role.super_admin


def test_admin_email_wins_over_ownership(db, settings):
    db.tables["venue_owners"].append({"id": "vo9", "user_id": "admin-1", "venue_id": "v1", "role": "owner"})
    assert resolve_role(db, Principal(id="admin-1", email="mod@buzzvar.io"), settings) == Role.admin


def test_ownership_record_gives_club_owner(db, settings, owner):
    assert resolve_role(db, owner, settings) == Role.club_owner


def test_manager_and_staff_records_also_count(db, settings):
    db.tables["venue_owners"].append({"id": "vo3", "user_id": "staff-1", "venue_id": "v1", "role": "staff"})
    assert resolve_role(db, Principal(id="staff-1", email="staff@club.io"), settings) == Role.club_owner


def test_no_match_resolves_to_none(db, settings, stranger):
    assert resolve_role(db, stranger, settings) == Role.none


def test_empty_allow_lists_are_not_an_error(db, owner):
    from core.config import Settings
    assert resolve_role(db, owner, Settings(SUPER_ADMIN_EMAILS=None, ADMIN_EMAILS="")) == Role.club_owner


def test_ownership_lookup_failure_is_not_treated_as_none(db, settings, stranger):
    """Storage errors must never downgrade the caller silently."""
    db.fail_on("venue_owners")
    with pytest.raises(DatabaseError):
        resolve_role(db, stranger, settings)


def test_role_is_rederived_on_every_call(db, settings, stranger):
    assert resolve_role(db, stranger, settings) == Role.none
    db.tables["venue_owners"].append({"id": "vo4", "user_id": stranger.id, "venue_id": "v2", "role": "manager"})
    assert resolve_role(db, stranger, settings) == Role.club_owner


def test_resolve_role_by_email(db, settings):
    assert resolve_role_by_email(db, "owner@club.io", settings) == Role.club_owner
    assert resolve_role_by_email(db, "MOD@buzzvar.io", settings) == Role.admin
    assert resolve_role_by_email(db, "unknown@example.io", settings) == Role.none


# -------------------------------------------------
# Hierarchy / display
# -------------------------------------------------
def test_role_hierarchy():
    assert has_role_at_least(Role.super_admin, Role.admin)
    assert has_role_at_least(Role.admin, Role.admin)
    assert not has_role_at_least(Role.moderator, Role.admin)
    assert has_role_at_least(Role.moderator, Role.club_owner)


def test_none_never_satisfies_hierarchy():
    assert not has_role_at_least(Role.none, Role.club_owner)
    assert not has_role_at_least(Role.super_admin, Role.none)


def test_display_names():
    assert role_display_name(Role.super_admin) == "Super Admin"
    assert role_display_name(Role.club_owner) == "Club Owner"
    assert role_display_name(Role.none) == "No Role"


# -------------------------------------------------
# Permission table
# -------------------------------------------------
def test_super_admin_has_every_flag():
    flags = permissions_for(Role.super_admin).model_dump()
    assert all(flags.values())


def test_admin_cannot_manage_users_or_view_system_analytics():
    perms = permissions_for(Role.admin)
    assert perms.can_manage_venues and perms.can_moderate_content
    assert not perms.can_manage_users
    assert not perms.can_view_system_analytics
    assert not perms.can_manage_own_venues


def test_moderator_and_club_owner_flags():
    assert permissions_for(Role.moderator).model_dump() == {
        "can_view_system_analytics": False,
        "can_manage_users": False,
        "can_manage_venues": False,
        "can_moderate_content": True,
        "can_manage_own_venues": False,
    }
    assert permissions_for(Role.club_owner).can_manage_own_venues
    assert not permissions_for(Role.club_owner).can_manage_venues


def test_none_has_no_permissions():
    assert not any(permissions_for(Role.none).model_dump().values())


def test_permission_sets_are_immutable():
    with pytest.raises(Exception):
        ROLE_PERMISSIONS[Role.admin].can_manage_users = True
    assert not permissions_for(Role.admin).can_manage_users


def test_has_permission_rederives_role(db, settings, stranger):
    assert not has_permission(db, stranger, "can_manage_own_venues", settings)
    db.tables["venue_owners"].append({"id": "vo5", "user_id": stranger.id, "venue_id": "v1", "role": "staff"})
    assert has_permission(db, stranger, "can_manage_own_venues", settings)
    assert not has_permission(db, None, "can_manage_own_venues", settings)
