# tests/test_users.py

"""
Tests for user management and admin user management.
"""

import pytest

from services import admin_users, users


# -------------------------------------------------
# Users list
# -------------------------------------------------
def test_get_users_newest_first_with_roles(db, settings, super_admin):
    result = users.get_users(db, super_admin, 1, 10, None, settings)

    assert result.success
    page = result.data
    assert page["total"] == 5
    assert [u["id"] for u in page["users"]] == ["nobody-1", "owner-2", "owner-1", "admin-1", "super-1"]

    by_id = {u["id"]: u for u in page["users"]}
    assert by_id["super-1"]["admin_role"]["role"] == "super_admin"
    assert by_id["admin-1"]["admin_role"]["role"] == "admin"
    assert by_id["owner-1"]["venue_owner"] == {"role": "owner", "venue_count": 1}
    assert by_id["owner-1"]["profile"]["first_name"] == "Olive"
    assert by_id["nobody-1"]["admin_role"] is None
    assert by_id["nobody-1"]["is_active"] is True


def test_get_users_pagination(db, settings, super_admin):
    page = users.get_users(db, super_admin, 2, 2, None, settings).data
    assert [u["id"] for u in page["users"]] == ["owner-1", "admin-1"]
    assert page["total"] == 5


def test_get_users_search_is_case_insensitive(db, settings, super_admin):
    page = users.get_users(db, super_admin, 1, 10, {"search": "CLUB"}, settings).data
    assert {u["id"] for u in page["users"]} == {"owner-1", "owner-2"}


def test_get_users_role_filter_after_fetch(db, settings, super_admin):
    page = users.get_users(db, super_admin, 1, 10, {"role": "club_owner"}, settings).data
    assert {u["id"] for u in page["users"]} == {"owner-1", "owner-2"}
    # total is the storage count before the role filter
    assert page["total"] == 5


def test_get_users_plain_user_filter(db, settings, super_admin):
    page = users.get_users(db, super_admin, 1, 10, {"role": "user"}, settings).data
    assert [u["id"] for u in page["users"]] == ["nobody-1"]


def test_get_users_auth_provider_filter(db, settings, super_admin):
    page = users.get_users(db, super_admin, 1, 10, {"auth_provider": "email"}, settings).data
    assert {u["id"] for u in page["users"]} == {"owner-2", "nobody-1"}


def test_inactive_filter_without_column_is_empty(db, settings, super_admin):
    page = users.get_users(db, super_admin, 1, 10, {"status": "inactive"}, settings).data
    assert page["users"] == [] and page["total"] == 0


def test_status_filter_with_column(db, flagged_settings, super_admin):
    db.tables["users"][4]["is_active"] = False
    for row in db.tables["users"][:4]:
        row["is_active"] = True

    page = users.get_users(db, super_admin, 1, 10, {"status": "inactive"}, flagged_settings).data
    assert [u["id"] for u in page["users"]] == ["nobody-1"]
    assert page["users"][0]["is_active"] is False


@pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (1, 101)])
def test_get_users_rejects_bad_pagination(db, settings, super_admin, page, page_size):
    assert users.get_users(db, super_admin, page, page_size, None, settings).code == "VALIDATION_ERROR"


def test_get_users_rejects_unknown_filter_value(db, settings, super_admin):
    result = users.get_users(db, super_admin, 1, 10, {"status": "sleeping"}, settings)
    assert result.code == "VALIDATION_ERROR"
    assert "status" in result.details["issues"]


def test_admin_cannot_manage_users(db, settings, admin):
    assert users.get_users(db, admin, 1, 10, None, settings).code == "ACCESS_DENIED"


def test_get_user_by_id(db, settings, super_admin):
    assert users.get_user_by_id(db, super_admin, "owner-2", settings).data["email"] == "rival@club.io"
    assert users.get_user_by_id(db, super_admin, "ghost", settings).code == "NOT_FOUND"


# -------------------------------------------------
# Status / delete
# -------------------------------------------------
def test_cannot_deactivate_self(db, flagged_settings, super_admin):
    result = users.toggle_user_status(db, super_admin, "super-1", False, flagged_settings)
    assert result.code == "SELF_TARGET_FORBIDDEN"
    assert result.error == "Cannot deactivate your own account"


def test_self_check_runs_before_feature_check(db, settings, super_admin):
    result = users.toggle_user_status(db, super_admin, "super-1", False, settings)
    assert result.code == "SELF_TARGET_FORBIDDEN"


def test_toggle_status_unavailable_without_column(db, settings, super_admin):
    result = users.toggle_user_status(db, super_admin, "owner-1", False, settings)
    assert result.code == "FEATURE_UNAVAILABLE"


def test_toggle_status_with_column(db, flagged_settings, super_admin):
    assert users.toggle_user_status(db, super_admin, "owner-1", False, flagged_settings).success
    assert db.rows("users")[2]["is_active"] is False


def test_cannot_delete_self(db, settings, super_admin):
    result = users.delete_user(db, super_admin, "super-1", settings)
    assert result.code == "SELF_TARGET_FORBIDDEN"
    assert len(db.rows("users")) == 5


def test_delete_user(db, settings, super_admin):
    assert users.delete_user(db, super_admin, "nobody-1", settings).success
    assert "nobody-1" not in {u["id"] for u in db.rows("users")}


def test_delete_user_refused_for_admin(db, settings, admin):
    assert users.delete_user(db, admin, "nobody-1", settings).code == "ACCESS_DENIED"


# -------------------------------------------------
# Admin users
# -------------------------------------------------
def test_admin_users_unavailable_without_table(db, settings, super_admin):
    result = admin_users.get_admin_users(db, super_admin, settings)
    assert result.code == "FEATURE_UNAVAILABLE"


def test_admin_users_role_check_runs_first(db, settings, admin):
    assert admin_users.get_admin_users(db, admin, settings).code == "ACCESS_DENIED"


def test_count_admin_users_is_zero_without_table(db, settings):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "admin-1", "role": "admin"}]
    assert admin_users.count_admin_users(db, settings) == 0


def test_create_admin_user_for_new_email(db, flagged_settings, super_admin):
    db.tables["admin_users"] = []

    result = admin_users.create_admin_user(
        db, super_admin, {"email": "newmod@buzzvar.io", "role": "moderator"}, flagged_settings
    )

    assert result.success
    new_user = db.rows("users")[-1]
    assert new_user["email"] == "newmod@buzzvar.io"
    profile = db.rows("user_profiles")[-1]
    assert profile["user_id"] == new_user["id"]
    assert profile["first_name"] == "newmod"
    admin_row = db.rows("admin_users")[0]
    assert admin_row["user_id"] == new_user["id"]
    assert admin_row["role"] == "moderator"
    assert admin_row["created_by"] == "super-1"


def test_create_admin_user_reuses_existing_user(db, flagged_settings, super_admin):
    db.tables["admin_users"] = []
    result = admin_users.create_admin_user(
        db, super_admin, {"email": "owner@club.io", "role": "admin"}, flagged_settings
    )
    assert result.success
    assert len(db.rows("users")) == 5
    assert db.rows("admin_users")[0]["user_id"] == "owner-1"


def test_create_admin_user_twice_conflicts(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "owner-1", "role": "admin"}]
    result = admin_users.create_admin_user(
        db, super_admin, {"email": "owner@club.io", "role": "admin"}, flagged_settings
    )
    assert result.code == "ALREADY_EXISTS"


def test_create_admin_user_validates_email(db, flagged_settings, super_admin):
    result = admin_users.create_admin_user(db, super_admin, {"email": "nope", "role": "admin"}, flagged_settings)
    assert result.code == "VALIDATION_ERROR"
    assert "email" in result.details["issues"]


def test_cannot_delete_own_admin_record(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "super-1", "role": "admin"}]
    result = admin_users.delete_admin_user(db, super_admin, "a1", flagged_settings)
    assert result.code == "SELF_TARGET_FORBIDDEN"
    assert result.error == "Cannot delete your own admin account"


def test_delete_admin_user_keeps_users_row(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "admin-1", "role": "admin"}]
    assert admin_users.delete_admin_user(db, super_admin, "a1", flagged_settings).success
    assert db.rows("admin_users") == []
    assert any(u["id"] == "admin-1" for u in db.rows("users"))


def test_cannot_deactivate_own_admin_record(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "super-1", "role": "admin"}]
    result = admin_users.toggle_admin_user_status(db, super_admin, "a1", False, flagged_settings)
    assert result.code == "SELF_TARGET_FORBIDDEN"


@pytest.fixture
def admin_table_only(settings):
    """admin_users exists but users.is_active does not."""
    return settings.model_copy(update={"ADMIN_USERS_TABLE": True})


def test_create_admin_user_skips_missing_status_column(db, admin_table_only, super_admin):
    db.tables["admin_users"] = []

    result = admin_users.create_admin_user(
        db, super_admin, {"email": "newmod@buzzvar.io", "role": "moderator"}, admin_table_only
    )

    assert result.success
    assert "is_active" not in db.rows("users")[-1]


def test_create_admin_user_sets_active_with_column(db, flagged_settings, super_admin):
    db.tables["admin_users"] = []
    admin_users.create_admin_user(db, super_admin, {"email": "newmod@buzzvar.io", "role": "admin"}, flagged_settings)
    assert db.rows("users")[-1]["is_active"] is True


def test_toggle_admin_status_unavailable_without_column(db, admin_table_only, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "admin-1", "role": "admin"}]

    result = admin_users.toggle_admin_user_status(db, super_admin, "a1", False, admin_table_only)

    assert result.code == "FEATURE_UNAVAILABLE"
    admin_row = next(u for u in db.rows("users") if u["id"] == "admin-1")
    assert "is_active" not in admin_row


def test_toggle_admin_status_with_column(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "admin-1", "role": "admin"}]

    assert admin_users.toggle_admin_user_status(db, super_admin, "a1", False, flagged_settings).success

    admin_row = next(u for u in db.rows("users") if u["id"] == "admin-1")
    assert admin_row["is_active"] is False


def test_update_admin_user(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "admin-1", "role": "admin"}]
    assert admin_users.update_admin_user(db, super_admin, "a1", {"role": "moderator"}, flagged_settings).success
    assert db.rows("admin_users")[0]["role"] == "moderator"
    assert admin_users.update_admin_user(db, super_admin, "zz", {"role": "admin"}, flagged_settings).code == "NOT_FOUND"


def test_get_admin_users_attaches_user(db, flagged_settings, super_admin):
    db.tables["admin_users"] = [{"id": "a1", "user_id": "owner-1", "role": "admin", "created_at": "2025-01-01"}]
    result = admin_users.get_admin_users(db, super_admin, flagged_settings)
    assert result.data[0]["user"]["email"] == "owner@club.io"
    assert result.data[0]["user"]["profile"]["first_name"] == "Olive"
