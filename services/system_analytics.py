# services/system_analytics.py

from datetime import date
from typing import Optional

from supabase import Client

from core.analytics import (
    PERIOD_DAYS,
    bucket_interactions,
    bucket_venue_activity,
    percent_change,
    rank_top_venues,
)
from core.config import Settings, get_settings
from core.errors import ValidationError, handle_supabase_error
from core.permission_helpers import require_permission
from core.results import ActionResult, guarded_action, ok
from core.utils import days_before, iso_day, today_utc
from models.analytics import SystemMetrics, UserGrowthPoint
from models.principal import Principal
from services.admin_users import count_admin_users


MAX_SERIES_DAYS = 365


def _count(client: Client, table: str, operation: str, **filters) -> int:
    """
    Exact row count. filters: gte_<col>, lt_<col>, eq_<col>.
    """
    query = client.table(table).select("id", count="exact")
    for key, value in filters.items():
        op, column = key.split("_", 1)
        query = getattr(query, op)(column, value)

    try:
        return query.execute().count or 0
    except Exception as e:
        raise handle_supabase_error(e, operation)


def _check_days(days: int):
    if days < 1 or days > MAX_SERIES_DAYS:
        raise ValidationError(
            "Invalid range",
            details={"issues": {"days": [f"days must be between 1 and {MAX_SERIES_DAYS}"]}},
        )


# ============================================================
# Super admin dashboard (view_system_analytics)
# ============================================================
@guarded_action("getSystemMetrics")
def get_system_metrics(
    client: Client,
    principal: Optional[Principal],
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> ActionResult:
    """
    Platform totals plus 30-day-over-30-day growth of new users / venues.
    """
    settings = settings or get_settings()
    require_permission(client, principal, "can_view_system_analytics", settings)

    today = today or today_utc()
    current_start = iso_day(days_before(today, PERIOD_DAYS))
    previous_start = iso_day(days_before(today, PERIOD_DAYS * 2))
    op = "Failed to fetch system metrics"

    total_venues = _count(client, "venues", op)
    if settings.VENUES_IS_ACTIVE_COLUMN:
        active_venues = _count(client, "venues", op, eq_is_active=True)
    else:
        active_venues = total_venues

    new_users = _count(client, "users", op, gte_created_at=current_start)
    prev_new_users = _count(client, "users", op, gte_created_at=previous_start, lt_created_at=current_start)
    new_venues = _count(client, "venues", op, gte_created_at=current_start)
    prev_new_venues = _count(client, "venues", op, gte_created_at=previous_start, lt_created_at=current_start)

    metrics = SystemMetrics(
        total_users=_count(client, "users", op),
        active_users=_count(client, "users", op, gte_last_login=current_start),
        new_users=new_users,
        total_venues=total_venues,
        active_venues=active_venues,
        total_events=_count(client, "events", op),
        total_interactions=_count(client, "user_interactions", op),
        total_reviews=_count(client, "reviews", op),
        total_admin_users=count_admin_users(client, settings),
        user_growth_rate=percent_change(new_users, prev_new_users),
        venue_growth_rate=percent_change(new_venues, prev_new_venues),
    )
    return ok(metrics.model_dump())


@guarded_action("getUserGrowthData")
def get_user_growth_data(
    client: Client,
    principal: Optional[Principal],
    days: int = 30,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> ActionResult:
    require_permission(client, principal, "can_view_system_analytics", settings)
    _check_days(days)

    start = iso_day(days_before(today or today_utc(), days))

    try:
        res = (
            client.table("system_analytics")
            .select("date, total_users, new_users, active_users")
            .gte("date", start)
            .order("date")
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch user growth data")

    return ok([UserGrowthPoint(**row).model_dump() for row in res.data or []])


@guarded_action("getVenueActivityData")
def get_venue_activity_data(
    client: Client,
    principal: Optional[Principal],
    days: int = 30,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> ActionResult:
    """Running venue totals per day, zero-filled."""
    settings = settings or get_settings()
    require_permission(client, principal, "can_view_system_analytics", settings)
    _check_days(days)

    columns = "id, created_at, is_active" if settings.VENUES_IS_ACTIVE_COLUMN else "id, created_at"

    try:
        venues = client.table("venues").select(columns).execute().data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venue activity data")

    points = bucket_venue_activity(
        venues, days, today or today_utc(),
        track_active=settings.VENUES_IS_ACTIVE_COLUMN,
    )
    return ok([p.model_dump() for p in points])


@guarded_action("getInteractionData")
def get_interaction_data(
    client: Client,
    principal: Optional[Principal],
    days: int = 30,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> ActionResult:
    """Interactions per type per day, zero-filled."""
    require_permission(client, principal, "can_view_system_analytics", settings)
    _check_days(days)

    today = today or today_utc()
    start = iso_day(days_before(today, days - 1))

    try:
        rows = (
            client.table("user_interactions")
            .select("created_at, interaction_type")
            .gte("created_at", start)
            .execute()
        ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch interaction data")

    return ok([p.model_dump() for p in bucket_interactions(rows, days, today)])


@guarded_action("getTopVenues")
def get_top_venues(
    client: Client,
    principal: Optional[Principal],
    limit: int = 10,
    settings: Optional[Settings] = None,
) -> ActionResult:
    """
    Ranked over every venue before the limit is applied.
    """
    settings = settings or get_settings()
    require_permission(client, principal, "can_view_system_analytics", settings)

    query = client.table("venues").select("id, name, city")
    if settings.VENUES_IS_ACTIVE_COLUMN:
        query = query.eq("is_active", True)

    try:
        venues = query.execute().data or []
        venue_ids = [v["id"] for v in venues]
        analytics, reviews = [], []
        if venue_ids:
            analytics = (
                client.table("venue_analytics")
                .select("venue_id, views, likes")
                .in_("venue_id", venue_ids)
                .execute()
            ).data or []
            reviews = (
                client.table("reviews")
                .select("venue_id, rating")
                .in_("venue_id", venue_ids)
                .execute()
            ).data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch top venues")

    ranked = rank_top_venues(venues, analytics, reviews, limit)
    return ok([v.model_dump() for v in ranked])
