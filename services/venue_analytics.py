# services/venue_analytics.py

from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import List, Optional

from supabase import Client

from core.analytics import average, period_windows, summarize
from core.errors import ValidationError, handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import require_venue_owner
from core.results import ActionResult, fail, guarded_action, ok
from core.utils import today_utc
from models.analytics import VenuePerformanceMetrics
from models.principal import Principal
from services.venues import fetch_profiles, get_club_owner_venue_by_id


DASHBOARD_WORKERS = 4


def _attach_user_profiles(client: Client, rows: List[dict]) -> List[dict]:
    profiles = fetch_profiles(client, list({r["user_id"] for r in rows if r.get("user_id")}))
    for row in rows:
        row["user"] = {"profile": profiles.get(row.get("user_id"))}
    return rows


def _samples(client: Client, venue_id: str, start: str, end: str) -> List[dict]:
    try:
        res = (
            client.table("venue_analytics")
            .select("*")
            .eq("venue_id", venue_id)
            .gte("date", start)
            .lte("date", end)
            .order("date")
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch venue analytics")
    return res.data or []


def _count(client: Client, table: str, venue_id: str, active_only: bool = False) -> int:
    query = client.table(table).select("id", count="exact").eq("venue_id", venue_id)
    if active_only:
        query = query.eq("is_active", True)
    try:
        return query.execute().count or 0
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch performance metrics")


# ============================================================
# Accessors (ownership of the venue required)
# ============================================================
@guarded_action("getVenueAnalytics")
def get_venue_analytics(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    start_date: str,
    end_date: str,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    try:
        start = date.fromisoformat(str(start_date))
        end = date.fromisoformat(str(end_date))
    except ValueError:
        raise ValidationError("Invalid date range", details={"issues": {"date": ["Dates must be YYYY-MM-DD"]}})

    if end < start:
        raise ValidationError("Invalid date range", details={"issues": {"end_date": ["End date must be after start date"]}})

    return ok(_samples(client, venue_id, start.isoformat(), end.isoformat()))


@guarded_action("getVenueAnalyticsSummary")
def get_venue_analytics_summary(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    today: Optional[date] = None,
) -> ActionResult:
    """Last 30 days against the 30 days before."""
    require_venue_owner(client, principal, venue_id)

    (cur_start, cur_end), (prev_start, prev_end) = period_windows(today or today_utc())
    current = _samples(client, venue_id, cur_start, cur_end)
    previous = _samples(client, venue_id, prev_start, prev_end)

    return ok(summarize(current, previous).model_dump())


@guarded_action("getVenueRecentActivity")
def get_venue_recent_activity(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    limit: int = 10,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    try:
        res = (
            client.table("user_interactions")
            .select("*")
            .eq("venue_id", venue_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch recent activity")

    return ok(_attach_user_profiles(client, res.data or []))


@guarded_action("getVenueTopReviews")
def get_venue_top_reviews(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    limit: int = 5,
) -> ActionResult:
    """Highest rating first; ties go to the newest review."""
    require_venue_owner(client, principal, venue_id)

    try:
        res = (
            client.table("reviews")
            .select("*")
            .eq("venue_id", venue_id)
            .order("rating", desc=True)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch top reviews")

    return ok(_attach_user_profiles(client, res.data or []))


@guarded_action("getVenuePerformanceMetrics")
def get_venue_performance_metrics(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    try:
        reviews = client.table("reviews").select("rating").eq("venue_id", venue_id).execute().data or []
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch performance metrics")

    ratings = [r["rating"] for r in reviews if r.get("rating") is not None]

    metrics = VenuePerformanceMetrics(
        total_events=_count(client, "events", venue_id),
        active_events=_count(client, "events", venue_id, active_only=True),
        total_promotions=_count(client, "promotions", venue_id),
        active_promotions=_count(client, "promotions", venue_id, active_only=True),
        total_images=_count(client, "venue_images", venue_id, active_only=True),
        average_rating=average(ratings),
        total_reviews=len(reviews),
    )
    return ok(metrics.model_dump())


# ============================================================
# Dashboard (independent reads issued concurrently)
# ============================================================
@guarded_action("getVenueDashboard")
def get_venue_dashboard(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    """
    Venue detail, summary, recent activity and top reviews in parallel.
    Each part is its own ActionResult, so one failing section does not
    blank the others. All futures are joined before returning.
    """
    require_venue_owner(client, principal, venue_id)

    parts = {
        "venue": (get_club_owner_venue_by_id, (client, principal, venue_id)),
        "summary": (get_venue_analytics_summary, (client, principal, venue_id)),
        "recent_activity": (get_venue_recent_activity, (client, principal, venue_id)),
        "top_reviews": (get_venue_top_reviews, (client, principal, venue_id)),
    }

    results = {}
    with ThreadPoolExecutor(max_workers=DASHBOARD_WORKERS) as executor:
        future_to_part = {
            executor.submit(func, *args): name
            for name, (func, args) in parts.items()
        }
        for future in as_completed(future_to_part):
            name = future_to_part[future]
            try:
                results[name] = future.result()
            except Exception as e:
                logger.error(f"Dashboard section {name} failed for venue {venue_id}: {e}")
                results[name] = fail("An unexpected error occurred", "UNEXPECTED_ERROR")

    return ok({name: results[name].model_dump() for name in parts})
