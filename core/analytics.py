# core/analytics.py

"""
Pure aggregation over rows already fetched from Supabase.
No I/O here; the services fetch, this module sums.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from core.utils import day_of, days_before, iso_day
from models.analytics import (
    AnalyticsSample,
    AnalyticsSummary,
    InteractionPoint,
    TopVenue,
    VenueActivityPoint,
)
from models.enums import InteractionType


PERIOD_DAYS = 30

SUMMED_FIELDS = ("views", "likes", "saves", "shares", "check_ins", "reviews_count")


# -----------------------------------------------------
# Percent change
# -----------------------------------------------------
def percent_change(current: float, previous: float) -> float:
    """
    100 when growing from zero, 0 when both are zero,
    otherwise the plain relative change in percent.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


# -----------------------------------------------------
# Windows
# -----------------------------------------------------
def period_windows(today: date, days: int = PERIOD_DAYS) -> Tuple[Tuple[str, str], Tuple[str, str]]:
    """
    ((current_start, current_end), (previous_start, previous_end)) as
    YYYY-MM-DD strings. Both bounds inclusive; the boundary day appears
    in both windows.
    """
    current_start = days_before(today, days)
    previous_start = days_before(current_start, days)
    return (
        (iso_day(current_start), iso_day(today)),
        (iso_day(previous_start), iso_day(current_start)),
    )


def day_range(today: date, days: int) -> List[str]:
    """The last `days` calendar days ending today, oldest first."""
    return [iso_day(days_before(today, days - 1 - i)) for i in range(days)]


# -----------------------------------------------------
# Summaries
# -----------------------------------------------------
def _as_sample(row) -> AnalyticsSample:
    if isinstance(row, AnalyticsSample):
        return row
    return AnalyticsSample(**{k: v for k, v in row.items() if k in AnalyticsSample.model_fields})


def totals(samples: Iterable) -> Dict[str, int]:
    sums = {field: 0 for field in SUMMED_FIELDS}
    for row in samples:
        sample = _as_sample(row)
        for field in SUMMED_FIELDS:
            sums[field] += getattr(sample, field) or 0
    return sums


def mean_rating(samples: Iterable) -> Optional[float]:
    """Average of non-null average_rating values; None when none are rated."""
    rated = [s.average_rating for s in map(_as_sample, samples) if s.average_rating is not None]
    if not rated:
        return None
    return sum(rated) / len(rated)


def summarize(current: List, previous: Optional[List] = None) -> AnalyticsSummary:
    """
    Totals + rating mean for `current`, with percent changes against
    `previous` for views / likes / saves / shares.
    """
    previous = previous or []
    cur = totals(current)
    prev = totals(previous)

    return AnalyticsSummary(
        total_views=cur["views"],
        total_likes=cur["likes"],
        total_saves=cur["saves"],
        total_shares=cur["shares"],
        total_check_ins=cur["check_ins"],
        total_reviews=cur["reviews_count"],
        average_rating=mean_rating(current),
        views_change=percent_change(cur["views"], prev["views"]),
        likes_change=percent_change(cur["likes"], prev["likes"]),
        saves_change=percent_change(cur["saves"], prev["saves"]),
        shares_change=percent_change(cur["shares"], prev["shares"]),
    )


def average(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


# -----------------------------------------------------
# Chart series (zero-filled per day)
# -----------------------------------------------------
INTERACTION_FIELDS = {
    InteractionType.like.value: "likes",
    InteractionType.save.value: "saves",
    InteractionType.share.value: "shares",
    InteractionType.check_in.value: "check_ins",
    InteractionType.review.value: "reviews",
}


def bucket_interactions(rows: Iterable[dict], days: int, today: date) -> List[InteractionPoint]:
    buckets = {d: InteractionPoint(date=d) for d in day_range(today, days)}

    for row in rows:
        point = buckets.get(day_of(row.get("created_at")))
        field = INTERACTION_FIELDS.get(row.get("interaction_type"))
        if point is None or field is None:
            continue
        setattr(point, field, getattr(point, field) + 1)

    return list(buckets.values())


def bucket_venue_activity(
    rows: Iterable[dict],
    days: int,
    today: date,
    track_active: bool = False,
) -> List[VenueActivityPoint]:
    """
    Running totals per day from venue rows (created_at, is_active).
    Without an is_active column every venue counts as active.
    """
    venues = [(day_of(r.get("created_at")), r.get("is_active", True)) for r in rows]
    points = []

    for d in day_range(today, days):
        created = [v for v in venues if v[0] and v[0] <= d]
        active = [v for v in created if v[1]] if track_active else created
        points.append(
            VenueActivityPoint(
                date=d,
                total_venues=len(created),
                active_venues=len(active),
                new_venues=sum(1 for v in created if v[0] == d),
            )
        )

    return points


# -----------------------------------------------------
# Top venues
# -----------------------------------------------------
def rank_top_venues(
    venues: Iterable[dict],
    analytics: Iterable[dict],
    reviews: Iterable[dict],
    limit: int = 10,
) -> List[TopVenue]:
    """
    Sum views/likes per venue, mean review rating (1 decimal),
    sorted by total views descending.
    """
    views: Dict[str, int] = {}
    likes: Dict[str, int] = {}
    for row in analytics:
        vid = row.get("venue_id")
        views[vid] = views.get(vid, 0) + (row.get("views") or 0)
        likes[vid] = likes.get(vid, 0) + (row.get("likes") or 0)

    ratings: Dict[str, List[float]] = {}
    for row in reviews:
        if row.get("rating") is None:
            continue
        ratings.setdefault(row.get("venue_id"), []).append(row["rating"])

    ranked = []
    for venue in venues:
        vid = venue["id"]
        mean = average(ratings.get(vid, []))
        ranked.append(
            TopVenue(
                id=vid,
                name=venue.get("name"),
                city=venue.get("city"),
                total_views=views.get(vid, 0),
                total_likes=likes.get(vid, 0),
                average_rating=round(mean, 1) if mean is not None else None,
                review_count=len(ratings.get(vid, [])),
            )
        )

    ranked.sort(key=lambda v: v.total_views, reverse=True)
    return ranked[:limit]
