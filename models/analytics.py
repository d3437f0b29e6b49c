from typing import Optional
from pydantic import BaseModel, Field


# -------------------------------------------------
# Raw per-venue-per-day row (venue_analytics)
# -------------------------------------------------
class AnalyticsSample(BaseModel):
    date: str
    views: int = 0
    likes: int = 0
    saves: int = 0
    shares: int = 0
    check_ins: int = 0
    reviews_count: int = 0
    average_rating: Optional[float] = None


# -------------------------------------------------
# 30-day venue summary
# -------------------------------------------------
class AnalyticsSummary(BaseModel):
    total_views: int = 0
    total_likes: int = 0
    total_saves: int = 0
    total_shares: int = 0
    total_check_ins: int = 0
    total_reviews: int = 0
    average_rating: Optional[float] = None

    views_change: float = 0
    likes_change: float = 0
    saves_change: float = 0
    shares_change: float = 0


class VenuePerformanceMetrics(BaseModel):
    total_events: int = 0
    active_events: int = 0
    total_promotions: int = 0
    active_promotions: int = 0
    total_images: int = 0
    average_rating: Optional[float] = None
    total_reviews: int = 0


# -------------------------------------------------
# System-wide (super admin dashboard)
# -------------------------------------------------
class SystemMetrics(BaseModel):
    total_users: int = 0
    active_users: int = 0
    new_users: int = 0
    total_venues: int = 0
    active_venues: int = 0
    total_events: int = 0
    total_interactions: int = 0
    total_reviews: int = 0
    total_admin_users: int = 0

    user_growth_rate: float = 0
    venue_growth_rate: float = 0


class UserGrowthPoint(BaseModel):
    date: str
    total_users: int = 0
    new_users: int = 0
    active_users: int = 0


class VenueActivityPoint(BaseModel):
    date: str
    total_venues: int = 0
    active_venues: int = 0
    new_venues: int = 0


class InteractionPoint(BaseModel):
    date: str
    likes: int = 0
    saves: int = 0
    shares: int = 0
    check_ins: int = 0
    reviews: int = 0


class TopVenue(BaseModel):
    id: str
    name: Optional[str] = None
    city: Optional[str] = None
    total_views: int = 0
    total_likes: int = 0
    average_rating: Optional[float] = Field(None, description="Rounded to 1 decimal; None without reviews")
    review_count: int = 0
