# routers/club_owner.py

from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Query, Request, UploadFile
from supabase import Client

from core.cache import cached_view
from core.config import Settings, get_settings
from core.results import to_response
from core.storage import MAX_VIDEO_BYTES
from core.supabase_client import get_db
from dependencies.auth import require_area
from models.enums import Role
from models.principal import Principal
from services import promotions, venue_analytics, venue_images, venues


router = APIRouter(
    prefix="/club-owner",
    tags=["Club Owner"],
)

# Super admins can open any club-owner screen; the accessors still
# scope every venue to its owner records.
club_owner_area = require_area(Role.club_owner, Role.super_admin)


# ============================================================
# VENUES
# ============================================================
@router.get("/venues", summary="Venues owned by the caller")
def list_my_venues(
    request: Request,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = cached_view(
        request.url.path, principal.id, settings.VIEW_CACHE_TTL_SECONDS,
        lambda: venues.get_club_owner_venues(client, principal),
    )
    return to_response(result)


@router.post("/venues", summary="Create a venue owned by the caller")
def create_my_venue(
    payload: dict = Body(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return to_response(venues.create_venue(client, principal, payload, settings), status_code=201)


@router.get("/venues/{venue_id}")
def get_my_venue(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venues.get_club_owner_venue_by_id(client, principal, venue_id), detail_page=True)


@router.patch("/venues/{venue_id}")
def update_my_venue(
    venue_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venues.update_club_owner_venue(client, principal, venue_id, payload))


# ============================================================
# MEDIA
# ============================================================
@router.get("/venues/{venue_id}/images")
def list_venue_images(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_images.get_venue_images(client, principal, venue_id), detail_page=True)


@router.post("/venues/{venue_id}/images", summary="Upload a cover image or video")
def upload_venue_media(
    venue_id: str,
    file: Optional[UploadFile] = File(None),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if file is None:
        result = venue_images.upload_venue_image(client, principal, venue_id, None, None, None, settings)
    else:
        result = venue_images.upload_venue_image(
            client, principal, venue_id,
            file.filename, file.content_type, file.file.read(MAX_VIDEO_BYTES + 1),
            settings,
        )
    return to_response(result, status_code=201)


@router.delete("/venues/{venue_id}/images/{image_id}")
def remove_venue_media(
    venue_id: str,
    image_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_images.delete_venue_image(client, principal, venue_id, image_id))


@router.put("/venues/{venue_id}/images/order")
def reorder_venue_media(
    venue_id: str,
    payload=Body(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_images.update_venue_image_order(client, principal, venue_id, payload))


@router.patch("/venues/{venue_id}/images/{image_id}")
def update_venue_media(
    venue_id: str,
    image_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_images.update_venue_image(client, principal, venue_id, image_id, payload))


# ============================================================
# PROMOTIONS
# ============================================================
@router.get("/venues/{venue_id}/promotions")
def list_promotions(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(promotions.get_promotions_for_venue(client, principal, venue_id), detail_page=True)


@router.post("/venues/{venue_id}/promotions")
def create_promotion(
    venue_id: str,
    payload: dict = Body(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(promotions.create_promotion(client, principal, venue_id, payload), status_code=201)


# ============================================================
# ANALYTICS
# ============================================================
@router.get("/venues/{venue_id}/dashboard")
def venue_dashboard(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_analytics.get_venue_dashboard(client, principal, venue_id), detail_page=True)


@router.get("/venues/{venue_id}/analytics")
def venue_analytics_range(
    venue_id: str,
    start_date: str = Query(...),
    end_date: str = Query(...),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(
        venue_analytics.get_venue_analytics(client, principal, venue_id, start_date, end_date),
        detail_page=True,
    )


@router.get("/venues/{venue_id}/analytics/summary")
def venue_analytics_summary(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_analytics.get_venue_analytics_summary(client, principal, venue_id), detail_page=True)


@router.get("/venues/{venue_id}/analytics/activity")
def venue_recent_activity(
    venue_id: str,
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(
        venue_analytics.get_venue_recent_activity(client, principal, venue_id, limit),
        detail_page=True,
    )


@router.get("/venues/{venue_id}/analytics/top-reviews")
def venue_top_reviews(
    venue_id: str,
    limit: int = Query(5, ge=1, le=50),
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(venue_analytics.get_venue_top_reviews(client, principal, venue_id, limit), detail_page=True)


@router.get("/venues/{venue_id}/analytics/performance")
def venue_performance(
    venue_id: str,
    principal: Principal = Depends(club_owner_area),
    client: Client = Depends(get_db),
):
    return to_response(
        venue_analytics.get_venue_performance_metrics(client, principal, venue_id),
        detail_page=True,
    )
