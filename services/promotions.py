# services/promotions.py

from typing import Optional

from supabase import Client

from core.cache import revalidate_path
from core.errors import handle_supabase_error, parse_form
from core.permission_helpers import require_venue_owner
from core.results import ActionResult, guarded_action, ok
from core.utils import utc_now_iso
from models.principal import Principal
from models.promotion import PromotionForm


def promotions_path(venue_id: str) -> str:
    return f"/club-owner/venues/{venue_id}/promotions"


@guarded_action("createPromotion")
def create_promotion(
    client: Client,
    principal: Optional[Principal],
    venue_id: str,
    form,
) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    promotion = parse_form(PromotionForm, form)
    payload = promotion.model_dump(mode="json")
    payload.update({
        "venue_id": venue_id,
        "created_by": principal.id,
        "is_active": True,
        "updated_at": utc_now_iso(),
    })

    try:
        res = client.table("promotions").insert(payload).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create promotion in the database.")

    revalidate_path(promotions_path(venue_id))
    return ok({"id": res.data[0]["id"]})


@guarded_action("getPromotionsForVenue")
def get_promotions_for_venue(client: Client, principal: Optional[Principal], venue_id: str) -> ActionResult:
    require_venue_owner(client, principal, venue_id)

    try:
        res = (
            client.table("promotions")
            .select("*")
            .eq("venue_id", venue_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch promotions")

    return ok(res.data or [])
