# routers/auth.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from supabase import Client

from core.config import Settings, get_settings
from core.logging_config import logger
from core.permissions import permissions_for
from core.results import to_response
from core.roles import resolve_role, role_display_name
from core.supabase_client import get_db
from dependencies.auth import get_current_principal, require_principal
from models.principal import Principal
from services import profile


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN (SUPABASE GOOGLE OAUTH)
# ============================================================
@router.get("/login", summary="Google sign-in URL")
def login(
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Area gates redirect here. Returns the provider URL the dashboard
    sends the browser to; Supabase calls back on {SITE_URL}/auth/callback.
    """
    try:
        response = client.auth.sign_in_with_oauth({
            "provider": "google",
            "options": {"redirect_to": f"{settings.SITE_URL}/auth/callback"},
        })
    except Exception as e:
        logger.warning(f"OAuth URL generation failed: {type(e).__name__}")
        raise HTTPException(status_code=502, detail="Sign-in provider unavailable")

    return {"provider": "google", "url": response.url}


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", summary="Current principal with resolved role")
def read_me(
    principal: Principal = Depends(require_principal),
    client: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    role = resolve_role(client, principal, settings)
    return {
        "id": principal.id,
        "email": principal.email,
        "role": role.value,
        "role_display_name": role_display_name(role),
        "permissions": permissions_for(role).model_dump(),
    }


# ============================================================
# PROFILE BOOTSTRAP
# ============================================================
@router.get("/profile/check")
def check_profile(
    principal: Optional[Principal] = Depends(get_current_principal),
    client: Client = Depends(get_db),
):
    return to_response(profile.check_user_profile(client, principal))


@router.post("/profile/ensure")
def ensure_profile(
    principal: Optional[Principal] = Depends(get_current_principal),
    client: Client = Depends(get_db),
):
    return to_response(profile.ensure_user_exists(client, principal))


@router.post("/profile/venue-owner/{venue_id}")
def claim_venue(
    venue_id: str,
    principal: Optional[Principal] = Depends(get_current_principal),
    client: Client = Depends(get_db),
):
    return to_response(profile.create_venue_owner_profile(client, principal, venue_id), status_code=201)


# ============================================================
# WRONG-ROLE LANDING
# ============================================================
unauthorized_router = APIRouter(tags=["Auth"])


@unauthorized_router.get("/unauthorized", summary="Wrong-role landing")
def unauthorized():
    return JSONResponse(
        status_code=403,
        content={
            "success": False,
            "error": "You do not have access to this area",
            "code": "ACCESS_DENIED",
        },
    )
