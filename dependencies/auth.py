from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from supabase import Client

from core.config import Settings, get_settings
from core.errors import RedirectRequired
from core.logging_config import logger
from core.roles import resolve_role
from core.supabase_client import get_db
from models.enums import Role
from models.principal import Principal


bearer_scheme = HTTPBearer(auto_error=False)

LOGIN_PATH = "/auth/login"
UNAUTHORIZED_PATH = "/unauthorized"


# ============================================================
# Session expiry (exp claim; signature already checked by GoTrue)
# ============================================================
def session_expiry(token: str) -> Optional[datetime]:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None

    exp = claims.get("exp")
    if exp is None:
        return None
    return datetime.fromtimestamp(int(exp), tz=timezone.utc)


# ============================================================
# AUTH DECODING (Supabase: validates JWT, returns principal)
# ============================================================
def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    client: Client = Depends(get_db),
) -> Optional[Principal]:
    """
    Principal for the bearer token, or None when there is no valid session.
    Never raises for a bad token; callers decide how to reject.
    """
    if not credentials:
        return None

    token = credentials.credentials

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception as e:
        logger.info(f"Session rejected: {e}")
        return None

    if not auth_resp or not auth_resp.user or not auth_resp.user.email:
        return None

    principal = Principal(
        id=str(auth_resp.user.id),
        email=auth_resp.user.email,
        session_valid_until=session_expiry(token),
    )

    if principal.is_expired():
        return None
    return principal


def require_principal(principal: Optional[Principal] = Depends(get_current_principal)) -> Principal:
    """401 for API-style routes (no redirect)."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


# ============================================================
# AREA GATE (page-level redirect pattern)
# ============================================================
def require_area(*allowed_roles: Role):
    """
    Usage:
        router = APIRouter(prefix="/super-admin",
                           dependencies=[Depends(require_area(Role.super_admin))])

    No session → redirect to login. Wrong role → redirect to /unauthorized.
    Accessors behind the gate still re-check on every call.
    """
    allowed = set(allowed_roles)

    def gate(
        principal: Optional[Principal] = Depends(get_current_principal),
        client: Client = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ) -> Principal:
        if principal is None:
            raise RedirectRequired(LOGIN_PATH)

        role = resolve_role(client, principal, settings)
        if role not in allowed:
            logger.info(f"Area gate refused {principal.email} ({role})")
            raise RedirectRequired(UNAUTHORIZED_PATH)

        return principal

    return gate
