from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.supabase_client import get_supabase_client, get_user_client
from core.logging_config import logger


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (auth identity + profile row)
# ============================================================
class CurrentUser(BaseModel):
    id: str                          # auth.users.id == profiles.id
    email: str
    role: str                        # profiles.role, NOT user metadata

    full_name: Optional[str] = None
    phone: Optional[str] = None

    # Caller JWT, forwarded to PostgREST so row-level security applies
    access_token: Optional[str] = None


# ============================================================
# AUTH DECODING (validates JWT via GoTrue, then loads profile)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
    except Exception:
        raise unauthorized

    if not auth_resp or not auth_resp.user or not auth_resp.user.email:
        raise unauthorized

    auth_user = auth_resp.user

    # ---------------------------------------------------------
    # Load profile as the user (profiles are readable by any
    # authenticated identity)
    # ---------------------------------------------------------
    user_client = get_user_client(token)
    try:
        result = (
            user_client.table("profiles")
            .select("*")
            .eq("id", auth_user.id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Profile lookup failed for {auth_user.id}: {e}")
        raise HTTPException(500, "Failed to load profile")

    if not result.data:
        # Authenticated but never completed signup → no screen set
        raise HTTPException(403, "Profile not found for this account")

    profile = result.data[0]

    return CurrentUser(
        id=auth_user.id,
        email=profile.get("email") or auth_user.email,
        role=profile.get("role") or "",
        full_name=profile.get("full_name"),
        phone=profile.get("phone"),
        access_token=token,
    )


# ============================================================
# ROLE CHECKER (screen-set guard; UX only, policies enforce)
# ============================================================
def requires_role(allowed_roles: list[str]):
    def checker(current_user: CurrentUser = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Requires one of: {allowed_roles}",
            )
        return current_user
    return checker


# ============================================================
# OPTIONAL AUTHENTICATION (for hybrid endpoints)
# ============================================================
def get_optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
) -> Optional[CurrentUser]:
    """
    Returns CurrentUser if a valid token with a profile was provided,
    None otherwise. Never raises for a missing or bad token.
    """
    if not credentials:
        return None

    try:
        return get_current_user(credentials)
    except HTTPException:
        return None
