from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Request

from core.config import settings
from core.errors import auth_error, handle_supabase_error
from core.logging_config import logger
from core.policies import require
from core.rate_limiter import require_rate_limit
from core.routing import resolve_route
from core.supabase_client import get_supabase_client, get_user_client, get_admin_client
from core.utils import sanitize
from dependencies.auth import get_current_user, get_optional_auth, CurrentUser
from models.auth import LoginRequest, TokenResponse, SignupResponse, RouteResponse
from models.profile import ProfileRead, ProfileUpdate, SignupRequest


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


def _token_response(session, profile: Optional[dict] = None) -> TokenResponse:
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
        profile=ProfileRead(**profile) if profile else None,
    )


def _fetch_profile(client, user_id: str) -> Optional[dict]:
    result = (
        client.table("profiles")
        .select("*")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )
    return result.data[0] if result.data else None


# ============================================================
# SIGN UP (auth user + profile row)
# ============================================================
@router.post("/signup", response_model=SignupResponse, summary="Create account and profile")
def signup(payload: SignupRequest, request: Request):
    email = payload.email.strip().lower()

    require_rate_limit(
        request,
        scope="signup",
        max_requests=settings.SIGNUP_RATE_LIMIT,
        window_seconds=settings.SIGNUP_RATE_WINDOW_SECONDS,
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        auth_resp = client.auth.sign_up({
            "email": email,
            "password": payload.password,
            "options": {"data": {"full_name": payload.full_name, "role": payload.role.value}},
        })
    except Exception as e:
        raise auth_error(e, 400)

    if not auth_resp.user:
        raise HTTPException(400, "Signup did not return a user")

    user_id = auth_resp.user.id
    session = auth_resp.session

    profile = sanitize({
        "id": user_id,
        "email": email,
        "full_name": payload.full_name,
        "role": payload.role,
        "phone": payload.phone,
    })
    require(CurrentUser(id=user_id, email=email, role=payload.role.value), "profiles", "insert", profile)

    # With email confirmation on there is no session yet, so the
    # row can only be written by the service role.
    writer = get_user_client(session.access_token) if session else get_admin_client()
    if writer is None:
        raise HTTPException(500, "Cannot create profile before email confirmation: service role not configured")

    try:
        writer.table("profiles").insert(profile).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create profile")

    logger.info(f"Signup completed for {user_id} as {payload.role.value}")

    return SignupResponse(
        user_id=user_id,
        needs_confirmation=session is None,
        session=_token_response(session, profile) if session else None,
    )


# ============================================================
# LOGIN
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate user")
def login(payload: LoginRequest):
    email = payload.email.strip().lower()

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_in_with_password({"email": email, "password": payload.password})
    except Exception as e:
        raise auth_error(e, 401)

    if not response.session or not response.session.access_token:
        raise HTTPException(401, "Invalid login credentials")

    try:
        profile = _fetch_profile(get_user_client(response.session.access_token), response.user.id)
    except Exception as e:
        # Signed in without a profile: the client routes to /auth
        logger.warning(f"Profile fetch after login failed for {response.user.id}: {e}")
        profile = None

    return _token_response(response.session, profile)


# ============================================================
# LOGOUT
# ============================================================
@router.post("/logout", summary="Revoke the current session")
def logout(current_user: CurrentUser = Depends(get_current_user)):
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        client.auth.admin.sign_out(current_user.access_token)
    except Exception as e:
        raise auth_error(e, 400)

    logger.info(f"User {current_user.id} signed out")
    return {"success": True}


# ============================================================
# CURRENT PROFILE
# ============================================================
@router.get("/me", response_model=ProfileRead, summary="Current user's profile")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    try:
        profile = _fetch_profile(client, current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load profile")

    if not profile:
        raise HTTPException(404, "Profile not found")
    return profile


@router.patch("/me", response_model=ProfileRead, summary="Update current user's profile")
def update_me(payload: ProfileUpdate, current_user: CurrentUser = Depends(get_current_user)):
    updates = sanitize(payload.model_dump(exclude_unset=True))
    if "full_name" in updates and not updates["full_name"]:
        raise HTTPException(400, "full_name cannot be empty")

    client = get_user_client(current_user.access_token)
    existing = {"id": current_user.id, "role": current_user.role}
    require(current_user, "profiles", "update", existing, new_row={**existing, **updates})

    if updates:
        try:
            client.table("profiles").update(updates).eq("id", current_user.id).execute()
        except Exception as e:
            raise handle_supabase_error(e, "Failed to update profile")
        logger.info(f"User {current_user.id} updated their profile")

    # Re-fetch so the caller sees what the store actually holds
    try:
        profile = _fetch_profile(client, current_user.id)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load profile")

    if not profile:
        raise HTTPException(404, "Profile not found")
    return profile


# ============================================================
# ROUTING DECISION
# ============================================================
@router.get("/route", response_model=RouteResponse, summary="Screen set for the caller")
def read_route(current_user: Optional[CurrentUser] = Depends(get_optional_auth)):
    """
    admin / landowner / public for a signed-in user with a profile,
    auth otherwise (no token, bad token, no profile, unknown role).
    """
    if current_user is None:
        return RouteResponse(route=resolve_route(False, None, None).value)

    # A resolved CurrentUser implies a live session
    route = resolve_route(loading=False, session=True, profile=current_user)
    return RouteResponse(route=route.value, role=current_user.role)
