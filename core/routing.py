# core/routing.py
"""
Role-based screen routing.

A pure function of (loading, session, profile). Clients call it
after every auth state change; nothing role-specific may render
while it returns LOADING.
"""

from typing import Any, Mapping, Optional

from models.enums import BaseStrEnum


class Route(BaseStrEnum):
    loading = "loading"
    auth = "auth"
    admin = "admin"
    landowner = "landowner"
    public = "public"


ROLE_ROUTES = {
    "admin": Route.admin,
    "landowner": Route.landowner,
    "public": Route.public,
}


def _role_of(profile: Any) -> Optional[str]:
    if profile is None:
        return None
    if isinstance(profile, Mapping):
        return profile.get("role")
    return getattr(profile, "role", None)


def resolve_route(loading: bool, session: Any, profile: Any) -> Route:
    if loading:
        return Route.loading

    if not session or not profile:
        return Route.auth

    # Unknown or missing role falls back to the sign-in screen
    return ROLE_ROUTES.get(str(_role_of(profile) or ""), Route.auth)
