# services/session.py
"""
Client-side session holder for scripts, workers and other Python
front ends that talk to the registry directly through supabase-py.

Tracks the persisted session, its user and the matching profile row,
and keeps them current by listening to GoTrue auth events. `route`
tells the caller which screen set to show; see core.routing.

    with AuthSession() as auth:
        auth.sign_in("owner@example.com", "secret")
        if auth.route == Route.landowner:
            ...
"""

from typing import Any, Optional

from core.logging_config import logger
from core.routing import Route, resolve_route
from core.supabase_client import get_supabase_client
from models.enums import BaseStrEnum, SignupRole


class SessionState(BaseStrEnum):
    unauthenticated = "unauthenticated"
    authenticating = "authenticating"
    authenticated_no_profile = "authenticated_no_profile"
    authenticated_with_profile = "authenticated_with_profile"
    signed_out = "signed_out"


class AuthSessionError(Exception):
    """Raised for session misuse, e.g. updating a profile while signed out."""


PROFILE_TABLE = "profiles"


class AuthSession:
    def __init__(self, client=None):
        self.client = client if client is not None else get_supabase_client()
        if self.client is None:
            raise AuthSessionError("Supabase client not configured")

        self.session: Any = None
        self.user: Any = None
        self.profile: Optional[dict] = None

        # True until the first profile fetch settles or no session is found
        self.loading: bool = True
        self.state: SessionState = SessionState.unauthenticated

        self._subscription = None

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------
    def initialize(self) -> "AuthSession":
        try:
            session = self.client.auth.get_session()
        except Exception as e:
            # No usable persisted session; the caller starts signed out
            logger.error(f"Failed to read persisted session: {e}")
            session = None

        self._apply_session(session)
        if self.user is not None:
            self.fetch_profile(self.user.id)
        else:
            self.loading = False

        self._subscription = self.client.auth.on_auth_state_change(self.handle_auth_event)
        return self

    def close(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __enter__(self) -> "AuthSession":
        return self.initialize()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -------------------------------------------------
    # Auth events (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, ...)
    # -------------------------------------------------
    def handle_auth_event(self, event: str, session: Any):
        logger.info(f"Auth event {event} (session: {'yes' if session else 'no'})")

        self._apply_session(session)

        if self.user is not None:
            self.fetch_profile(self.user.id)
            return

        self.profile = None
        self.loading = False
        self.state = SessionState.signed_out if event == "SIGNED_OUT" else SessionState.unauthenticated

    def _apply_session(self, session: Any):
        self.session = session
        self.user = getattr(session, "user", None) if session else None

    # -------------------------------------------------
    # Profile
    # -------------------------------------------------
    def fetch_profile(self, user_id: str) -> Optional[dict]:
        """
        Load the profile row for `user_id`. Failures are logged and
        leave the session without a profile; loading always ends.
        """
        self.loading = True
        self.state = SessionState.authenticating

        try:
            res = (
                self.client.table(PROFILE_TABLE)
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            self.profile = res.data[0] if res.data else None
        except Exception as e:
            logger.error(f"Profile fetch failed for {user_id}: {e}")
            self.profile = None
        finally:
            self.loading = False

        self.state = (
            SessionState.authenticated_with_profile
            if self.profile
            else SessionState.authenticated_no_profile
        )
        return self.profile

    @property
    def route(self) -> Route:
        return resolve_route(self.loading, self.session, self.profile)

    # -------------------------------------------------
    # Account actions (platform errors propagate unchanged)
    # -------------------------------------------------
    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str,
        phone: Optional[str] = None,
    ):
        if role not in SignupRole.list():
            raise AuthSessionError(f"Cannot sign up as '{role}'; choose one of: {', '.join(SignupRole.list())}")

        response = self.client.auth.sign_up({
            "email": email,
            "password": password,
            "options": {"data": {"full_name": full_name, "role": role}},
        })

        user = getattr(response, "user", None)
        if user is None:
            return response

        self.client.table(PROFILE_TABLE).insert({
            "id": user.id,
            "email": email,
            "full_name": full_name,
            "role": role,
            "phone": phone or None,
        }).execute()

        logger.info(f"Signed up {email} as {role}")
        return response

    def sign_in(self, email: str, password: str):
        response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        logger.info(f"Signed in {email}")
        return response

    def sign_out(self):
        self.client.auth.sign_out()
        logger.info("Signed out")

    def update_profile(self, **updates) -> Optional[dict]:
        if self.user is None:
            raise AuthSessionError("No user logged in")

        (
            self.client.table(PROFILE_TABLE)
            .update(updates)
            .eq("id", self.user.id)
            .execute()
        )
        return self.fetch_profile(self.user.id)
