# tests/test_routing.py

"""
Tests for role-based screen routing.
"""

import pytest

from core.routing import Route, resolve_route
from dependencies.auth import CurrentUser


SESSION = object()


def test_loading_wins_over_everything():
    assert resolve_route(True, SESSION, {"role": "admin"}) == Route.loading
    assert resolve_route(True, None, None) == Route.loading


@pytest.mark.parametrize(
    "session,profile",
    [
        (None, None),
        (None, {"role": "admin"}),
        (SESSION, None),
    ],
)
def test_missing_session_or_profile_goes_to_auth(session, profile):
    assert resolve_route(False, session, profile) == Route.auth


@pytest.mark.parametrize(
    "role,expected",
    [
        ("admin", Route.admin),
        ("landowner", Route.landowner),
        ("public", Route.public),
        ("surveyor", Route.auth),
        (None, Route.auth),
    ],
)
def test_role_selects_screen_set(role, expected):
    assert resolve_route(False, SESSION, {"role": role}) == expected


def test_profile_object_is_accepted():
    user = CurrentUser(id="u1", email="u@example.com", role="landowner")
    assert resolve_route(False, SESSION, user) == Route.landowner
