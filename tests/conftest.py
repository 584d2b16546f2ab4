# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Supabase is replaced by FakeSupabase, an in-memory stand-in for the
PostgREST query builder (table/select/eq/order/limit/insert/update/
delete/execute). It does not evaluate row-level security; the API's
own policy checks are what the router tests exercise.
"""

import os

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import copy
import re
import uuid
from contextlib import ExitStack
from datetime import datetime, timedelta, timezone
from typing import Generator
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from main import create_app
from dependencies.auth import CurrentUser, get_current_user


ADMIN_ID = "00000000-0000-0000-0000-00000000000a"
OWNER_ID = "00000000-0000-0000-0000-00000000000b"
OTHER_OWNER_ID = "00000000-0000-0000-0000-00000000000c"
PUBLIC_ID = "00000000-0000-0000-0000-00000000000d"


# -----------------------------------------------------
# In-memory Supabase
# -----------------------------------------------------
# foreign key column → referenced table, for embedded selects
FOREIGN_KEYS = {
    "owner_id": "profiles",
    "verified_by": "profiles",
    "submitted_by": "profiles",
    "reviewed_by": "profiles",
    "approved_by": "profiles",
    "from_owner": "profiles",
    "to_owner": "profiles",
    "user_id": "profiles",
    "land_record_id": "land_records",
}

EMBED_RE = re.compile(r"(\w+):(\w+)\(([^)]*)\)")

_clock = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _next_timestamp() -> str:
    global _clock
    _clock += timedelta(seconds=1)
    return _clock.isoformat().replace("+00:00", "Z")


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    # builder ----------------------------------------
    def select(self, columns: str = "*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_to = n
        return self

    # execution --------------------------------------
    def _matching(self):
        return [r for r in self.db.tables.setdefault(self.table_name, []) if all(f(r) for f in self.filters)]

    def _project(self, row: dict) -> dict:
        embeds = EMBED_RE.findall(self.columns)
        plain = [c.strip() for c in EMBED_RE.sub("", self.columns).split(",") if c.strip()]

        out = dict(row) if "*" in plain else {c: row.get(c) for c in plain}
        for alias, fk, fields in embeds:
            target = self.db.find(FOREIGN_KEYS.get(fk, fk), row.get(fk))
            if target is None:
                out[alias] = None
                continue
            wanted = [f.strip() for f in fields.split(",") if f.strip()]
            out[alias] = {f: target.get(f) for f in wanted}
        return copy.deepcopy(out)

    def execute(self):
        if self.db.fail_on.get((self.table_name, self.op)):
            raise self.db.fail_on[(self.table_name, self.op)]

        self.db.calls.append((self.table_name, self.op, copy.deepcopy(self.payload)))

        if self.op == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for r in rows:
                row = {"id": str(uuid.uuid4()), "created_at": _next_timestamp(), **copy.deepcopy(r)}
                self.db.tables.setdefault(self.table_name, []).append(row)
                inserted.append(copy.deepcopy(row))
            return Mock(data=inserted)

        if self.op == "update":
            updated = []
            for r in self._matching():
                r.update(copy.deepcopy(self.payload))
                updated.append(copy.deepcopy(r))
            return Mock(data=updated)

        if self.op == "delete":
            doomed = self._matching()
            self.db.tables[self.table_name] = [
                r for r in self.db.tables[self.table_name] if r not in doomed
            ]
            return Mock(data=copy.deepcopy(doomed))

        rows = self._matching()
        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        if self.limit_to is not None:
            rows = rows[: self.limit_to]
        return Mock(data=[self._project(r) for r in rows])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.fail_on = {}
        self.auth = Mock()
        self.postgrest = Mock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, **row) -> dict:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", _next_timestamp())
        self.tables.setdefault(table, []).append(row)
        return row

    def find(self, table: str, row_id):
        return next((r for r in self.tables.get(table, []) if r.get("id") == row_id), None)

    def rows(self, table: str, **match) -> list:
        return [
            r for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in match.items())
        ]


# Every module-level binding of a client factory
CLIENT_FACTORIES = [
    "routers.auth.get_supabase_client",
    "routers.auth.get_user_client",
    "routers.auth.get_admin_client",
    "routers.lands.get_user_client",
    "routers.documents.get_user_client",
    "routers.notifications.get_user_client",
    "routers.transactions.get_user_client",
    "routers.zoning.get_user_client",
    "routers.admin.get_user_client",
    "core.notifications.get_admin_client",
]


@pytest.fixture
def fake_db() -> Generator[FakeSupabase, None, None]:
    """All Supabase clients (anon, user, service role) share one FakeSupabase."""
    db = FakeSupabase()
    with ExitStack() as stack:
        for target in CLIENT_FACTORIES:
            stack.enter_context(patch(target, return_value=db))
        yield db


# -----------------------------------------------------
# App + client
# -----------------------------------------------------
@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(app):
    """login_as(user) makes every request authenticate as `user`."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


# -----------------------------------------------------
# Identities
# -----------------------------------------------------
@pytest.fixture
def admin_user():
    return CurrentUser(id=ADMIN_ID, email="admin@example.com", role="admin",
                       full_name="Registry Admin", access_token="admin-token")


@pytest.fixture
def landowner_user():
    return CurrentUser(id=OWNER_ID, email="owner@example.com", role="landowner",
                       full_name="Lani Owner", access_token="owner-token")


@pytest.fixture
def other_landowner_user():
    return CurrentUser(id=OTHER_OWNER_ID, email="other@example.com", role="landowner",
                       full_name="Other Owner", access_token="other-token")


@pytest.fixture
def public_user():
    return CurrentUser(id=PUBLIC_ID, email="public@example.com", role="public",
                       full_name="Pat Public", access_token="public-token")


@pytest.fixture
def seeded_profiles(fake_db):
    fake_db.seed("profiles", id=ADMIN_ID, email="admin@example.com", full_name="Registry Admin", role="admin")
    fake_db.seed("profiles", id=OWNER_ID, email="owner@example.com", full_name="Lani Owner", role="landowner")
    fake_db.seed("profiles", id=OTHER_OWNER_ID, email="other@example.com", full_name="Other Owner", role="landowner")
    fake_db.seed("profiles", id=PUBLIC_ID, email="public@example.com", full_name="Pat Public", role="public")
    return fake_db


@pytest.fixture
def seed_land(fake_db):
    """seed_land("Plot A", owner_id=..., status="pending") → stored row."""
    def _seed(title, owner_id=None, status="verified", zoning="Residential", price=100000, size=1.0, **extra):
        return fake_db.seed(
            "land_records",
            title=title,
            location=f"{title} Road",
            size=size,
            size_unit="acres",
            zoning=zoning,
            price=price,
            ownership_status=status,
            owner_id=owner_id,
            verified_by=None,
            **extra,
        )
    return _seed


# -----------------------------------------------------
# Process-local state
# -----------------------------------------------------
@pytest.fixture(autouse=True)
def reset_cache():
    """Reset cache before each test."""
    from core.cache import cache_clear
    cache_clear()
    yield
    cache_clear()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from core.rate_limiter import reset_rate_limits
    reset_rate_limits()
    yield
    reset_rate_limits()
