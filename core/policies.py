# core/policies.py
"""
Row-level access rules, one entry per table and action.

This map mirrors the CREATE POLICY statements in
supabase/migrations/. Postgres evaluates those on every query made
with a user token; the API evaluates this map first so callers get
a 403 with a reason instead of an empty result set.

Semantics follow Postgres RLS:
  • permissive policies on the same action are OR-ed (any_of)
  • no policy for an action means deny
  • UPDATE checks the existing row (USING) and the written row
    (WITH CHECK); FOR ALL policies reuse USING as the check
  • only the `authenticated` role has policies; anonymous is denied
  • the service role bypasses RLS entirely (SYSTEM below)
"""

from typing import Callable, Dict, Iterable, List, Optional

from fastapi import HTTPException

from dependencies.auth import CurrentUser
from models.enums import SignupRole


SYSTEM_ROLE = "system"

# Server-initiated actions (service-role client)
SYSTEM = CurrentUser(id="system", email="system@localhost", role=SYSTEM_ROLE)

ACTIONS = ("select", "insert", "update", "delete")


# ============================================================
# Land ownership lookup for document rules
# ============================================================
class PolicyContext:
    """
    Resolves land_record_id → owner_id for the document policies.
    Owners may be primed from rows already fetched, or looked up
    through `fetch_owner` on a miss. Results are memoised per request.
    """

    def __init__(self, fetch_owner: Optional[Callable[[str], Optional[str]]] = None):
        self._owners: Dict[str, Optional[str]] = {}
        self._fetch_owner = fetch_owner

    def prime(self, land_record_id: Optional[str], owner_id: Optional[str]):
        if land_record_id:
            self._owners[str(land_record_id)] = owner_id

    def land_owner_id(self, land_record_id: Optional[str]) -> Optional[str]:
        if not land_record_id:
            return None
        key = str(land_record_id)
        if key not in self._owners:
            self._owners[key] = self._fetch_owner(key) if self._fetch_owner else None
        return self._owners[key]

    @classmethod
    def from_client(cls, client) -> "PolicyContext":
        def fetch_owner(land_record_id: str) -> Optional[str]:
            res = (
                client.table("land_records")
                .select("id, owner_id")
                .eq("id", land_record_id)
                .limit(1)
                .execute()
            )
            return res.data[0].get("owner_id") if res.data else None

        return cls(fetch_owner)


Predicate = Callable[[CurrentUser, dict, Optional[PolicyContext]], bool]


def any_of(*predicates: Predicate) -> Predicate:
    return lambda user, row, ctx: any(p(user, row, ctx) for p in predicates)


def all_of(*predicates: Predicate) -> Predicate:
    return lambda user, row, ctx: all(p(user, row, ctx) for p in predicates)


def _always(user, row, ctx) -> bool:
    return True


def _never(user, row, ctx) -> bool:
    return False


def _is_admin(user, row, ctx) -> bool:
    return user.role == "admin"


def _is_own_profile(user, row, ctx) -> bool:
    return row.get("id") == user.id


def _has_signup_role(user, row, ctx) -> bool:
    return row.get("role") in SignupRole.list()


def _keeps_admin_role_for_admins(user, row, ctx) -> bool:
    return row.get("role") != "admin" or user.role == "admin"


def _is_land_owner(user, row, ctx) -> bool:
    return row.get("owner_id") is not None and row.get("owner_id") == user.id


def _is_submitter(user, row, ctx) -> bool:
    return row.get("submitted_by") is not None and row.get("submitted_by") == user.id


def _owns_referenced_land(user, row, ctx) -> bool:
    # Embedded join ("*, land:land_record_id(...)") wins over a lookup
    embedded = row.get("land") or row.get("land_records")
    if isinstance(embedded, dict) and "owner_id" in embedded:
        owner_id = embedded.get("owner_id")
    elif ctx is not None:
        owner_id = ctx.land_owner_id(row.get("land_record_id"))
    else:
        return False
    return owner_id is not None and owner_id == user.id


def _is_transaction_party(user, row, ctx) -> bool:
    return user.id in (row.get("from_owner"), row.get("to_owner"))


def _is_recipient(user, row, ctx) -> bool:
    return row.get("user_id") is not None and row.get("user_id") == user.id


# ============================================================
# CENTRALIZED TABLE → ACTION → RULE MAP
# ============================================================
TABLE_POLICIES: Dict[str, Dict[str, Predicate]] = {

    # =====================================================
    # PROFILES: everyone reads, each identity writes itself
    # =====================================================
    "profiles": {
        "select": _always,
        "insert": all_of(_is_own_profile, _has_signup_role),
        "update": all_of(_is_own_profile, _keeps_admin_role_for_admins),
        "delete": _never,
    },

    # =====================================================
    # LAND RECORDS: world-readable; admin or owner writes
    # =====================================================
    "land_records": {
        "select": _always,
        "insert": any_of(_is_admin, _is_land_owner),
        "update": any_of(_is_admin, _is_land_owner),
        "delete": any_of(_is_admin, _is_land_owner),
    },

    # =====================================================
    # OWNERSHIP DOCUMENTS: submitter, land owner, admin
    # =====================================================
    "ownership_documents": {
        "select": any_of(_is_submitter, _owns_referenced_land, _is_admin),
        "insert": any_of(all_of(_is_submitter, _owns_referenced_land), _is_admin),
        "update": _is_admin,
        "delete": _is_admin,
    },

    # =====================================================
    # TRANSACTIONS: either party, admin manages
    # =====================================================
    "transactions": {
        "select": any_of(_is_transaction_party, _is_admin),
        "insert": any_of(_is_transaction_party, _is_admin),
        "update": _is_admin,
        "delete": _is_admin,
    },

    # =====================================================
    # NOTIFICATIONS: recipient only; created by the system
    # =====================================================
    "notifications": {
        "select": _is_recipient,
        "insert": _never,
        "update": _is_recipient,
        "delete": _is_recipient,
    },

    # =====================================================
    # ZONING LAWS: reference data, admin-managed
    # =====================================================
    "zoning_laws": {
        "select": _always,
        "insert": _is_admin,
        "update": _is_admin,
        "delete": _is_admin,
    },
}


# ============================================================
# Evaluation
# ============================================================
def is_allowed(
    user: Optional[CurrentUser],
    table: str,
    action: str,
    row: dict,
    new_row: Optional[dict] = None,
    ctx: Optional[PolicyContext] = None,
) -> bool:
    """
    True if `user` may perform `action` on `row` of `table`.

    For "update", `new_row` is the row as it would be written
    (existing row merged with the changes) and must pass too.
    """
    if user is None:
        return False

    if user.role == SYSTEM_ROLE:
        return True

    rule = TABLE_POLICIES.get(table, {}).get(action)
    if rule is None:
        return False

    if not rule(user, row, ctx):
        return False

    if action == "update" and new_row is not None:
        return rule(user, new_row, ctx)

    return True


def filter_visible(
    user: Optional[CurrentUser],
    table: str,
    rows: Iterable[dict],
    ctx: Optional[PolicyContext] = None,
) -> List[dict]:
    return [r for r in rows if is_allowed(user, table, "select", r, ctx=ctx)]


def require(
    user: Optional[CurrentUser],
    table: str,
    action: str,
    row: dict,
    new_row: Optional[dict] = None,
    ctx: Optional[PolicyContext] = None,
    detail: Optional[str] = None,
):
    """Raise 403 unless is_allowed(...)."""
    if not is_allowed(user, table, action, row, new_row=new_row, ctx=ctx):
        raise HTTPException(
            status_code=403,
            detail=detail or f"Not permitted to {action} {table.replace('_', ' ')}",
        )
