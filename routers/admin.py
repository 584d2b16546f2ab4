# routers/admin.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.errors import handle_supabase_error
from core.land_filters import matches_query, status_counts, zoning_breakdown
from core.logging_config import logger
from core.permission_helpers import admin_user
from core.supabase_client import get_user_client
from dependencies.auth import CurrentUser
from models.enums import DocumentStatus, Role, TransactionStatus


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


def _fetch_all(client, table: str, columns: str = "*") -> list:
    try:
        res = client.table(table).select(columns).order("created_at", desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to load {table.replace('_', ' ')}")
    return res.data or []


# -----------------------------------------------------
# DASHBOARD
# -----------------------------------------------------
@router.get("/dashboard", summary="Admin overview counts")
def dashboard(current_user: CurrentUser = Depends(admin_user)):
    """
    Totals for the admin home screen plus land records per zoning class.
    """
    client = get_user_client(current_user.access_token)

    lands = _fetch_all(client, "land_records", "id, zoning, ownership_status, created_at")
    documents = _fetch_all(client, "ownership_documents", "id, status, created_at")
    profiles = _fetch_all(client, "profiles", "id, role, created_at")
    transactions = _fetch_all(client, "transactions", "id, status, created_at")

    stats = {
        "total_lands": len(lands),
        "pending_documents": sum(1 for d in documents if d.get("status") == DocumentStatus.pending.value),
        "total_users": len(profiles),
        "pending_transactions": sum(1 for t in transactions if t.get("status") == TransactionStatus.pending.value),
    }

    logger.info(f"Dashboard loaded by {current_user.id}: {stats}")

    return {
        "success": True,
        "data": {
            **stats,
            "zoning_breakdown": zoning_breakdown(lands),
        },
    }


# -----------------------------------------------------
# USERS
# -----------------------------------------------------
@router.get("/users", summary="List user profiles")
def list_users(
    q: Optional[str] = Query(None, description="Search full name or email"),
    role: Optional[Role] = Query(None, description="Filter by role"),
    current_user: CurrentUser = Depends(admin_user),
):
    client = get_user_client(current_user.access_token)
    profiles = _fetch_all(client, "profiles")

    # Counts describe the whole user base, not the filtered page
    counts = status_counts(profiles, "role", Role.list())

    rows = [p for p in profiles if matches_query(p, q, fields=("full_name", "email"))]
    if role:
        rows = [p for p in rows if p.get("role") == role.value]

    return {"success": True, "data": rows, "count": len(rows), "counts": counts}
