# routers/lands.py

from fastapi import APIRouter, HTTPException, Depends, Query, Request
from typing import Optional

from core.config import settings
from core.errors import handle_supabase_error
from core.land_filters import filter_lands, sort_lands, matches_query, status_counts
from core.logging_config import logger
from core.notifications import notify_land_status, notify_verification_request, send_webhook_message
from core.permission_helpers import is_admin, admin_user
from core.policies import require
from core.rate_limiter import require_rate_limit
from core.supabase_client import get_user_client
from core.utils import sanitize, utc_now_iso
from dependencies.auth import get_current_user, requires_role, CurrentUser
from models.enums import LandSort, OwnershipStatus
from models.land_record import (
    ADMIN_ONLY_LAND_FIELDS,
    LandRecordCreate,
    LandRecordRead,
    LandRecordUpdate,
    LandStatusUpdate,
    MyLandsResponse,
)


router = APIRouter(
    prefix="/lands",
    tags=["Land Records"],
)


LAND_WITH_OWNER = "*, owner:owner_id(id, full_name, email)"


def _get_land(client, land_id: str) -> dict:
    try:
        res = (
            client.table("land_records")
            .select("*")
            .eq("id", land_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch land record")

    if not res.data:
        raise HTTPException(404, f"Land record '{land_id}' not found")
    return res.data[0]


# ============================================================
# PUBLIC SEARCH (verified records only)
# ============================================================
@router.get(
    "/search",
    summary="Search verified land records",
    description="""
    Fetches every verified record, then filters and sorts in memory.

    - `q`: case-insensitive match on title, location or zoning
    - `min_price` / `max_price`: records without a price are excluded when either is set
    - `min_size` / `max_size`
    - `zoning`: case-insensitive partial match
    - `sort`: newest | price_low | price_high | size_small | size_large
    """,
)
def search_lands(
    q: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    min_size: Optional[float] = Query(None, ge=0),
    max_size: Optional[float] = Query(None, ge=0),
    zoning: Optional[str] = None,
    sort: LandSort = LandSort.newest,
    current_user: CurrentUser = Depends(get_current_user),
):
    client = get_user_client(current_user.access_token)

    try:
        res = (
            client.table("land_records")
            .select(LAND_WITH_OWNER)
            .eq("ownership_status", OwnershipStatus.verified.value)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load land records")

    lands = filter_lands(
        res.data or [],
        q=q,
        min_price=min_price,
        max_price=max_price,
        min_size=min_size,
        max_size=max_size,
        zoning=zoning,
    )
    lands = sort_lands(lands, sort)

    return {"success": True, "data": lands, "count": len(lands)}


# ============================================================
# MY LAND RECORDS (landowner)
# ============================================================
@router.get("/mine", response_model=MyLandsResponse, summary="Caller's own land records")
def list_my_lands(current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)

    try:
        res = (
            client.table("land_records")
            .select("*")
            .eq("owner_id", current_user.id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load your land records")

    lands = res.data or []
    return {
        "data": lands,
        "counts": status_counts(lands, "ownership_status", OwnershipStatus.list()),
    }


# ============================================================
# ALL LAND RECORDS (admin management screen)
# ============================================================
@router.get("", summary="All land records with owners (admin)")
def list_lands(
    q: Optional[str] = None,
    status: Optional[OwnershipStatus] = None,
    current_user: CurrentUser = Depends(admin_user),
):
    client = get_user_client(current_user.access_token)

    try:
        query = client.table("land_records").select(LAND_WITH_OWNER)
        if status:
            query = query.eq("ownership_status", status.value)
        res = query.order("created_at", desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load land records")

    lands = [l for l in (res.data or []) if matches_query(l, q)]
    return {"success": True, "data": lands, "count": len(lands)}


@router.get("/{land_id}", response_model=LandRecordRead, summary="Get one land record")
def get_land(land_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return _get_land(get_user_client(current_user.access_token), land_id)


# ============================================================
# CREATE
# ============================================================
@router.post(
    "",
    response_model=LandRecordRead,
    status_code=201,
    summary="Create land record",
    description="""
    - Landowner: the record is owned by the caller and starts **pending**.
    - Admin: the record is **verified** immediately and `verified_by` is the caller.
    """,
)
def create_land(
    payload: LandRecordCreate,
    current_user: CurrentUser = Depends(requires_role(["admin", "landowner"])),
):
    data = sanitize(payload.model_dump())

    if is_admin(current_user):
        data["ownership_status"] = OwnershipStatus.verified.value
        data["verified_by"] = current_user.id
    else:
        data["owner_id"] = current_user.id
        data["ownership_status"] = OwnershipStatus.pending.value
        data["verified_by"] = None

    require(current_user, "land_records", "insert", data)

    client = get_user_client(current_user.access_token)
    try:
        res = client.table("land_records").insert(data).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to add land record")

    if not res.data:
        raise HTTPException(500, "Insert returned no data")

    land = res.data[0]
    logger.info(f"Land record {land.get('id')} created by {current_user.id} ({land.get('ownership_status')})")

    if land.get("ownership_status") == OwnershipStatus.pending.value:
        send_webhook_message(
            f"New land record awaiting verification: {land.get('title')} ({land.get('location')}) "
            f"submitted by {current_user.email}"
        )

    return land


# ============================================================
# UPDATE
# ============================================================
@router.put("/{land_id}", response_model=LandRecordRead, summary="Update land record")
def update_land(land_id: str, payload: LandRecordUpdate, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    existing = _get_land(client, land_id)

    updates = sanitize(payload.model_dump(exclude_unset=True))
    restricted = ADMIN_ONLY_LAND_FIELDS & updates.keys()
    if restricted and not is_admin(current_user):
        raise HTTPException(403, f"Only admins may change: {', '.join(sorted(restricted))}")

    if "ownership_status" in updates:
        updates["verified_by"] = current_user.id
    updates["updated_at"] = utc_now_iso()

    require(current_user, "land_records", "update", existing, new_row={**existing, **updates})

    try:
        res = client.table("land_records").update(updates).eq("id", land_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update land record")

    if not res.data:
        raise HTTPException(404, f"Land record '{land_id}' not found")

    logger.info(f"Land record {land_id} updated by {current_user.id}")
    return res.data[0]


# ============================================================
# STATUS TRANSITION (admin)
# ============================================================
@router.patch("/{land_id}/status", response_model=LandRecordRead, summary="Verify or dispute a land record")
def set_land_status(land_id: str, payload: LandStatusUpdate, current_user: CurrentUser = Depends(admin_user)):
    client = get_user_client(current_user.access_token)
    existing = _get_land(client, land_id)

    updates = {
        "ownership_status": payload.status.value,
        "verified_by": current_user.id,
        "updated_at": utc_now_iso(),
    }
    require(current_user, "land_records", "update", existing, new_row={**existing, **updates})

    try:
        res = client.table("land_records").update(updates).eq("id", land_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update land record")

    if not res.data:
        raise HTTPException(404, f"Land record '{land_id}' not found")

    land = res.data[0]
    logger.info(f"Land record {land_id} marked {payload.status.value} by {current_user.id}")

    if existing.get("ownership_status") != payload.status.value:
        notify_land_status(land, payload.status.value)

    return land


# ============================================================
# DELETE
# ============================================================
@router.delete("/{land_id}", summary="Delete land record")
def delete_land(land_id: str, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    existing = _get_land(client, land_id)

    require(current_user, "land_records", "delete", existing)

    try:
        res = client.table("land_records").delete().eq("id", land_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete land record")

    if not res.data:
        raise HTTPException(404, f"Land record '{land_id}' not found")

    logger.info(f"Land record {land_id} deleted by {current_user.id}")
    return {"success": True, "deleted_id": land_id}


# ============================================================
# OWNERSHIP VERIFICATION REQUEST (public → owner)
# ============================================================
@router.post("/{land_id}/verification-request", summary="Ask the owner to verify ownership")
def request_verification(land_id: str, request: Request, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    land = _get_land(client, land_id)

    if not land.get("owner_id"):
        raise HTTPException(400, "This land record has no registered owner")
    if land["owner_id"] == current_user.id:
        raise HTTPException(400, "You already own this land record")

    require_rate_limit(
        request,
        scope="verification",
        user_id=current_user.id,
        max_requests=settings.VERIFICATION_REQUEST_LIMIT,
        window_seconds=settings.VERIFICATION_REQUEST_WINDOW_SECONDS,
    )

    if notify_verification_request(land, current_user.full_name) is None:
        raise HTTPException(503, "Failed to send verification request")

    logger.info(f"User {current_user.id} requested verification of land {land_id}")
    return {"success": True, "message": "Verification request sent to the land owner"}
