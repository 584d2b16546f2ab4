# routers/zoning.py

from fastapi import APIRouter, HTTPException, Depends

from core.cache import cache_get, cache_set, cache_delete_prefix
from core.config import settings
from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import admin_user
from core.policies import require
from core.supabase_client import get_user_client
from core.utils import sanitize
from dependencies.auth import get_current_user, CurrentUser
from models.zoning_law import ZoningLawCreate, ZoningLawRead, ZoningLawUpdate


router = APIRouter(
    prefix="/zoning",
    tags=["Zoning Laws"],
)

ZONING_CACHE_KEY = "zoning:list"


# ============================================================
# LIST (cached; identical for every authenticated caller)
# ============================================================
@router.get(
    "",
    summary="List zoning laws",
    description="""
    Reference data ordered by zone type.

    **Caching:** cached in-process; any admin write invalidates it.
    """,
)
def list_zoning_laws(current_user: CurrentUser = Depends(get_current_user)):
    cached = cache_get(ZONING_CACHE_KEY)
    if cached is not None:
        return cached

    client = get_user_client(current_user.access_token)
    try:
        res = client.table("zoning_laws").select("*").order("zone_type").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load zoning laws")

    result = {"success": True, "data": res.data or []}
    cache_set(ZONING_CACHE_KEY, result, ttl_seconds=settings.ZONING_CACHE_TTL_SECONDS)
    return result


@router.post("", response_model=ZoningLawRead, status_code=201, summary="Create zoning law (admin)")
def create_zoning_law(payload: ZoningLawCreate, current_user: CurrentUser = Depends(admin_user)):
    data = sanitize(payload.model_dump())
    require(current_user, "zoning_laws", "insert", data)

    client = get_user_client(current_user.access_token)
    try:
        res = client.table("zoning_laws").insert(data).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create zoning law")

    if not res.data:
        raise HTTPException(500, "Insert returned no data")

    cache_delete_prefix("zoning:")
    logger.info(f"Zoning law '{data['zone_type']}' created by {current_user.id}")
    return res.data[0]


@router.put("/{zoning_id}", response_model=ZoningLawRead, summary="Update zoning law (admin)")
def update_zoning_law(zoning_id: str, payload: ZoningLawUpdate, current_user: CurrentUser = Depends(admin_user)):
    updates = sanitize(payload.model_dump(exclude_unset=True))
    if not updates:
        raise HTTPException(400, "No fields to update")

    require(current_user, "zoning_laws", "update", {"id": zoning_id}, new_row={"id": zoning_id, **updates})

    client = get_user_client(current_user.access_token)
    try:
        res = client.table("zoning_laws").update(updates).eq("id", zoning_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update zoning law")

    if not res.data:
        raise HTTPException(404, f"Zoning law '{zoning_id}' not found")

    cache_delete_prefix("zoning:")
    return res.data[0]


@router.delete("/{zoning_id}", summary="Delete zoning law (admin)")
def delete_zoning_law(zoning_id: str, current_user: CurrentUser = Depends(admin_user)):
    require(current_user, "zoning_laws", "delete", {"id": zoning_id})

    client = get_user_client(current_user.access_token)
    try:
        res = client.table("zoning_laws").delete().eq("id", zoning_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete zoning law")

    if not res.data:
        raise HTTPException(404, f"Zoning law '{zoning_id}' not found")

    cache_delete_prefix("zoning:")
    return {"success": True, "deleted_id": zoning_id}
