# routers/documents.py

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from core.errors import handle_supabase_error
from core.land_filters import status_counts
from core.logging_config import logger
from core.notifications import notify_document_reviewed, send_webhook_message
from core.permission_helpers import admin_user
from core.policies import PolicyContext, filter_visible, is_allowed, require
from core.supabase_client import get_user_client
from core.utils import sanitize
from dependencies.auth import get_current_user, requires_role, CurrentUser
from models.document import (
    DocumentCreate,
    DocumentRead,
    DocumentReview,
    MyDocumentsResponse,
)
from models.enums import DocumentStatus


router = APIRouter(
    prefix="/documents",
    tags=["Ownership Documents"],
)


DOCUMENT_WITH_LAND = "*, land:land_record_id(id, title, location, owner_id)"
DOCUMENT_WITH_LAND_AND_SUBMITTER = (
    "*, land:land_record_id(id, title, location, owner_id), "
    "submitter:submitted_by(id, full_name, email)"
)


def _get_document(client, document_id: str) -> dict:
    try:
        res = (
            client.table("ownership_documents")
            .select(DOCUMENT_WITH_LAND)
            .eq("id", document_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch document")

    if not res.data:
        raise HTTPException(404, f"Document '{document_id}' not found")
    return res.data[0]


def _land_title(document: dict, ctx_client=None) -> Optional[str]:
    land = document.get("land")
    if isinstance(land, dict) and land.get("title"):
        return land["title"]
    if ctx_client is None or not document.get("land_record_id"):
        return None
    res = (
        ctx_client.table("land_records")
        .select("id, title")
        .eq("id", document["land_record_id"])
        .limit(1)
        .execute()
    )
    return res.data[0].get("title") if res.data else None


# ============================================================
# MY SUBMISSIONS (landowner)
# ============================================================
@router.get("/mine", response_model=MyDocumentsResponse, summary="Documents the caller submitted")
def list_my_documents(current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)

    try:
        res = (
            client.table("ownership_documents")
            .select(DOCUMENT_WITH_LAND)
            .eq("submitted_by", current_user.id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load documents")

    documents = res.data or []
    return {
        "data": documents,
        "counts": status_counts(documents, "status", DocumentStatus.list()),
    }


# ============================================================
# REVIEW QUEUE (admin)
# ============================================================
@router.get("", summary="All documents with land and submitter (admin)")
def list_documents(
    status: str = Query("pending", description="pending | approved | rejected | all"),
    current_user: CurrentUser = Depends(admin_user),
):
    if status != "all" and status not in DocumentStatus.list():
        raise HTTPException(400, f"Invalid status. Must be one of: all, {', '.join(DocumentStatus.list())}")

    client = get_user_client(current_user.access_token)

    try:
        query = client.table("ownership_documents").select(DOCUMENT_WITH_LAND_AND_SUBMITTER)
        if status != "all":
            query = query.eq("status", status)
        res = query.order("created_at", desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load documents")

    documents = filter_visible(current_user, "ownership_documents", res.data or [], PolicyContext.from_client(client))
    return {"success": True, "data": documents, "count": len(documents)}


@router.get("/{document_id}", response_model=DocumentRead, summary="Get one document")
def get_document(document_id: str, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    document = _get_document(client, document_id)

    # Invisible rows look exactly like missing ones
    if not is_allowed(current_user, "ownership_documents", "select", document, ctx=PolicyContext.from_client(client)):
        raise HTTPException(404, f"Document '{document_id}' not found")

    return document


# ============================================================
# SUBMIT (landowner, own land only)
# ============================================================
@router.post("", response_model=DocumentRead, status_code=201, summary="Submit an ownership document")
def submit_document(
    payload: DocumentCreate,
    current_user: CurrentUser = Depends(requires_role(["admin", "landowner"])),
):
    client = get_user_client(current_user.access_token)

    try:
        land_res = (
            client.table("land_records")
            .select("id, title, owner_id")
            .eq("id", payload.land_record_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch land record")

    if not land_res.data:
        raise HTTPException(404, f"Land record '{payload.land_record_id}' not found")
    land = land_res.data[0]

    data = sanitize({
        "land_record_id": payload.land_record_id,
        "document_type": payload.document_type,
        "document_url": payload.document_url,
        "notes": payload.notes,
        "submitted_by": current_user.id,
        "status": DocumentStatus.pending,
    })

    ctx = PolicyContext()
    ctx.prime(land["id"], land.get("owner_id"))
    require(
        current_user, "ownership_documents", "insert", data, ctx=ctx,
        detail="You can only submit documents for land records you own",
    )

    try:
        res = client.table("ownership_documents").insert(data).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to submit document")

    if not res.data:
        raise HTTPException(500, "Insert returned no data")

    document = res.data[0]
    logger.info(f"Document {document.get('id')} ({data['document_type']}) submitted by {current_user.id}")

    send_webhook_message(
        f"New {data['document_type']} document awaiting review for {land.get('title')} "
        f"submitted by {current_user.email}"
    )

    return document


# ============================================================
# REVIEW (admin approve / reject → notify submitter)
# ============================================================
@router.post("/{document_id}/review", response_model=DocumentRead, summary="Approve or reject a document")
def review_document(document_id: str, payload: DocumentReview, current_user: CurrentUser = Depends(admin_user)):
    client = get_user_client(current_user.access_token)
    document = _get_document(client, document_id)

    updates = {
        "status": payload.action,
        "reviewed_by": current_user.id,
    }
    if payload.notes is not None:
        updates["notes"] = payload.notes.strip() or None

    require(current_user, "ownership_documents", "update", document, new_row={**document, **updates})

    try:
        res = client.table("ownership_documents").update(updates).eq("id", document_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update document")

    if not res.data:
        raise HTTPException(404, f"Document '{document_id}' not found")

    updated = res.data[0]
    logger.info(f"Document {document_id} {payload.action} by {current_user.id}")

    notify_document_reviewed(updated, _land_title(document, client), payload.action)

    return {**updated, "land": document.get("land")}
