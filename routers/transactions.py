# routers/transactions.py

from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from core.errors import handle_supabase_error
from core.logging_config import logger
from core.permission_helpers import admin_user
from core.policies import filter_visible, is_allowed, require
from core.supabase_client import get_user_client
from core.utils import sanitize
from dependencies.auth import get_current_user, CurrentUser
from models.enums import TransactionStatus
from models.transaction import TransactionCreate, TransactionRead, TransactionStatusUpdate


router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
)


def _get_transaction(client, transaction_id: str) -> dict:
    try:
        res = (
            client.table("transactions")
            .select("*")
            .eq("id", transaction_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch transaction")

    if not res.data:
        raise HTTPException(404, f"Transaction '{transaction_id}' not found")
    return res.data[0]


@router.get("", summary="Transactions the caller is party to (all for admins)")
def list_transactions(
    status: Optional[TransactionStatus] = None,
    current_user: CurrentUser = Depends(get_current_user),
):
    client = get_user_client(current_user.access_token)

    try:
        query = client.table("transactions").select("*")
        if status:
            query = query.eq("status", status.value)
        res = query.order("created_at", desc=True).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load transactions")

    rows = filter_visible(current_user, "transactions", res.data or [])
    return {"success": True, "data": rows, "count": len(rows)}


@router.get("/{transaction_id}", response_model=TransactionRead)
def get_transaction(transaction_id: str, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    row = _get_transaction(client, transaction_id)

    if not is_allowed(current_user, "transactions", "select", row):
        raise HTTPException(404, f"Transaction '{transaction_id}' not found")
    return row


@router.post("", response_model=TransactionRead, status_code=201, summary="Propose an ownership change")
def create_transaction(payload: TransactionCreate, current_user: CurrentUser = Depends(get_current_user)):
    if payload.from_owner == payload.to_owner:
        raise HTTPException(400, "from_owner and to_owner must differ")

    data = sanitize(payload.model_dump())
    data["status"] = TransactionStatus.pending.value

    require(
        current_user, "transactions", "insert", data,
        detail="You can only propose transactions you are a party to",
    )

    client = get_user_client(current_user.access_token)

    try:
        land = (
            client.table("land_records")
            .select("id")
            .eq("id", payload.land_record_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch land record")

    if not land.data:
        raise HTTPException(404, f"Land record '{payload.land_record_id}' not found")

    try:
        res = client.table("transactions").insert(data).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create transaction")

    if not res.data:
        raise HTTPException(500, "Insert returned no data")

    logger.info(f"Transaction {res.data[0].get('id')} proposed by {current_user.id}")
    return res.data[0]


@router.patch("/{transaction_id}/status", response_model=TransactionRead, summary="Transition a transaction (admin)")
def set_transaction_status(
    transaction_id: str,
    payload: TransactionStatusUpdate,
    current_user: CurrentUser = Depends(admin_user),
):
    client = get_user_client(current_user.access_token)
    existing = _get_transaction(client, transaction_id)

    updates = {"status": payload.status.value, "approved_by": current_user.id}
    require(current_user, "transactions", "update", existing, new_row={**existing, **updates})

    try:
        res = client.table("transactions").update(updates).eq("id", transaction_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update transaction")

    if not res.data:
        raise HTTPException(404, f"Transaction '{transaction_id}' not found")

    logger.info(f"Transaction {transaction_id} marked {payload.status.value} by {current_user.id}")
    return res.data[0]
