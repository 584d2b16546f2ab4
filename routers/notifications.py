# routers/notifications.py

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import handle_supabase_error
from core.logging_config import logger
from core.policies import require
from core.supabase_client import get_user_client
from dependencies.auth import get_current_user, CurrentUser
from models.notification import NotificationList, NotificationRead

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


def _get_notification(client, notification_id: str, current_user: CurrentUser) -> dict:
    try:
        res = (
            client.table("notifications")
            .select("*")
            .eq("id", notification_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch notification")

    # Someone else's notification is indistinguishable from a missing one
    if not res.data or res.data[0].get("user_id") != current_user.id:
        raise HTTPException(404, "Notification not found")
    return res.data[0]


@router.get("", response_model=NotificationList)
def list_notifications(
    unread_only: bool = Query(False, description="Filter to unread notifications only"),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Caller's notifications, newest first, with the unread total."""
    client = get_user_client(current_user.access_token)

    try:
        res = (
            client.table("notifications")
            .select("*")
            .eq("user_id", current_user.id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load notifications")

    rows = res.data or []
    unread = [n for n in rows if not n.get("read")]

    return {
        "data": unread if unread_only else rows,
        "unread_count": len(unread),
    }


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(notification_id: str, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    existing = _get_notification(client, notification_id, current_user)

    require(current_user, "notifications", "update", existing, new_row={**existing, "read": True})

    try:
        res = (
            client.table("notifications")
            .update({"read": True})
            .eq("id", notification_id)
            .eq("user_id", current_user.id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to mark notification as read")

    if not res.data:
        raise HTTPException(404, "Notification not found")
    return res.data[0]


@router.post("/read-all")
def mark_all_read(current_user: CurrentUser = Depends(get_current_user)):
    """
    Marks every unread notification of the caller as read.
    Scoped by user_id in the query itself, never by a client-supplied id list.
    """
    client = get_user_client(current_user.access_token)

    try:
        res = (
            client.table("notifications")
            .update({"read": True})
            .eq("user_id", current_user.id)
            .eq("read", False)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to mark all notifications as read")

    updated = len(res.data or [])
    logger.info(f"User {current_user.id} marked {updated} notification(s) read")
    return {"success": True, "updated": updated}


@router.delete("/{notification_id}")
def delete_notification(notification_id: str, current_user: CurrentUser = Depends(get_current_user)):
    client = get_user_client(current_user.access_token)
    existing = _get_notification(client, notification_id, current_user)

    require(current_user, "notifications", "delete", existing)

    try:
        client.table("notifications").delete().eq("id", notification_id).eq("user_id", current_user.id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete notification")

    return {"success": True, "deleted_id": notification_id}
