# core/notifications.py
import requests
from typing import Optional

from core.config import settings
from core.logging_config import logger
from core.policies import SYSTEM, require
from core.supabase_client import get_admin_client
from core.utils import sanitize
from models.enums import NotificationType


# -----------------------------------------------------
# In-app notification (notifications table)
# -----------------------------------------------------
def create_notification(
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.info,
) -> Optional[dict]:
    """
    Insert one notification as the system (service role).

    Notification delivery is a side effect of an action that has
    already been committed, so failures are logged and None is
    returned instead of failing the caller's request.
    """
    row = sanitize({
        "user_id": user_id,
        "title": title,
        "message": message,
        "type": type,
        "read": False,
    })
    require(SYSTEM, "notifications", "insert", row)

    client = get_admin_client()
    if client is None:
        logger.warning(f"Notification for {user_id} skipped: service role not configured")
        return None

    try:
        result = client.table("notifications").insert(row).execute()
    except Exception as e:
        logger.error(f"Failed to create notification for {user_id}: {e}")
        return None

    logger.info(f"Notification '{title}' sent to {user_id}")
    return result.data[0] if result.data else None


def notify_document_reviewed(document: dict, land_title: Optional[str], action: str) -> Optional[dict]:
    """Tell the submitter their document was approved or rejected."""
    submitter = document.get("submitted_by")
    if not submitter:
        logger.warning(f"Document {document.get('id')} has no submitter: no notification")
        return None

    doc_type = document.get("document_type") or "document"
    return create_notification(
        user_id=submitter,
        title=f"Document {action}",
        message=f"Your {doc_type} document for {land_title or 'your land'} has been {action}.",
        type=NotificationType.success if action == "approved" else NotificationType.warning,
    )


def notify_land_status(land: dict, status: str) -> Optional[dict]:
    """Tell the owner an admin changed the ownership status of their land."""
    owner = land.get("owner_id")
    if not owner:
        return None

    return create_notification(
        user_id=owner,
        title=f"Land record {status}",
        message=f"Your land record {land.get('title')} has been marked {status}.",
        type=NotificationType.success if status == "verified" else NotificationType.warning,
    )


def notify_verification_request(land: dict, requester_name: Optional[str]) -> Optional[dict]:
    """A public user asked the owner to verify ownership of a land record."""
    return create_notification(
        user_id=land["owner_id"],
        title="Ownership Verification Request",
        message=f"{requester_name or 'A user'} has requested ownership verification for your land: {land.get('title')}",
        type=NotificationType.info,
    )


# -----------------------------------------------------
# 📨 Admin review alert (Discord, Slack, etc.)
# -----------------------------------------------------
def send_webhook_message(message: str):
    webhook_url = settings.ADMIN_WEBHOOK_URL
    if not webhook_url:
        logger.debug("Webhook URL not configured: skipping.")
        return

    try:
        response = requests.post(webhook_url, json={"content": message}, timeout=10)
        logger.info(f"Webhook sent (status {response.status_code})")
    except requests.RequestException as e:
        logger.warning(f"Webhook failed: {e}")
