# models/notification.py

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel

from models.enums import NotificationType


class NotificationRead(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.info
    read: bool = False
    created_at: Optional[datetime] = None


class NotificationList(BaseModel):
    data: List[NotificationRead]
    unread_count: int
