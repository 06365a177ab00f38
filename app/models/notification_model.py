# /app/models/notification_model.py

from datetime import datetime
from typing import List, Optional

from .common_model import APIModel
from .enums import NotificationType


class Notification(APIModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationListResponse(APIModel):
    notifications: List[Notification]
    unread_count: int
