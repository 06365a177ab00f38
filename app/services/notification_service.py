# /app/services/notification_service.py

import uuid

from ..core.app_logger import get_logger
from ..core.exceptions import ForbiddenError, NotFoundError
from ..db.base import Notification, User
from ..models import notification_model
from ..models.enums import NotificationType
from .database_service import DatabaseService

logger = get_logger(__name__)

INBOX_SIZE = 50


def notify(
    db: DatabaseService,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType = NotificationType.GENERAL,
) -> Notification:
    """Stores a message for a user. Used internally by other services."""
    notification = db.add_notification({
        "id": f"ntf_{uuid.uuid4().hex[:12]}",
        "user_id": user_id,
        "title": title,
        "message": message,
        "type": type,
        "is_read": False,
    })
    logger.info("Notification %s queued for user %s", notification.id, user_id)
    return notification


def get_inbox(db: DatabaseService, current_user: User) -> notification_model.NotificationListResponse:
    notifications = db.get_notifications_for_user(current_user.id, limit=INBOX_SIZE)
    return notification_model.NotificationListResponse(
        notifications=[notification_model.Notification.model_validate(n) for n in notifications],
        unread_count=db.count_unread_notifications(current_user.id),
    )


def mark_as_read(db: DatabaseService, notification_id: str, current_user: User) -> Notification:
    notification = db.get_notification_by_id(notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != current_user.id:
        raise ForbiddenError("Not authorized")
    return db.mark_notification_read(notification)


def mark_all_as_read(db: DatabaseService, current_user: User) -> int:
    return db.mark_all_notifications_read(current_user.id)
