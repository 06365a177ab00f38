# /app/routers/notifications_router.py

from fastapi import APIRouter, Depends

from ..core.deps import get_current_active_user
from ..db.base import User as UserModel
from ..models import notification_model
from ..models.common_model import MessageResponse
from ..services import notification_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=notification_model.NotificationListResponse, summary="My Latest Notifications")
def get_notifications(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return notification_service.get_inbox(db, current_user)


# Declared before "/{notification_id}/read" so "read-all" is never taken for an id.
@router.put("/read-all", response_model=MessageResponse, summary="Mark All Notifications as Read")
def mark_all_as_read(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    updated = notification_service.mark_all_as_read(db, current_user)
    return MessageResponse(message=f"{updated} notifications marked as read")


@router.put("/{notification_id}/read", response_model=notification_model.Notification, summary="Mark a Notification as Read")
def mark_as_read(
    notification_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return notification_service.mark_as_read(db, notification_id, current_user)
