# /app/routers/classes_router.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models import class_model
from ..models.common_model import MessageResponse
from ..models.enums import ClassStatus, UserRole
from ..services import class_service
from ..services.database_helpers.query_helpers import utc_now
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=class_model.ClassListResponse, summary="List Classes")
def list_classes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    course: Optional[str] = None,
    instructor: Optional[str] = None,
    status: Optional[ClassStatus] = None,
    is_online: Optional[bool] = Query(None, alias="isOnline"),
    upcoming: bool = False,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(get_current_active_user),
):
    starts_after = utc_now() if upcoming else start_date
    return class_service.list_classes(
        db, page, limit,
        course_id=course,
        instructor_id=instructor,
        status=status,
        is_online=is_online,
        starts_after=starts_after,
        starts_before=end_date,
    )


@router.get("/my", response_model=List[class_model.Class], summary="Classes I Teach")
def get_my_classes(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return class_service.get_my_classes(db, current_user)


@router.post("", response_model=class_model.Class, status_code=status.HTTP_201_CREATED, summary="Schedule a Class")
def create_class(
    class_create: class_model.ClassCreate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return class_service.create_class(db, class_create, current_user)

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.Class, summary="Get a Single Class")
def get_class(
    class_id: str,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(get_current_active_user),
):
    return class_service.get_class_or_404(db, class_id)


@router.put("/{class_id}", response_model=class_model.Class, summary="Update a Class")
def update_class(
    class_id: str,
    class_update: class_model.ClassUpdate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return class_service.update_class(db, class_id, class_update, current_user)


@router.delete("/{class_id}", response_model=MessageResponse, summary="Cancel a Class")
def delete_class(
    class_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    class_service.delete_class(db, class_id, current_user)
    return MessageResponse(message="Class deleted successfully")


@router.patch("/{class_id}/status", response_model=class_model.Class, summary="Change a Class's Status")
def update_class_status(
    class_id: str,
    status_update: class_model.ClassStatusUpdate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return class_service.update_status(db, class_id, status_update.status, current_user)
