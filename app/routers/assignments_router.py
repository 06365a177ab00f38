# /app/routers/assignments_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models import assignment_model
from ..models.common_model import MessageResponse
from ..models.enums import AssignmentStatus, AssignmentType, UserRole
from ..services import assignment_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=assignment_model.AssignmentListResponse, summary="List Assignments")
def list_assignments(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    course: Optional[str] = None,
    class_id: Optional[str] = Query(None, alias="class"),
    type: Optional[AssignmentType] = None,
    status: Optional[AssignmentStatus] = None,
    upcoming: bool = False,
    overdue: bool = False,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return assignment_service.list_assignments(
        db, current_user, page, limit,
        course_id=course, class_id=class_id, type=type, status=status, upcoming=upcoming, overdue=overdue,
    )


@router.post("", response_model=assignment_model.Assignment, status_code=status.HTTP_201_CREATED, summary="Create an Assignment")
def create_assignment(
    assignment_create: assignment_model.AssignmentCreate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return assignment_service.create_assignment(db, assignment_create, current_user)


@router.get("/{assignment_id}", response_model=assignment_model.Assignment, summary="Get an Assignment")
def get_assignment(
    assignment_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return assignment_service.get_assignment(db, assignment_id, current_user)


@router.put("/{assignment_id}", response_model=assignment_model.Assignment, summary="Update an Assignment")
def update_assignment(
    assignment_id: str,
    assignment_update: assignment_model.AssignmentUpdate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return assignment_service.update_assignment(db, assignment_id, assignment_update, current_user)


@router.delete("/{assignment_id}", response_model=MessageResponse, summary="Close and Archive an Assignment")
def delete_assignment(
    assignment_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    assignment_service.delete_assignment(db, assignment_id, current_user)
    return MessageResponse(message="Assignment deleted successfully")


@router.post("/{assignment_id}/resources", response_model=assignment_model.Assignment, summary="Attach a Resource")
def add_resource(
    assignment_id: str,
    resource: assignment_model.AssignmentResourceCreate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return assignment_service.add_resource(db, assignment_id, resource, current_user)
