# /app/routers/enrollments_router.py

from typing import List

from fastapi import APIRouter, Depends, status

from ..core.deps import get_current_active_user, require_roles
from ..core.exceptions import InvalidInputError
from ..db.base import User as UserModel
from ..models import enrollment_model
from ..models.enums import UserRole
from ..services import enrollment_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post("", response_model=enrollment_model.Enrollment, status_code=status.HTTP_201_CREATED, summary="Enroll in a Course")
def enroll(
    payload: enrollment_model.EnrollmentCreate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.STUDENT)),
):
    if not payload.course_id:
        raise InvalidInputError("courseId is required")
    return enrollment_service.enroll(db, current_user, payload.course_id, payload.instructor_id)


@router.get("/my", response_model=List[enrollment_model.EnrollmentWithCourse], summary="My Enrollments")
def get_my_enrollments(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return enrollment_service.list_my_enrollments(db, current_user.id)
