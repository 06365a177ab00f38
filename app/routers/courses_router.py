# /app/routers/courses_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models import course_model, enrollment_model
from ..models.common_model import MessageResponse
from ..models.enums import CourseLevel, CourseStatus, UserRole
from ..services import course_service, enrollment_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- COURSE COLLECTION ENDPOINTS (/api/courses) ---

@router.get("", response_model=course_model.CourseListResponse, summary="List Courses")
def list_courses(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[CourseStatus] = None,
    level: Optional[CourseLevel] = None,
    instructor: Optional[str] = None,
    is_free: Optional[bool] = Query(None, alias="isFree"),
    search: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
):
    return course_service.list_courses(
        db, page, limit, status=status, level=level, instructor_id=instructor, is_free=is_free, search=search,
    )


@router.get("/my", response_model=List[course_model.MyCourse], summary="Courses I Created or Teach")
def get_my_courses(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return course_service.get_my_courses(db, current_user)


@router.post("", response_model=course_model.Course, status_code=status.HTTP_201_CREATED, summary="Create a Course")
def create_course(
    course_create: course_model.CourseCreate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return course_service.create_course(db, course_create, current_user)


@router.post("/reconcile-enrollments", response_model=course_model.ReconciliationReport, summary="Repair Enrollment Counters")
def reconcile_enrollment_counts(
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return course_service.reconcile_enrollment_counts(db)

# --- INDIVIDUAL COURSE ENDPOINTS (/api/courses/{course_id}) ---

@router.get("/{course_id}", response_model=course_model.CourseDetails, summary="Get a Course with its Classes")
def get_course(course_id: str, db: DatabaseService = Depends(get_db_service)):
    return course_service.get_course_details(db, course_id)


@router.put("/{course_id}", response_model=course_model.Course, summary="Update a Course")
def update_course(
    course_id: str,
    course_update: course_model.CourseUpdate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return course_service.update_course(db, course_id, course_update, current_user)


@router.delete("/{course_id}", response_model=MessageResponse, summary="Archive a Course")
def delete_course(
    course_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    course_service.delete_course(db, course_id, current_user)
    return MessageResponse(message="Course deleted successfully")


@router.post("/{course_id}/instructors", response_model=course_model.Course, summary="Add an Instructor")
def add_instructor(
    course_id: str,
    request: course_model.AddInstructorRequest,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    return course_service.add_instructor(db, course_id, request.instructor_id, current_user)


@router.get("/{course_id}/stats", response_model=course_model.CourseStats, summary="Course Statistics")
def get_course_stats(
    course_id: str,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(get_current_active_user),
):
    return course_service.get_course_stats(db, course_id)

# --- ENROLLMENT SUB-RESOURCE ENDPOINTS ---

@router.post(
    "/{course_id}/enroll",
    response_model=enrollment_model.Enrollment,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll the Current Student in a Course",
)
def enroll_in_course(
    course_id: str,
    payload: Optional[enrollment_model.EnrollmentCreate] = None,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.STUDENT)),
):
    instructor_id = payload.instructor_id if payload else None
    return enrollment_service.enroll(db, current_user, course_id, instructor_id)


@router.get(
    "/{course_id}/enrollment-status",
    response_model=enrollment_model.EnrollmentStatusResponse,
    summary="Is the Current User Enrolled?",
)
def get_enrollment_status(
    course_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return enrollment_service.get_enrollment_status(db, current_user.id, course_id)
