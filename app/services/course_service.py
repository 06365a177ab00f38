# /app/services/course_service.py

"""
This service module contains the business logic for the course catalog:
listing, creation with instructor assignment, ownership-checked updates,
soft deletion, and the per-course statistics.
"""

import uuid
from typing import List

from ..core.app_logger import get_logger
from ..core.exceptions import ForbiddenError, InvalidInputError, InvalidReferenceError, NotFoundError
from ..db.base import Course, User
from ..models import course_model
from ..models.enums import ClassStatus, UserRole
from .database_helpers.query_helpers import as_utc, settable_fields, utc_now
from .database_service import DatabaseService

logger = get_logger(__name__)


def get_course_or_404(db: DatabaseService, course_id: str) -> Course:
    course = db.get_course_by_id(course_id)
    if not course:
        raise NotFoundError("Course not found")
    return course


def _resolve_instructor(db: DatabaseService, instructor_id: str) -> User:
    instructor = db.get_active_user_by_id(instructor_id)
    if not instructor or instructor.role != UserRole.TEACHER:
        raise InvalidReferenceError("Invalid instructor")
    return instructor


# --- Reads ---

def list_courses(db: DatabaseService, page: int, limit: int, **filters) -> course_model.CourseListResponse:
    courses, pagination = db.list_courses(page, limit, **filters)
    return course_model.CourseListResponse(
        courses=[course_model.Course.model_validate(c) for c in courses],
        pagination=pagination,
    )


def get_my_courses(db: DatabaseService, current_user: User) -> List[course_model.MyCourse]:
    results = []
    for course, enrollment_count in db.get_courses_for_user(current_user.id):
        payload = course_model.Course.model_validate(course).model_dump()
        results.append(course_model.MyCourse(**payload, enrollment_count=enrollment_count))
    return results


def get_course_details(db: DatabaseService, course_id: str) -> course_model.CourseDetails:
    course = get_course_or_404(db, course_id)
    classes = db.get_classes_for_course(course_id)
    now = utc_now()
    stats = course_model.CourseClassStats(
        total_classes=len(classes),
        upcoming_classes=sum(1 for c in classes if as_utc(c.start_time) > now),
        completed_classes=sum(1 for c in classes if c.status == ClassStatus.COMPLETED),
    )
    return course_model.CourseDetails(
        course=course_model.Course.model_validate(course),
        classes=[course_model.ClassBrief.model_validate(c) for c in classes],
        stats=stats,
    )


def get_course_stats(db: DatabaseService, course_id: str) -> course_model.CourseStats:
    course = get_course_or_404(db, course_id)
    return course_model.CourseStats(
        total_enrollments=course.total_enrollments,
        counted_enrollments=db.count_enrollments(course_id),
        classes_by_status={status.value: total for status, total in db.count_classes_by_status(course_id)},
    )


# --- Writes ---

def create_course(db: DatabaseService, course_data: course_model.CourseCreate, current_user: User) -> Course:
    if db.get_course_by_code(course_data.code):
        logger.warning("Course creation rejected, duplicate code %s", course_data.code)
        raise InvalidInputError("Course code already exists")

    instructors = [_resolve_instructor(db, instructor_id) for instructor_id in dict.fromkeys(course_data.instructor_ids)]
    if not instructors and current_user.role == UserRole.TEACHER:
        instructors = [current_user]

    record = course_data.model_dump(exclude={"instructor_ids"})
    record.update({
        "id": f"crs_{uuid.uuid4().hex[:12]}",
        "creator_id": current_user.id,
        "total_enrollments": 0,
    })
    course = db.add_course(record, instructors)
    logger.info("Course %s (%s) created by %s", course.id, course.code, current_user.id)
    return course


def update_course(
    db: DatabaseService,
    course_id: str,
    course_update: course_model.CourseUpdate,
    current_user: User,
) -> Course:
    course = get_course_or_404(db, course_id)
    if current_user.role != UserRole.ADMIN and not course.has_instructor(current_user.id):
        raise ForbiddenError("Not authorized")
    update_data = settable_fields(Course, course_update.model_dump(exclude_unset=True))
    if not update_data:
        raise InvalidInputError("No update data provided.")
    if update_data.get("is_free"):
        update_data["price"] = 0
    return db.update_course(course, update_data)


def delete_course(db: DatabaseService, course_id: str, current_user: User) -> None:
    course = get_course_or_404(db, course_id)
    if course.creator_id != current_user.id and current_user.role != UserRole.ADMIN:
        raise ForbiddenError("Not authorized")
    course.archive()
    db.update_course(course, {})
    logger.info("Course %s archived by %s", course_id, current_user.id)


def add_instructor(db: DatabaseService, course_id: str, instructor_id: str, current_user: User) -> Course:
    course = get_course_or_404(db, course_id)
    if course.creator_id != current_user.id and current_user.role != UserRole.ADMIN:
        raise ForbiddenError("Not authorized")
    instructor = _resolve_instructor(db, instructor_id)
    return db.add_course_instructor(course, instructor)


def reconcile_enrollment_counts(db: DatabaseService) -> course_model.ReconciliationReport:
    """
    Recomputes every course's stored enrollment counter from the Enrollment
    rows and repairs the ones that drifted.
    """
    checked = 0
    corrected = []
    for course, actual in db.get_all_courses_with_enrollment_counts():
        checked += 1
        if course.total_enrollments == actual:
            continue
        stored = course.total_enrollments
        actual = db.recount_course_enrollments(course.id)
        corrected.append(course_model.CounterCorrection(
            course_id=course.id, code=course.code, stored=stored, actual=actual,
        ))

    if corrected:
        logger.warning("Enrollment counters corrected for %d of %d courses", len(corrected), checked)
    return course_model.ReconciliationReport(checked=checked, corrected=corrected)
