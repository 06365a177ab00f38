# /app/services/enrollment_service.py

"""
Business logic for the enrollment ledger.

`enroll` is the write path. It validates the course and the optional
instructor, pre-checks for an existing enrollment to give a clean 409, and
then hands the record to `DatabaseService.create_enrollment`, which inserts
the row and increments `Course.total_enrollments` in one transaction. The
UNIQUE (student_id, course_id) constraint makes two racing requests end in
exactly one success.
"""

import uuid
from typing import List, Optional

from ..core.app_logger import get_logger
from ..core.exceptions import ConflictError, InvalidReferenceError, NotFoundError
from ..db.base import Enrollment, User
from ..models import enrollment_model
from ..models.enums import EnrollmentStatus
from .database_service import DatabaseService

logger = get_logger(__name__)


def enroll(
    db: DatabaseService,
    student: User,
    course_id: str,
    instructor_id: Optional[str] = None,
) -> Enrollment:
    course = db.get_course_by_id(course_id)
    if not course:
        raise NotFoundError("Course not found")

    if instructor_id:
        if not course.has_instructor(instructor_id):
            raise InvalidReferenceError("Selected instructor is not assigned to this course")
    elif len(course.instructors) == 1:
        instructor_id = course.instructors[0].id
    # With zero or several instructors and no choice made, the enrollment
    # carries no instructor.

    if db.get_enrollment(student.id, course_id):
        logger.warning("Duplicate enrollment rejected: student %s, course %s", student.id, course_id)
        raise ConflictError("Already enrolled in this course")

    enrollment = db.create_enrollment({
        "id": f"enr_{uuid.uuid4().hex[:12]}",
        "student_id": student.id,
        "course_id": course_id,
        "instructor_id": instructor_id,
        "progress": 0,
        "status": EnrollmentStatus.ACTIVE,
    })
    logger.info("Student %s enrolled in course %s", student.id, course_id)
    return enrollment


def get_enrollment_status(
    db: DatabaseService, student_id: str, course_id: str
) -> enrollment_model.EnrollmentStatusResponse:
    enrollment = db.get_enrollment(student_id, course_id)
    return enrollment_model.EnrollmentStatusResponse(
        is_enrolled=enrollment is not None,
        enrollment=enrollment_model.EnrollmentSnapshot.model_validate(enrollment) if enrollment else None,
    )


def list_my_enrollments(db: DatabaseService, student_id: str) -> List[Enrollment]:
    return db.get_enrollments_for_student(student_id)
