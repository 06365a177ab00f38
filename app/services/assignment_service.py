# /app/services/assignment_service.py

"""
Business logic for course and class scoped assignments.

Students only ever see assignments of courses they hold an active enrollment
in. Resources are an append-only ordered list; each entry is stamped with the
user who added it.
"""

import uuid
from typing import Optional

from ..core.app_logger import get_logger
from ..core.exceptions import ForbiddenError, InvalidInputError, InvalidReferenceError, NotFoundError
from ..db.base import Assignment, User
from ..models import assignment_model
from ..models.enums import AssignmentStatus, AssignmentType, EnrollmentStatus, UserRole
from .database_helpers.query_helpers import as_utc, settable_fields, utc_now
from .database_service import DatabaseService

logger = get_logger(__name__)


def get_assignment_or_404(db: DatabaseService, assignment_id: str) -> Assignment:
    assignment = db.get_assignment_by_id(assignment_id)
    if not assignment:
        raise NotFoundError("Assignment not found")
    return assignment


def _ensure_can_manage(assignment: Assignment, current_user: User) -> None:
    if current_user.role == UserRole.ADMIN or assignment.creator_id == current_user.id:
        return
    if assignment.course and assignment.course.has_instructor(current_user.id):
        return
    raise ForbiddenError("Not authorized")


def list_assignments(
    db: DatabaseService,
    current_user: User,
    page: int,
    limit: int,
    course_id: Optional[str] = None,
    class_id: Optional[str] = None,
    type: Optional[AssignmentType] = None,
    status: Optional[AssignmentStatus] = None,
    upcoming: bool = False,
    overdue: bool = False,
) -> assignment_model.AssignmentListResponse:
    visible_course_ids = None
    if current_user.role == UserRole.STUDENT:
        visible_course_ids = db.get_enrolled_course_ids(current_user.id, EnrollmentStatus.ACTIVE)

    due_after = due_before = None
    if upcoming:
        status, due_after = AssignmentStatus.PUBLISHED, utc_now()
    elif overdue:
        status, due_before = AssignmentStatus.PUBLISHED, utc_now()

    assignments, pagination = db.list_assignments(
        page, limit,
        visible_course_ids=visible_course_ids,
        course_id=course_id,
        class_id=class_id,
        type=type,
        status=status,
        due_after=due_after,
        due_before=due_before,
    )
    return assignment_model.AssignmentListResponse(
        assignments=[assignment_model.Assignment.model_validate(a) for a in assignments],
        pagination=pagination,
    )


def get_assignment(db: DatabaseService, assignment_id: str, current_user: User) -> Assignment:
    assignment = get_assignment_or_404(db, assignment_id)
    if current_user.role == UserRole.STUDENT:
        enrollment = db.get_enrollment(current_user.id, assignment.course_id)
        if not enrollment or enrollment.status != EnrollmentStatus.ACTIVE:
            raise ForbiddenError("Not enrolled in this course")
    return assignment


def create_assignment(
    db: DatabaseService, assignment_data: assignment_model.AssignmentCreate, current_user: User
) -> Assignment:
    course = db.get_course_by_id(assignment_data.course_id)
    if not course:
        raise NotFoundError("Course not found")
    if assignment_data.class_id:
        class_obj = db.get_class_by_id(assignment_data.class_id)
        if not class_obj:
            raise NotFoundError("Class not found")
        if class_obj.course_id != course.id:
            raise InvalidReferenceError("Class does not belong to this course")

    record = assignment_data.model_dump(exclude={"resources", "rubric"})
    record.update({
        "id": f"asg_{uuid.uuid4().hex[:12]}",
        "creator_id": current_user.id,
        "publish_date": as_utc(assignment_data.publish_date),
        "due_date": as_utc(assignment_data.due_date),
        "resources": [
            {**resource.model_dump(), "uploaded_by": current_user.id}
            for resource in assignment_data.resources
        ],
        "rubric": [criterion.model_dump() for criterion in assignment_data.rubric],
    })
    assignment = db.add_assignment(record)
    logger.info("Assignment %s created in course %s by %s", assignment.id, course.id, current_user.id)
    return assignment


def update_assignment(
    db: DatabaseService,
    assignment_id: str,
    assignment_update: assignment_model.AssignmentUpdate,
    current_user: User,
) -> Assignment:
    assignment = get_assignment_or_404(db, assignment_id)
    _ensure_can_manage(assignment, current_user)
    update_data = settable_fields(Assignment, assignment_update.model_dump(exclude_unset=True))
    if not update_data:
        raise InvalidInputError("No update data provided.")
    for key in ("publish_date", "due_date"):
        if key in update_data:
            update_data[key] = as_utc(update_data[key])
    return db.update_assignment(assignment, update_data)


def delete_assignment(db: DatabaseService, assignment_id: str, current_user: User) -> None:
    assignment = get_assignment_or_404(db, assignment_id)
    _ensure_can_manage(assignment, current_user)
    assignment.archive()
    db.update_assignment(assignment, {"status": AssignmentStatus.CLOSED})
    logger.info("Assignment %s closed and archived by %s", assignment_id, current_user.id)


def add_resource(
    db: DatabaseService,
    assignment_id: str,
    resource: assignment_model.AssignmentResourceCreate,
    current_user: User,
) -> Assignment:
    assignment = get_assignment_or_404(db, assignment_id)
    _ensure_can_manage(assignment, current_user)
    entry = {**resource.model_dump(), "uploaded_by": current_user.id}
    return db.append_assignment_resource(assignment, entry)
