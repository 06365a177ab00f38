# /app/services/class_service.py

"""
This service module acts as the business logic layer for scheduled classes.

Scheduling enforces three rules before anything is written: the course and
instructor must exist, a teacher may only schedule themself on a course they
teach, and the new [start, end) window must not overlap another active
scheduled/live class of the same instructor in the same course.
"""

import uuid
from datetime import datetime
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from ..core.app_logger import get_logger
from ..core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from ..db.base import Class, User
from ..models import class_model
from ..models.enums import ClassStatus, NotificationType, UserRole
from . import notification_service
from .database_helpers.query_helpers import as_utc, settable_fields
from .database_service import DatabaseService

logger = get_logger(__name__)


def get_class_or_404(db: DatabaseService, class_id: str) -> Class:
    class_obj = db.get_class_by_id(class_id)
    if not class_obj:
        raise NotFoundError("Class not found")
    return class_obj


def _ensure_can_manage(class_obj: Class, current_user: User) -> None:
    """Class instructor, any instructor of the course, or an admin."""
    if current_user.role == UserRole.ADMIN:
        return
    if class_obj.instructor_id == current_user.id:
        return
    if class_obj.course and class_obj.course.has_instructor(current_user.id):
        return
    raise ForbiddenError("Not authorized")


def _validate_window(start_time: datetime, end_time: datetime) -> None:
    if as_utc(end_time) <= as_utc(start_time):
        raise InvalidInputError("End time must be after start time")


def _announce(db: DatabaseService, class_obj: Class) -> None:
    start = as_utc(class_obj.start_time)
    message = (
        f"You are scheduled for {class_obj.course.code}: {class_obj.title} "
        f"on {start:%Y-%m-%d} at {start:%H:%M} UTC."
    )
    try:
        notification_service.notify(
            db, class_obj.instructor_id, "New Class Scheduled", message, NotificationType.SCHEDULE,
        )
    except SQLAlchemyError:
        # The class is already committed; a lost notification must not undo it.
        db.rollback()
        logger.exception("Failed to send scheduling notification for class %s", class_obj.id)


# --- Facade Methods for CRUD Operations ---

def create_class(db: DatabaseService, class_data: class_model.ClassCreate, current_user: User) -> Class:
    course = db.get_course_by_id(class_data.course_id)
    if not course:
        raise NotFoundError("Course not found")
    instructor = db.get_active_user_by_id(class_data.instructor_id)
    if not instructor:
        raise NotFoundError("Instructor not found")

    if current_user.role == UserRole.TEACHER:
        if instructor.id != current_user.id:
            raise ForbiddenError("You can only schedule classes for yourself")
        if not course.has_instructor(current_user.id):
            raise ForbiddenError("You are not assigned to this course")

    _validate_window(class_data.start_time, class_data.end_time)
    start_time, end_time = as_utc(class_data.start_time), as_utc(class_data.end_time)

    if db.find_conflicting_class(course.id, instructor.id, start_time, end_time):
        logger.warning("Class scheduling conflict for instructor %s in course %s", instructor.id, course.id)
        raise ConflictError("Time conflict detected")

    record = class_data.model_dump()
    record.update({
        "id": f"cls_{uuid.uuid4().hex[:12]}",
        "title": class_data.title.strip(),
        "start_time": start_time,
        "end_time": end_time,
        "recurrence_end_date": as_utc(class_data.recurrence_end_date),
        "status": ClassStatus.SCHEDULED,
    })
    new_class = db.add_class(record)
    logger.info("Class %s scheduled in course %s by %s", new_class.id, course.id, current_user.id)

    _announce(db, new_class)
    return new_class


def update_class(
    db: DatabaseService,
    class_id: str,
    class_update: class_model.ClassUpdate,
    current_user: User,
) -> Class:
    class_obj = get_class_or_404(db, class_id)
    _ensure_can_manage(class_obj, current_user)
    update_data = settable_fields(Class, class_update.model_dump(exclude_unset=True))
    if not update_data:
        raise InvalidInputError("No update data provided.")

    if "start_time" in update_data or "end_time" in update_data:
        start_time = as_utc(update_data.get("start_time") or class_obj.start_time)
        end_time = as_utc(update_data.get("end_time") or class_obj.end_time)
        _validate_window(start_time, end_time)
        if db.find_conflicting_class(
            class_obj.course_id, class_obj.instructor_id, start_time, end_time, exclude_class_id=class_obj.id
        ):
            raise ConflictError("Time conflict detected")
        update_data["start_time"], update_data["end_time"] = start_time, end_time

    return db.update_class(class_obj, update_data)


def delete_class(db: DatabaseService, class_id: str, current_user: User) -> None:
    """Cancels and archives the class. Attendance already taken is kept."""
    class_obj = get_class_or_404(db, class_id)
    _ensure_can_manage(class_obj, current_user)
    class_obj.archive()
    db.update_class(class_obj, {"status": ClassStatus.CANCELLED})
    logger.info("Class %s cancelled by %s", class_id, current_user.id)


def update_status(db: DatabaseService, class_id: str, status: ClassStatus, current_user: User) -> Class:
    class_obj = get_class_or_404(db, class_id)
    _ensure_can_manage(class_obj, current_user)
    return db.update_class(class_obj, {"status": status})


# --- Reads ---

def list_classes(db: DatabaseService, page: int, limit: int, **filters) -> class_model.ClassListResponse:
    classes, pagination = db.list_classes(page, limit, **filters)
    return class_model.ClassListResponse(
        classes=[class_model.Class.model_validate(c) for c in classes],
        pagination=pagination,
    )


def get_my_classes(db: DatabaseService, current_user: User) -> List[Class]:
    return db.get_classes_by_instructor(current_user.id)
