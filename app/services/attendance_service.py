# /app/services/attendance_service.py

"""
Business logic for the attendance ledger.

An attendance row belongs to one (student, class, calendar day). The day is
always computed in UTC from either the caller-supplied date or "today", and it
is stored alongside the exact timestamp so that the store's UNIQUE constraint
and the application pre-check agree on what "the same day" means.

Rosters are derived, never stored: the students holding an *active*
enrollment in the class's course, each decorated with that day's record.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.app_logger import get_logger
from ..core.exceptions import (
    ConflictError, ForbiddenError, InvalidInputError, NotFoundError, ServiceError,
)
from ..db.base import Attendance, Class, User
from ..models import attendance_model, user_model
from ..models.enums import AttendanceStatus, UserRole
from .database_helpers.query_helpers import as_utc, settable_fields, utc_now
from .database_service import DatabaseService

logger = get_logger(__name__)

# Statuses counted as having attended when computing a student's rate.
ATTENDED_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EXCUSED)


def _get_class_or_404(db: DatabaseService, class_id: str) -> Class:
    class_obj = db.get_class_by_id(class_id)
    if not class_obj:
        raise NotFoundError("Class not found")
    return class_obj


def _get_record_or_404(db: DatabaseService, attendance_id: str) -> Attendance:
    record = db.get_attendance_by_id(attendance_id)
    if not record:
        raise NotFoundError("Attendance record not found")
    return record


def _stamp_for_day(day: date, now: datetime) -> datetime:
    """The marking timestamp: the current time of day, placed on `day`."""
    if day == now.date():
        return now
    return datetime.combine(day, now.time(), tzinfo=timezone.utc)


# --- Writes ---

def mark_attendance(db: DatabaseService, mark: attendance_model.AttendanceMark) -> Attendance:
    _get_class_or_404(db, mark.class_id)
    if not db.get_active_user_by_id(mark.student_id):
        raise NotFoundError("Student not found")

    now = utc_now()
    day = mark.date or now.date()
    if db.find_attendance_for_day(mark.class_id, mark.student_id, day):
        raise ConflictError("Attendance already marked for this day")

    record = db.add_attendance({
        "id": f"att_{uuid.uuid4().hex[:12]}",
        "class_id": mark.class_id,
        "student_id": mark.student_id,
        "date": _stamp_for_day(day, now),
        "day": day,
        "status": mark.status,
        "time_in": as_utc(mark.time_in),
        "time_out": as_utc(mark.time_out),
        "notes": mark.notes,
        "excuse_approved": False,
    })
    logger.info("Attendance %s marked %s for student %s in class %s", record.id, mark.status.value, mark.student_id, mark.class_id)
    return record


def bulk_mark_attendance(
    db: DatabaseService, request: attendance_model.BulkAttendanceRequest
) -> attendance_model.BulkAttendanceResult:
    """
    Marks every record independently. A failing record is reported in
    `failed` and never stops the rest of the batch.
    """
    result = attendance_model.BulkAttendanceResult()
    for item in request.records:
        mark = attendance_model.AttendanceMark(
            class_id=request.class_id,
            student_id=item.student_id,
            status=item.status,
            notes=item.notes,
            date=request.date,
        )
        try:
            mark_attendance(db, mark)
        except ServiceError as e:
            result.failed.append(attendance_model.BulkFailed(student_id=item.student_id, error=e.message))
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Storage failure while marking attendance for student %s", item.student_id)
            result.failed.append(attendance_model.BulkFailed(student_id=item.student_id, error="Failed to mark attendance"))
        else:
            result.succeeded.append(attendance_model.BulkSucceeded(student_id=item.student_id))

    logger.info(
        "Bulk attendance for class %s: %d succeeded, %d failed",
        request.class_id, len(result.succeeded), len(result.failed),
    )
    return result


def update_attendance(
    db: DatabaseService, attendance_id: str, attendance_update: attendance_model.AttendanceUpdate
) -> Attendance:
    record = _get_record_or_404(db, attendance_id)
    update_data = settable_fields(Attendance, attendance_update.model_dump(exclude_unset=True))
    if not update_data:
        raise InvalidInputError("No update data provided.")
    return db.update_attendance(record, update_data)


def approve_excuse(db: DatabaseService, attendance_id: str, approved: bool) -> Attendance:
    """
    Approval forces the status to `excused`. A rejection only records the
    decision and leaves the status as it was.
    """
    record = _get_record_or_404(db, attendance_id)
    update_data = {"excuse_approved": approved}
    if approved:
        update_data["status"] = AttendanceStatus.EXCUSED
    return db.update_attendance(record, update_data)


# --- Reads ---

def build_roster(db: DatabaseService, class_id: str, day: Optional[date] = None) -> attendance_model.ClassRoster:
    class_obj = _get_class_or_404(db, class_id)
    day = day or utc_now().date()

    marked = {record.student_id: record for record in db.get_attendance_for_class_day(class_id, day)}
    roster = []
    for enrollment in db.get_roster_enrollments(class_obj.course_id):
        record = marked.get(enrollment.student_id)
        roster.append(attendance_model.RosterEntry(
            student=user_model.UserSummary.model_validate(enrollment.student),
            attendance=attendance_model.Attendance.model_validate(record) if record else None,
        ))

    return attendance_model.ClassRoster(
        class_=attendance_model.RosterClass.model_validate(class_obj),
        date=day,
        roster=roster,
    )


def get_class_attendance(db: DatabaseService, class_id: str, day: date) -> attendance_model.ClassAttendanceResponse:
    class_obj = _get_class_or_404(db, class_id)
    records = db.get_attendance_for_class_day(class_id, day)
    return attendance_model.ClassAttendanceResponse(
        class_=attendance_model.RosterClass.model_validate(class_obj),
        date=day,
        attendance=[attendance_model.AttendanceWithStudent.model_validate(r) for r in records],
    )


def list_attendance(db: DatabaseService, page: int, limit: int, **filters) -> attendance_model.AttendanceListResponse:
    records, pagination = db.list_attendance(page, limit, **filters)
    return attendance_model.AttendanceListResponse(
        attendance=[attendance_model.AttendanceWithStudent.model_validate(r) for r in records],
        pagination=pagination,
    )


def _can_view_student(student: User, current_user: User) -> bool:
    if current_user.role in (UserRole.ADMIN, UserRole.TEACHER):
        return True
    if current_user.role == UserRole.STUDENT:
        return current_user.id == student.id
    if current_user.role == UserRole.PARENT:
        return student.parent_id == current_user.id
    return False


def attendance_rate(counts: dict) -> float:
    total = sum(counts.values())
    if not total:
        return 0.0
    attended = sum(counts.get(status.value, 0) for status in ATTENDED_STATUSES)
    return round(attended / total * 100, 1)


def get_student_stats(
    db: DatabaseService, student_id: str, current_user: User
) -> attendance_model.StudentAttendanceStats:
    student = db.get_user_by_id(student_id)
    if not student:
        raise NotFoundError("Student not found")
    if not _can_view_student(student, current_user):
        raise ForbiddenError("Not authorized to view this student's attendance")

    counts = {status.value: 0 for status in AttendanceStatus}
    for status, total in db.count_attendance_by_status(student_id):
        counts[status.value] = total

    return attendance_model.StudentAttendanceStats(
        student_id=student_id,
        total_records=sum(counts.values()),
        by_status=counts,
        attendance_rate=attendance_rate(counts),
    )

