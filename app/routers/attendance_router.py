# /app/routers/attendance_router.py

"""
HTTP surface of the attendance ledger. Every write and every class view is
restricted to teachers and admins; per-student statistics are also open to
the student and their parent (checked in the service).
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models import attendance_model
from ..models.enums import AttendanceStatus, UserRole
from ..services import attendance_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

staff_only = require_roles(UserRole.TEACHER, UserRole.ADMIN)


@router.get("", response_model=attendance_model.AttendanceListResponse, summary="List Attendance Records")
def list_attendance(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    class_id: Optional[str] = Query(None, alias="class"),
    student_id: Optional[str] = Query(None, alias="student"),
    status: Optional[AttendanceStatus] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.list_attendance(
        db, page, limit,
        class_id=class_id, student_id=student_id, status=status, date_from=start_date, date_to=end_date,
    )


@router.post("/mark", response_model=attendance_model.Attendance, status_code=status.HTTP_201_CREATED, summary="Mark Attendance")
def mark_attendance(
    mark: attendance_model.AttendanceMark,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.mark_attendance(db, mark)


@router.post("/bulk", response_model=attendance_model.BulkAttendanceResult, summary="Mark Attendance for Many Students")
def bulk_mark_attendance(
    request: attendance_model.BulkAttendanceRequest,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.bulk_mark_attendance(db, request)


@router.get("/class/{class_id}/roster", response_model=attendance_model.ClassRoster, summary="Class Roster for a Day")
def get_class_roster(
    class_id: str,
    day: Optional[date] = Query(None, alias="date"),
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.build_roster(db, class_id, day)


@router.get("/class/{class_id}/date/{day}", response_model=attendance_model.ClassAttendanceResponse, summary="Class Attendance on a Day")
def get_class_attendance(
    class_id: str,
    day: date,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.get_class_attendance(db, class_id, day)


@router.get("/student/{student_id}/stats", response_model=attendance_model.StudentAttendanceStats, summary="A Student's Attendance Statistics")
def get_student_stats(
    student_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return attendance_service.get_student_stats(db, student_id, current_user)


@router.put("/{attendance_id}", response_model=attendance_model.Attendance, summary="Update an Attendance Record")
def update_attendance(
    attendance_id: str,
    attendance_update: attendance_model.AttendanceUpdate,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.update_attendance(db, attendance_id, attendance_update)


@router.patch("/{attendance_id}/excuse", response_model=attendance_model.Attendance, summary="Approve or Reject an Excuse")
def approve_excuse(
    attendance_id: str,
    decision: attendance_model.ExcuseDecision,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(staff_only),
):
    return attendance_service.approve_excuse(db, attendance_id, decision.approved)
