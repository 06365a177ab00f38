# /app/routers/reports_router.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.deps import require_roles
from ..db.base import User as UserModel
from ..models import report_model
from ..models.enums import UserRole
from ..services import report_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

report_readers = require_roles(UserRole.ADMIN, UserRole.TEACHER)


@router.get("/enrollment", response_model=report_model.EnrollmentReport, summary="Enrollment Report")
def get_enrollment_report(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(report_readers),
):
    return report_service.get_enrollment_report(db, current_user)


@router.get("/attendance", response_model=report_model.AttendanceReport, summary="Attendance Report")
def get_attendance_report(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(report_readers),
):
    return report_service.get_attendance_report(db, current_user, start_date, end_date)


@router.get("/performance", response_model=report_model.PerformanceReport, summary="Performance Report")
def get_performance_report(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(report_readers),
):
    return report_service.get_performance_report(db, current_user)
