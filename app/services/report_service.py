# /app/services/report_service.py

"""
Aggregate reports over the two ledgers, computed with pandas.

Admins see the whole platform. Teachers see the same reports restricted to
the courses they teach.
"""

from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from ..db.base import User
from ..models import report_model
from ..models.enums import AttendanceStatus, EnrollmentStatus, UserRole
from .attendance_service import attendance_rate
from .database_service import DatabaseService

GRADE_BINS = [0, 60, 70, 80, 90, 101]
GRADE_LABELS = ["F (0-59)", "D (60-69)", "C (70-79)", "B (80-89)", "A (90-100)"]
TOP_COURSES = 10


def _scope(db: DatabaseService, current_user: User) -> Optional[List[str]]:
    """None means every course; a list restricts the report to those courses."""
    if current_user.role == UserRole.ADMIN:
        return None
    return [course.id for course in db.get_courses_taught_by(current_user.id)]


def _status_counts(series: pd.Series, statuses) -> Dict[str, int]:
    counts = series.map(lambda s: getattr(s, "value", s)).value_counts().to_dict() if not series.empty else {}
    return {status.value: int(counts.get(status.value, 0)) for status in statuses}


def get_enrollment_report(db: DatabaseService, current_user: User) -> report_model.EnrollmentReport:
    course_ids = _scope(db, current_user)
    df = db.get_enrollments_as_dataframe(course_ids)

    by_course = []
    if not df.empty:
        per_course = df.groupby("course_id")["id"].count().sort_values(ascending=False).head(TOP_COURSES)
        courses = {c.id: c for c in db.get_courses_by_ids(list(per_course.index))}
        for course_id, total in per_course.items():
            course = courses.get(course_id)
            by_course.append(report_model.CourseEnrollmentCount(
                course_id=course_id,
                title=course.title if course else "Unknown Course",
                code=course.code if course else "???",
                enrollments=int(total),
            ))

    recent = [
        report_model.RecentEnrollment(
            student_name=e.student.full_name,
            course_title=e.course.title,
            enrolled_at=e.enrolled_at,
        )
        for e in db.get_recent_enrollments(limit=5, course_ids=course_ids)
    ]

    return report_model.EnrollmentReport(
        total_enrollments=len(df),
        by_status=_status_counts(df["status"], EnrollmentStatus),
        by_course=by_course,
        recent_enrollments=recent,
    )


def get_attendance_report(
    db: DatabaseService,
    current_user: User,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> report_model.AttendanceReport:
    df = db.get_attendance_as_dataframe(_scope(db, current_user), date_from, date_to)
    by_status = _status_counts(df["status"], AttendanceStatus)

    daily_trend = {}
    if not df.empty:
        per_day = df.groupby("day")["id"].count().sort_index()
        daily_trend = {day.isoformat(): int(total) for day, total in per_day.items()}

    return report_model.AttendanceReport(
        total_records=len(df),
        by_status=by_status,
        attendance_rate=attendance_rate(by_status),
        daily_trend=daily_trend,
    )


def get_performance_report(db: DatabaseService, current_user: User) -> report_model.PerformanceReport:
    df = db.get_enrollments_as_dataframe(_scope(db, current_user))
    if df.empty:
        return report_model.PerformanceReport(
            overall_average_grade=None,
            grade_distribution={label: 0 for label in GRADE_LABELS},
            by_course=[],
        )

    df["grade"] = pd.to_numeric(df["grade"], errors="coerce")
    df["progress"] = pd.to_numeric(df["progress"], errors="coerce").fillna(0)
    graded = df.dropna(subset=["grade"])

    distribution = pd.cut(graded["grade"], bins=GRADE_BINS, labels=GRADE_LABELS, right=False).value_counts()
    grade_distribution = {label: int(distribution.get(label, 0)) for label in GRADE_LABELS}

    per_course = df.groupby("course_id").agg(
        average_grade=("grade", "mean"),
        average_progress=("progress", "mean"),
        graded_students=("grade", "count"),
    )
    courses = {c.id: c for c in db.get_courses_by_ids(list(per_course.index))}
    by_course = []
    for course_id, row in per_course.iterrows():
        course = courses.get(course_id)
        by_course.append(report_model.CoursePerformance(
            course_id=course_id,
            title=course.title if course else "Unknown",
            average_grade=None if pd.isna(row["average_grade"]) else round(float(row["average_grade"]), 2),
            average_progress=round(float(row["average_progress"]), 2),
            graded_students=int(row["graded_students"]),
        ))
    by_course.sort(key=lambda item: item.average_grade if item.average_grade is not None else -1, reverse=True)

    return report_model.PerformanceReport(
        overall_average_grade=round(float(graded["grade"].mean()), 2) if not graded.empty else None,
        grade_distribution=grade_distribution,
        by_course=by_course,
    )
