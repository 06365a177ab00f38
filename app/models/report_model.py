# /app/models/report_model.py

from datetime import datetime
from typing import Dict, List, Optional

from .common_model import APIModel


class CourseEnrollmentCount(APIModel):
    course_id: str
    title: str
    code: str
    enrollments: int


class RecentEnrollment(APIModel):
    student_name: str
    course_title: str
    enrolled_at: Optional[datetime] = None


class EnrollmentReport(APIModel):
    total_enrollments: int
    by_status: Dict[str, int]
    by_course: List[CourseEnrollmentCount]
    recent_enrollments: List[RecentEnrollment]


class AttendanceReport(APIModel):
    total_records: int
    by_status: Dict[str, int]
    attendance_rate: float
    daily_trend: Dict[str, int]


class CoursePerformance(APIModel):
    course_id: str
    title: str
    average_grade: Optional[float] = None
    average_progress: float
    graded_students: int


class PerformanceReport(APIModel):
    overall_average_grade: Optional[float] = None
    grade_distribution: Dict[str, int]
    by_course: List[CoursePerformance]
