# /app/models/dashboard_model.py

# --- Core Imports ---
# Import the necessary components from Pydantic for data modeling.
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common_model import APIModel
from .enrollment_model import EnrollmentWithCourse
from .user_model import UserSummary

# --- Shared Building Blocks ---

class UpcomingClass(APIModel):
    id: str
    title: str
    start_time: datetime
    course_title: str


class UpcomingAssignment(APIModel):
    id: str
    title: str
    due_date: datetime
    course_title: str


class ActivityItem(APIModel):
    type: str = "enrollment"
    description: str
    time: Optional[datetime] = None


# --- Student Dashboard ---

class StudentDashboardStats(APIModel):
    total_courses: int
    completed_courses: int
    average_grade: float
    total_credits: int
    attendance_rate: int = Field(..., description="Percent of records marked present or late; 100 when no records exist.")
    pending_assignments_count: int


class StudentDashboard(APIModel):
    """
    Defines the data contract for the student home page: quick-info cards,
    the enrolled courses, and what is coming up next.
    """
    stats: StudentDashboardStats
    enrolled_courses: List[EnrollmentWithCourse]
    upcoming_classes: List[UpcomingClass]
    assignments: List[UpcomingAssignment]


# --- Teacher Dashboard ---

class TeacherDashboardStats(APIModel):
    total_courses: int
    total_students: int
    pending_grading: int
    upcoming_classes: int


class TeacherDashboard(APIModel):
    stats: TeacherDashboardStats
    recent_activity: List[ActivityItem]


# --- Admin Dashboard ---

class AdminDashboardStats(APIModel):
    total_users: int = Field(..., examples=[120])
    total_students: int
    total_teachers: int
    total_parents: int
    total_courses: int
    published_courses: int
    draft_courses: int
    total_enrollments: int


class AdminDashboard(APIModel):
    stats: AdminDashboardStats
    recent_activity: List[ActivityItem]


# --- Parent Dashboard ---

class ChildCourse(APIModel):
    id: str
    name: str
    progress: float
    grade: Optional[float] = None


class ChildOverview(APIModel):
    id: str
    name: str
    avatar: Optional[str] = None
    attendance_rate: int
    courses: List[ChildCourse]
    next_class: Optional[UpcomingClass] = None


class ParentDashboardStats(APIModel):
    total_children: int
    total_courses: int
    average_grade: float
    attendance_rate: int


class ParentDashboard(APIModel):
    stats: ParentDashboardStats
    children: List[ChildOverview]


class ChildDetail(APIModel):
    """The student dashboard of one child, as seen by their parent."""
    student: UserSummary
    stats: StudentDashboardStats
    enrolled_courses: List[EnrollmentWithCourse]
    upcoming_classes: List[UpcomingClass]
    assignments: List[UpcomingAssignment]
