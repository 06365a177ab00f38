# /app/models/enrollment_model.py

# --- Core Imports ---
from datetime import datetime
from typing import Optional

from pydantic import Field

from .common_model import APIModel
from .course_model import CourseSummary
from .enums import EnrollmentStatus

# --- Model Definitions ---

class EnrollmentCreate(APIModel):
    """
    The enroll payload. The student is always the authenticated user; the
    course id may also come from the URL (`POST /api/courses/{id}/enroll`).
    """
    course_id: Optional[str] = None
    instructor_id: Optional[str] = Field(
        default=None,
        description="Must be one of the course's instructors when provided.",
    )


class Enrollment(APIModel):
    id: str
    student_id: str
    course_id: str
    instructor_id: Optional[str] = None
    progress: float
    grade: Optional[float] = None
    status: EnrollmentStatus
    enrolled_at: Optional[datetime] = None


class EnrollmentWithCourse(Enrollment):
    course: CourseSummary


class EnrollmentSnapshot(APIModel):
    """The read-only projection returned by the enrollment status check."""
    id: str
    enrolled_at: Optional[datetime] = None
    progress: float
    status: EnrollmentStatus


class EnrollmentStatusResponse(APIModel):
    is_enrolled: bool
    enrollment: Optional[EnrollmentSnapshot] = None
