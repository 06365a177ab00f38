# /app/models/course_model.py

# --- Core Imports ---
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from .common_model import APIModel, Pagination
from .enums import CourseLevel, CourseStatus, ClassStatus
from .user_model import UserSummary


COURSE_CODE_PATTERN = r"^[A-Za-z0-9\-]+$"

# --- Course Models ---

class CourseCreate(APIModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    short_description: Optional[str] = None
    code: str = Field(..., min_length=3, max_length=20, pattern=COURSE_CODE_PATTERN)
    credits: int = Field(default=3, ge=0)
    level: CourseLevel = CourseLevel.BEGINNER
    objectives: List[str] = Field(default_factory=list)
    duration_weeks: int = Field(default=12, gt=0)
    is_free: bool = False
    price: float = Field(default=0, ge=0)
    currency: str = "GHS"
    max_students: int = Field(default=30, gt=0)
    instructor_ids: List[str] = Field(default_factory=list)

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("code")
    @classmethod
    def normalise_code(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def free_courses_cost_nothing(self):
        if self.is_free:
            self.price = 0
        return self


class CourseUpdate(APIModel):
    """
    Partial update. Only these fields can be changed after creation; the code,
    the creator and the enrollment counter are deliberately absent.
    """
    title: Optional[str] = Field(default=None, min_length=5, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    short_description: Optional[str] = None
    credits: Optional[int] = Field(default=None, ge=0)
    level: Optional[CourseLevel] = None
    objectives: Optional[List[str]] = None
    duration_weeks: Optional[int] = Field(default=None, gt=0)
    is_free: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None
    max_students: Optional[int] = Field(default=None, gt=0)
    status: Optional[CourseStatus] = None
    thumbnail: Optional[str] = None


class AddInstructorRequest(APIModel):
    instructor_id: str


class Course(APIModel):
    id: str
    title: str
    description: str
    short_description: Optional[str] = None
    code: str
    credits: int
    level: CourseLevel
    objectives: List[str] = Field(default_factory=list)
    duration_weeks: int
    is_free: bool
    price: float
    currency: str
    max_students: int
    thumbnail: Optional[str] = None
    status: CourseStatus
    total_enrollments: int
    is_active: bool
    creator_id: str
    created_at: Optional[datetime] = None
    instructors: List[UserSummary] = Field(default_factory=list)


class CourseSummary(APIModel):
    """The course projection embedded in enrollments, classes and assignments."""
    id: str
    title: str
    code: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    instructors: List[UserSummary] = Field(default_factory=list)


class MyCourse(Course):
    enrollment_count: int = Field(..., description="Live count of Enrollment rows for the course.")


class CourseListResponse(APIModel):
    courses: List[Course]
    pagination: Pagination


class ClassBrief(APIModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    status: ClassStatus
    instructor: Optional[UserSummary] = None


class CourseClassStats(APIModel):
    total_classes: int
    upcoming_classes: int
    completed_classes: int


class CourseDetails(APIModel):
    course: Course
    classes: List[ClassBrief]
    stats: CourseClassStats


class CourseStats(APIModel):
    total_enrollments: int = Field(..., description="The maintained counter stored on the course.")
    counted_enrollments: int = Field(..., description="The number of Enrollment rows, counted on read.")
    classes_by_status: Dict[str, int]


class CounterCorrection(APIModel):
    course_id: str
    code: str
    stored: int
    actual: int


class ReconciliationReport(APIModel):
    checked: int
    corrected: List[CounterCorrection]
