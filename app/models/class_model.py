# /app/models/class_model.py

# --- Core Imports ---
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field, model_validator

from .common_model import APIModel, Pagination
from .enums import ClassStatus
from .user_model import UserSummary


class ClassCreate(APIModel):
    """
    The payload for scheduling a class. `course_id` and `instructor_id` are
    also accepted as `course` / `instructor`, the names older clients send.
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    course_id: str = Field(..., validation_alias=AliasChoices("courseId", "course", "course_id"))
    instructor_id: str = Field(..., validation_alias=AliasChoices("instructorId", "instructor", "instructor_id"))
    start_time: datetime
    end_time: datetime
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None
    recurrence_end_date: Optional[datetime] = None
    location: Optional[str] = None
    is_online: bool = False
    meeting_link: Optional[str] = None
    max_capacity: int = Field(default=25, gt=0)
    agenda: Optional[str] = None

    @model_validator(mode="after")
    def drop_unused_options(self):
        # Recurrence and meeting details only make sense when their switch is on.
        if not self.is_recurring:
            self.recurrence_pattern = None
            self.recurrence_end_date = None
        if not self.is_online:
            self.meeting_link = None
        return self


class ClassUpdate(APIModel):
    """Partial update. The course and the instructor cannot be changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[str] = None
    recurrence_end_date: Optional[datetime] = None
    location: Optional[str] = None
    is_online: Optional[bool] = None
    meeting_link: Optional[str] = None
    max_capacity: Optional[int] = Field(default=None, gt=0)
    agenda: Optional[str] = None


class ClassStatusUpdate(APIModel):
    status: ClassStatus


class ClassCourse(APIModel):
    id: str
    title: str
    code: str


class Class(APIModel):
    id: str
    title: str
    description: Optional[str] = None
    course_id: str
    instructor_id: str
    start_time: datetime
    end_time: datetime
    is_recurring: bool
    recurrence_pattern: Optional[str] = None
    recurrence_end_date: Optional[datetime] = None
    location: Optional[str] = None
    is_online: bool
    meeting_link: Optional[str] = None
    max_capacity: int
    agenda: Optional[str] = None
    status: ClassStatus
    is_active: bool
    course: Optional[ClassCourse] = None
    instructor: Optional[UserSummary] = None


class ClassListResponse(APIModel):
    classes: List[Class]
    pagination: Pagination
