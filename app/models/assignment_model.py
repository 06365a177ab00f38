# /app/models/assignment_model.py

# --- Core Imports ---
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field, model_validator

from .common_model import APIModel, Pagination
from .enums import AssignmentStatus, AssignmentType


# --- Structured list items (persisted as JSON lists on the assignment row) ---

class AssignmentResourceCreate(APIModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    file_url: Optional[str] = None
    external_link: Optional[str] = None

    @model_validator(mode="after")
    def needs_a_target(self):
        if not self.file_url and not self.external_link:
            raise ValueError("A resource needs either a fileUrl or an externalLink.")
        return self


class AssignmentResource(AssignmentResourceCreate):
    uploaded_by: str


class RubricCriterion(APIModel):
    criterion: str = Field(..., min_length=1)
    description: Optional[str] = None
    points: float = Field(..., ge=0)


# --- Request Models ---

class AssignmentCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    instructions: Optional[str] = None
    course_id: str = Field(..., validation_alias=AliasChoices("courseId", "course", "course_id"))
    class_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("classId", "class", "class_id"))
    type: AssignmentType = AssignmentType.HOMEWORK
    status: AssignmentStatus = AssignmentStatus.DRAFT
    total_points: int = Field(default=100, gt=0)
    passing_score: int = Field(default=60, ge=0)
    weight: float = Field(default=0, ge=0)
    publish_date: Optional[datetime] = None
    due_date: datetime
    allow_late_submissions: bool = False
    late_submission_penalty: float = Field(default=0, ge=0, le=100)
    allowed_file_types: List[str] = Field(default_factory=list)
    max_file_size: int = Field(default=10, gt=0)
    max_files: int = Field(default=1, gt=0)
    resources: List[AssignmentResourceCreate] = Field(default_factory=list)
    rubric: List[RubricCriterion] = Field(default_factory=list)


class AssignmentUpdate(APIModel):
    """Partial update. The course, the class and the creator cannot be changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[str] = None
    type: Optional[AssignmentType] = None
    status: Optional[AssignmentStatus] = None
    total_points: Optional[int] = Field(default=None, gt=0)
    passing_score: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    publish_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    allow_late_submissions: Optional[bool] = None
    late_submission_penalty: Optional[float] = Field(default=None, ge=0, le=100)
    allowed_file_types: Optional[List[str]] = None
    max_file_size: Optional[int] = Field(default=None, gt=0)
    max_files: Optional[int] = Field(default=None, gt=0)
    rubric: Optional[List[RubricCriterion]] = None


# --- Response Models ---

class AssignmentCourse(APIModel):
    id: str
    title: str
    code: str


class Assignment(APIModel):
    id: str
    title: str
    description: str
    instructions: Optional[str] = None
    course_id: str
    class_id: Optional[str] = None
    creator_id: str
    type: AssignmentType
    status: AssignmentStatus
    total_points: int
    passing_score: int
    weight: float
    publish_date: Optional[datetime] = None
    due_date: datetime
    allow_late_submissions: bool
    late_submission_penalty: float
    allowed_file_types: List[str]
    max_file_size: int
    max_files: int
    resources: List[AssignmentResource]
    rubric: List[RubricCriterion]
    is_active: bool
    created_at: Optional[datetime] = None
    course: Optional[AssignmentCourse] = None


class AssignmentListResponse(APIModel):
    assignments: List[Assignment]
    pagination: Pagination
