# /app/models/user_model.py

# --- Core Imports ---
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common_model import APIModel, Pagination
from .enums import UserRole

# --- Model Definitions ---

class UserSummary(APIModel):
    """The small projection of a user embedded in other resources."""
    id: str
    first_name: str
    last_name: str
    email: str
    avatar: Optional[str] = None


class UserBase(APIModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: str
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None


class UserCreate(UserBase):
    """The registration payload."""
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.STUDENT

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return v.strip()


class UserUpdate(APIModel):
    """Profile update; all fields optional for partial updates."""
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    avatar: Optional[str] = None


class RoleChange(APIModel):
    role: UserRole


class LinkChildRequest(APIModel):
    student_email: EmailStr


class User(UserBase):
    """
    The full representation of a User resource as returned by the API.
    The password hash is never part of this contract.
    """
    id: str
    role: UserRole
    avatar: Optional[str] = None
    is_active: bool
    parent_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Token(BaseModel):
    # OAuth2 password-flow clients read these exact snake_case keys.
    access_token: str
    token_type: str = "bearer"


class RegistrationResponse(APIModel):
    user: User
    token: str


class UserListResponse(APIModel):
    users: List[User]
    pagination: Pagination


class RoleCount(APIModel):
    role: UserRole
    total: int


class StudentCourseProgress(APIModel):
    id: str
    title: str
    progress: float
    grade: Optional[float] = None


class TeacherStudent(UserSummary):
    """A student of the current teacher with every course they share."""
    courses: List[StudentCourseProgress]
    enrollment_date: Optional[datetime] = None


class MyStudentsResponse(APIModel):
    students: List[TeacherStudent]
    count: int
