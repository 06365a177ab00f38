# /app/models/attendance_model.py

# --- Core Imports ---
from datetime import date as date_type, datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, Field

from .common_model import APIModel, Pagination
from .enums import AttendanceStatus
from .user_model import UserSummary


# --- Request Models ---

class AttendanceMark(APIModel):
    class_id: str
    student_id: str
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    notes: Optional[str] = None
    date: Optional[date_type] = Field(
        default=None,
        description="The calendar day being marked. Defaults to today.",
    )


class BulkAttendanceItem(APIModel):
    student_id: str
    status: AttendanceStatus
    notes: Optional[str] = None


class BulkAttendanceRequest(APIModel):
    class_id: str
    # `attendanceData` is the field name older web clients send.
    records: List[BulkAttendanceItem] = Field(
        ..., validation_alias=AliasChoices("records", "attendanceData", "attendance_data")
    )
    date: Optional[date_type] = None


class AttendanceUpdate(APIModel):
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None
    excuse_reason: Optional[str] = None


class ExcuseDecision(APIModel):
    approved: bool


# --- Response Models ---

class Attendance(APIModel):
    id: str
    class_id: str
    student_id: str
    date: datetime
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    notes: Optional[str] = None
    excuse_reason: Optional[str] = None
    excuse_approved: bool


class AttendanceWithStudent(Attendance):
    student: Optional[UserSummary] = None


class AttendanceListResponse(APIModel):
    attendance: List[AttendanceWithStudent]
    pagination: Pagination


class BulkSucceeded(APIModel):
    student_id: str


class BulkFailed(APIModel):
    student_id: str
    error: str


class BulkAttendanceResult(APIModel):
    # Serialised as `success`, the key existing clients read.
    succeeded: List[BulkSucceeded] = Field(default_factory=list, alias="success")
    failed: List[BulkFailed] = Field(default_factory=list)


class RosterClass(APIModel):
    id: str
    title: str
    start_time: Optional[datetime] = None


class RosterEntry(APIModel):
    student: UserSummary
    attendance: Optional[Attendance] = None


class ClassRoster(APIModel):
    class_: RosterClass = Field(..., alias="class")
    date: date_type
    roster: List[RosterEntry]


class ClassAttendanceResponse(APIModel):
    class_: RosterClass = Field(..., alias="class")
    date: date_type
    attendance: List[AttendanceWithStudent]


class StudentAttendanceStats(APIModel):
    student_id: str
    total_records: int
    by_status: Dict[str, int]
    attendance_rate: float = Field(
        ..., description="Share of records counted as attended (present, late or excused), in percent."
    )
