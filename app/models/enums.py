# /app/models/enums.py

# --- Core Imports ---
from enum import Enum


# --- Lifecycle of every soft-deletable record ---
class RecordState(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


# --- Identity ---
class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    PARENT = "parent"


# --- Catalog ---
class CourseStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class ClassStatus(str, Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Classes in these states occupy their instructor's time slot.
BLOCKING_CLASS_STATUSES = (ClassStatus.SCHEDULED, ClassStatus.LIVE)


# --- Ledgers ---
class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    WITHDRAWN = "withdrawn"

class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


# --- Assignments ---
class AssignmentType(str, Enum):
    HOMEWORK = "homework"
    QUIZ = "quiz"
    EXAM = "exam"
    PROJECT = "project"
    LAB = "lab"
    ESSAY = "essay"

class AssignmentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"
    GRADED = "graded"


# --- Notifications ---
class NotificationType(str, Enum):
    GENERAL = "general"
    SCHEDULE = "schedule"
    ASSIGNMENT = "assignment"
    ENROLLMENT = "enrollment"
    ATTENDANCE = "attendance"
