# /app/services/database_service.py

from datetime import date, datetime
from typing import List, Dict, Optional, Generator, Tuple, Any
import pandas as pd
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db
from app.db.base import User, Course, Class, Enrollment, Attendance, Assignment, Notification
from app.models.enums import (
    AssignmentStatus, AttendanceStatus, ClassStatus,
    CourseStatus, EnrollmentStatus, UserRole,
)

# --- Repository Imports ---
from .database_helpers.user_repository_sql import UserRepositorySQL
from .database_helpers.catalog_repository_sql import CatalogRepositorySQL
from .database_helpers.enrollment_repository_sql import EnrollmentRepositorySQL
from .database_helpers.attendance_repository_sql import AttendanceRepositorySQL
from .database_helpers.assignment_repository_sql import AssignmentRepositorySQL
from .database_helpers.notification_repository_sql import NotificationRepositorySQL

ENROLLMENT_COLUMNS = ["id", "student_id", "course_id", "status", "progress", "grade", "enrolled_at"]
ATTENDANCE_COLUMNS = ["id", "student_id", "class_id", "status", "day"]


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        A single facade over every SQL repository. Services only ever talk to
        this object, never to a Session directly.
        """
        self.db = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.catalog_repo = CatalogRepositorySQL(db_session)
        self.enrollment_repo = EnrollmentRepositorySQL(db_session)
        self.attendance_repo = AttendanceRepositorySQL(db_session)
        self.assignment_repo = AssignmentRepositorySQL(db_session)
        self.notification_repo = NotificationRepositorySQL(db_session)

    def rollback(self) -> None:
        """Discards a failed unit of work so the session can be reused."""
        self.db.rollback()

    # --- USER METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: str) -> Optional[User]: return self.user_repo.get_user_by_id(user_id)
    def get_active_user_by_id(self, user_id: str) -> Optional[User]: return self.user_repo.get_active_user_by_id(user_id)
    def get_user_by_email(self, email: str) -> Optional[User]: return self.user_repo.get_user_by_email(email)
    def add_user(self, user_record: Dict) -> User: return self.user_repo.add_user(user_record)
    def update_user(self, user: User, update_data: Dict) -> User: return self.user_repo.update_user(user, update_data)
    def list_users(self, page: int, limit: int, role: Optional[UserRole] = None, is_active: Optional[bool] = None, search: Optional[str] = None) -> Tuple[List[User], Dict[str, Any]]:
        return self.user_repo.list_users(page, limit, role=role, is_active=is_active, search=search)
    def count_users(self, created_since: Optional[datetime] = None, logged_in_since: Optional[datetime] = None) -> int:
        return self.user_repo.count_users(created_since, logged_in_since)
    def count_users_by_role(self) -> List[Tuple[UserRole, int]]: return self.user_repo.count_users_by_role()
    def get_children(self, parent_id: str) -> List[User]: return self.user_repo.get_children(parent_id)
    def get_child(self, parent_id: str, child_id: str) -> Optional[User]: return self.user_repo.get_child(parent_id, child_id)

    # --- COURSE METHODS (DELEGATED) ---
    def get_course_by_id(self, course_id: str) -> Optional[Course]: return self.catalog_repo.get_course_by_id(course_id)
    def get_course_by_code(self, code: str) -> Optional[Course]: return self.catalog_repo.get_course_by_code(code)
    def add_course(self, course_record: Dict, instructors: List[User]) -> Course: return self.catalog_repo.add_course(course_record, instructors)
    def update_course(self, course: Course, update_data: Dict) -> Course: return self.catalog_repo.update_course(course, update_data)
    def add_course_instructor(self, course: Course, instructor: User) -> Course: return self.catalog_repo.add_instructor(course, instructor)
    def list_courses(self, page: int, limit: int, **filters) -> Tuple[List[Course], Dict[str, Any]]: return self.catalog_repo.list_courses(page, limit, **filters)
    def get_courses_for_user(self, user_id: str) -> List[Tuple[Course, int]]: return self.catalog_repo.get_courses_for_user(user_id)
    def get_courses_taught_by(self, user_id: str) -> List[Course]: return self.catalog_repo.get_courses_taught_by(user_id)
    def get_courses_by_ids(self, course_ids: List[str]) -> List[Course]: return self.catalog_repo.get_courses_by_ids(course_ids)
    def count_courses(self, status: Optional[CourseStatus] = None, created_since: Optional[datetime] = None) -> int:
        return self.catalog_repo.count_courses(status, created_since)
    def get_all_courses_with_enrollment_counts(self) -> List[Tuple[Course, int]]: return self.catalog_repo.get_all_courses_with_enrollment_counts()
    def count_classes_by_status(self, course_id: str) -> List[Tuple[ClassStatus, int]]: return self.catalog_repo.count_classes_by_status(course_id)

    # --- CLASS METHODS (DELEGATED) ---
    def get_class_by_id(self, class_id: str) -> Optional[Class]: return self.catalog_repo.get_class_by_id(class_id)
    def add_class(self, class_record: Dict) -> Class: return self.catalog_repo.add_class(class_record)
    def update_class(self, class_obj: Class, update_data: Dict) -> Class: return self.catalog_repo.update_class(class_obj, update_data)
    def list_classes(self, page: int, limit: int, **filters) -> Tuple[List[Class], Dict[str, Any]]: return self.catalog_repo.list_classes(page, limit, **filters)
    def get_classes_by_instructor(self, instructor_id: str) -> List[Class]: return self.catalog_repo.get_classes_by_instructor(instructor_id)
    def get_classes_for_course(self, course_id: str) -> List[Class]: return self.catalog_repo.get_classes_for_course(course_id)
    def get_upcoming_classes_for_courses(self, course_ids: List[str], now: datetime, limit: int = 5) -> List[Class]:
        return self.catalog_repo.get_upcoming_classes_for_courses(course_ids, now, limit)
    def count_upcoming_classes_for_instructor(self, instructor_id: str, now: datetime) -> int:
        return self.catalog_repo.count_upcoming_classes_for_instructor(instructor_id, now)
    def find_conflicting_class(self, course_id: str, instructor_id: str, start_time: datetime, end_time: datetime, exclude_class_id: Optional[str] = None) -> Optional[Class]:
        return self.catalog_repo.find_conflicting_class(course_id, instructor_id, start_time, end_time, exclude_class_id)

    # --- ENROLLMENT LEDGER METHODS (DELEGATED) ---
    def get_enrollment(self, student_id: str, course_id: str) -> Optional[Enrollment]: return self.enrollment_repo.get_enrollment(student_id, course_id)
    def create_enrollment(self, enrollment_record: Dict) -> Enrollment: return self.enrollment_repo.create_enrollment(enrollment_record)
    def get_enrollments_for_student(self, student_id: str) -> List[Enrollment]: return self.enrollment_repo.get_enrollments_for_student(student_id)
    def get_active_enrollments_for_courses(self, course_ids: List[str]) -> List[Enrollment]: return self.enrollment_repo.get_active_enrollments_for_courses(course_ids)
    def get_enrolled_course_ids(self, student_id: str, status: Optional[EnrollmentStatus] = None) -> List[str]:
        return self.enrollment_repo.get_enrolled_course_ids(student_id, status)
    def get_roster_enrollments(self, course_id: str) -> List[Enrollment]: return self.enrollment_repo.get_roster_enrollments(course_id)
    def count_enrollments(self, course_id: Optional[str] = None) -> int: return self.enrollment_repo.count_enrollments(course_id)
    def count_distinct_students(self, course_ids: List[str]) -> int: return self.enrollment_repo.count_distinct_students(course_ids)
    def get_recent_enrollments(self, limit: int = 5, course_ids: Optional[List[str]] = None) -> List[Enrollment]:
        return self.enrollment_repo.get_recent_enrollments(limit, course_ids)
    def recount_course_enrollments(self, course_id: str) -> int: return self.enrollment_repo.recount_course_enrollments(course_id)

    # --- ATTENDANCE LEDGER METHODS (DELEGATED) ---
    def get_attendance_by_id(self, attendance_id: str) -> Optional[Attendance]: return self.attendance_repo.get_attendance_by_id(attendance_id)
    def find_attendance_for_day(self, class_id: str, student_id: str, day: date) -> Optional[Attendance]:
        return self.attendance_repo.find_attendance_for_day(class_id, student_id, day)
    def add_attendance(self, attendance_record: Dict) -> Attendance: return self.attendance_repo.add_attendance(attendance_record)
    def update_attendance(self, record: Attendance, update_data: Dict) -> Attendance: return self.attendance_repo.update_attendance(record, update_data)
    def get_attendance_for_class_day(self, class_id: str, day: date) -> List[Attendance]: return self.attendance_repo.get_attendance_for_class_day(class_id, day)
    def list_attendance(self, page: int, limit: int, **filters) -> Tuple[List[Attendance], Dict[str, Any]]: return self.attendance_repo.list_attendance(page, limit, **filters)
    def count_attendance_by_status(self, student_id: Optional[str] = None) -> List[Tuple[AttendanceStatus, int]]:
        return self.attendance_repo.count_by_status(student_id)

    # --- ASSIGNMENT METHODS (DELEGATED) ---
    def get_assignment_by_id(self, assignment_id: str) -> Optional[Assignment]: return self.assignment_repo.get_assignment_by_id(assignment_id)
    def add_assignment(self, assignment_record: Dict) -> Assignment: return self.assignment_repo.add_assignment(assignment_record)
    def update_assignment(self, assignment: Assignment, update_data: Dict) -> Assignment: return self.assignment_repo.update_assignment(assignment, update_data)
    def append_assignment_resource(self, assignment: Assignment, resource: Dict) -> Assignment: return self.assignment_repo.append_resource(assignment, resource)
    def list_assignments(self, page: int, limit: int, **filters) -> Tuple[List[Assignment], Dict[str, Any]]: return self.assignment_repo.list_assignments(page, limit, **filters)
    def get_upcoming_assignments_for_courses(self, course_ids: List[str], now: datetime, limit: int = 3) -> List[Assignment]:
        return self.assignment_repo.get_upcoming_for_courses(course_ids, now, limit)
    def count_assignments_for_courses(self, course_ids: List[str], status: AssignmentStatus) -> int:
        return self.assignment_repo.count_by_status_for_courses(course_ids, status)

    # --- NOTIFICATION METHODS (DELEGATED) ---
    def add_notification(self, notification_record: Dict) -> Notification: return self.notification_repo.add_notification(notification_record)
    def get_notification_by_id(self, notification_id: str) -> Optional[Notification]: return self.notification_repo.get_notification_by_id(notification_id)
    def get_notifications_for_user(self, user_id: str, limit: int = 50) -> List[Notification]: return self.notification_repo.get_notifications_for_user(user_id, limit)
    def count_unread_notifications(self, user_id: str) -> int: return self.notification_repo.count_unread(user_id)
    def mark_notification_read(self, notification: Notification) -> Notification: return self.notification_repo.mark_read(notification)
    def mark_all_notifications_read(self, user_id: str) -> int: return self.notification_repo.mark_all_read(user_id)

    # --- REPORTING FRAMES ---
    def get_enrollments_as_dataframe(self, course_ids: Optional[List[str]] = None) -> pd.DataFrame:
        rows = self.enrollment_repo.get_enrollment_rows(course_ids)
        return pd.DataFrame([tuple(row) for row in rows], columns=ENROLLMENT_COLUMNS)

    def get_attendance_as_dataframe(self, course_ids: Optional[List[str]] = None, date_from: Optional[date] = None, date_to: Optional[date] = None) -> pd.DataFrame:
        rows = self.attendance_repo.get_attendance_rows(course_ids, date_from, date_to)
        return pd.DataFrame([tuple(row) for row in rows], columns=ATTENDANCE_COLUMNS)


# --- DEPENDENCY PROVIDER ---
def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService bound to the
    request's Session.
    """
    yield DatabaseService(db_session=db)
