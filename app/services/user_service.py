# /app/services/user_service.py

"""
This service module holds the business logic for accounts and the directory:
registration and login, profile updates, the admin user list, the teacher's
view of their students, and the parent-child link.

Every function receives the `DatabaseService` facade and, where the operation
is caller-sensitive, the authenticated `User` row.
"""

import uuid
from collections import OrderedDict
from typing import Dict, List, Optional

from ..core import security
from ..core.app_logger import get_logger
from ..core.exceptions import (
    ConflictError, ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError,
)
from ..db.base import User
from ..models import user_model
from ..models.enums import UserRole
from .database_helpers.query_helpers import settable_fields, utc_now
from .database_service import DatabaseService

logger = get_logger(__name__)


# --- Registration & Login ---

def create_user(db: DatabaseService, user: user_model.UserCreate) -> User:
    """
    Creates a new account. The email is stored lower-cased and the password
    only ever as a hash.
    """
    email = user.email.lower()
    if db.get_user_by_email(email):
        logger.warning("Registration rejected, email already in use: %s", email)
        raise InvalidInputError("User already exists with this email")

    record = user.model_dump(exclude={"password"})
    record.update({
        "id": f"usr_{uuid.uuid4().hex[:12]}",
        "email": email,
        "hashed_password": security.hash_password(user.password),
    })
    new_user = db.add_user(record)
    logger.info("Registered user %s with role %s", new_user.id, new_user.role.value)
    return new_user


def authenticate_user(db: DatabaseService, email: str, password: str) -> Optional[User]:
    """Returns the user when the credentials match, otherwise None."""
    user = db.get_user_by_email(email)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user


def login(db: DatabaseService, email: str, password: str) -> str:
    user = authenticate_user(db, email=email, password=password)
    if not user:
        raise UnauthorizedError("Incorrect email or password")
    if not user.is_active:
        raise UnauthorizedError("User account is deactivated")
    db.update_user(user, {"last_login": utc_now()})
    return security.create_access_token(subject=user.id)


# --- Directory ---

def list_users(
    db: DatabaseService,
    page: int,
    limit: int,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
) -> user_model.UserListResponse:
    users, pagination = db.list_users(page, limit, role=role, is_active=is_active, search=search)
    return user_model.UserListResponse(
        users=[user_model.User.model_validate(u) for u in users],
        pagination=pagination,
    )


def get_user_stats(db: DatabaseService) -> List[user_model.RoleCount]:
    counts = dict(db.count_users_by_role())
    # Every role is reported, including those with no users yet.
    return [user_model.RoleCount(role=role, total=counts.get(role, 0)) for role in UserRole]


def get_user(db: DatabaseService, user_id: str) -> User:
    user = db.get_user_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _ensure_self_or_admin(user_id: str, current_user: User) -> None:
    if current_user.id != user_id and current_user.role != UserRole.ADMIN:
        raise ForbiddenError("Not authorized to update this user")


def update_user(
    db: DatabaseService,
    user_id: str,
    user_update: user_model.UserUpdate,
    current_user: User,
) -> User:
    _ensure_self_or_admin(user_id, current_user)
    user = get_user(db, user_id)
    update_data = settable_fields(User, user_update.model_dump(exclude_unset=True))
    if not update_data:
        raise InvalidInputError("No update data provided.")
    return db.update_user(user, update_data)


def change_role(db: DatabaseService, user_id: str, role: UserRole) -> User:
    user = get_user(db, user_id)
    updated = db.update_user(user, {"role": role})
    logger.info("Changed role of user %s to %s", user_id, role.value)
    return updated


def deactivate_user(db: DatabaseService, user_id: str, current_user: User) -> None:
    """Soft delete. The row stays, its lifecycle state moves to archived."""
    if user_id == current_user.id:
        raise InvalidInputError("You cannot delete your own account")
    user = get_user(db, user_id)
    user.archive()
    db.update_user(user, {})
    logger.info("User %s deactivated by %s", user_id, current_user.id)


# --- Teacher & Parent Views ---

def get_my_students(db: DatabaseService, teacher: User) -> user_model.MyStudentsResponse:
    """
    Students with an active enrollment in any course the teacher teaches,
    each listed once with all the courses they share with the teacher.
    """
    course_ids = [course.id for course in db.get_courses_taught_by(teacher.id)]
    grouped: "OrderedDict[str, Dict]" = OrderedDict()
    for enrollment in db.get_active_enrollments_for_courses(course_ids):
        student = enrollment.student
        if not student.is_active:
            continue
        entry = grouped.setdefault(student.id, {
            "id": student.id,
            "first_name": student.first_name,
            "last_name": student.last_name,
            "email": student.email,
            "avatar": student.avatar,
            "courses": [],
            "enrollment_date": enrollment.enrolled_at,
        })
        entry["courses"].append({
            "id": enrollment.course.id,
            "title": enrollment.course.title,
            "progress": enrollment.progress,
            "grade": enrollment.grade,
        })

    students = [user_model.TeacherStudent(**entry) for entry in grouped.values()]
    return user_model.MyStudentsResponse(students=students, count=len(students))


def link_child(db: DatabaseService, parent: User, student_email: str) -> User:
    child = db.get_user_by_email(student_email)
    if not child or not child.is_active:
        raise NotFoundError("No student found with this email")
    if child.role != UserRole.STUDENT:
        raise InvalidInputError("Only student accounts can be linked")
    if child.parent_id:
        raise ConflictError("This student is already linked to a parent")
    linked = db.update_user(child, {"parent_id": parent.id})
    logger.info("Linked student %s to parent %s", child.id, parent.id)
    return linked
