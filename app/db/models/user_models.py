# /app/db/models/user_models.py

"""
This module defines the SQLAlchemy ORM model for the `User` entity: every
student, teacher, parent and administrator of the platform.
"""

from sqlalchemy import Column, String, DateTime, Date, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base, SoftDeleteMixin, enum_column
from app.models.enums import UserRole


class User(SoftDeleteMixin, Base):
    """
    SQLAlchemy model representing a platform account.

    Users are never hard-deleted while referenced; deactivation archives the
    row. The parent link is a weak self-reference: archiving or removing a
    parent leaves the child row intact (`ON DELETE SET NULL`).
    """
    id = Column(String, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = enum_column(UserRole, nullable=False, default=UserRole.STUDENT, index=True)

    phone = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    avatar = Column(String, nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    parent_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    parent = relationship("User", remote_side=[id], back_populates="children")
    children = relationship("User", back_populates="parent")

    # Courses this user created (admin/teacher) and courses this user teaches.
    created_courses = relationship("Course", back_populates="creator", foreign_keys="Course.creator_id")
    taught_courses = relationship("Course", secondary="course_instructors", back_populates="instructors")

    enrollments = relationship("Enrollment", back_populates="student", foreign_keys="Enrollment.student_id")
    notifications = relationship("Notification", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
