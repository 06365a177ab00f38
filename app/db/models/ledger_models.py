# /app/db/models/ledger_models.py

"""
This module defines the SQLAlchemy ORM models for the two ledgers that carry
the platform's consistency rules: `Enrollment` and `Attendance`.

Both uniqueness rules live in the schema itself as composite UNIQUE
constraints. Application-level pre-checks only exist to return a friendlier
error; the constraints are what make concurrent writers safe.
"""

from sqlalchemy import (
    Column, String, Float, Boolean, Date, DateTime, ForeignKey, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base, enum_column
from app.models.enums import EnrollmentStatus, AttendanceStatus


class Enrollment(Base):
    """
    The link between a student and a course. At most one row per
    (student_id, course_id), enforced by `uq_enrollment_student_course`.
    """
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    id = Column(String, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(String, ForeignKey("courses.id"), nullable=False, index=True)
    instructor_id = Column(String, ForeignKey("users.id"), nullable=True)

    progress = Column(Float, nullable=False, default=0)
    grade = Column(Float, nullable=True)
    status = enum_column(EnrollmentStatus, nullable=False, default=EnrollmentStatus.ACTIVE, index=True)
    enrolled_at = Column(DateTime(timezone=True), server_default=func.now())

    student = relationship("User", back_populates="enrollments", foreign_keys=[student_id])
    instructor = relationship("User", foreign_keys=[instructor_id])
    course = relationship("Course", back_populates="enrollments")


class Attendance(Base):
    """
    One student's presence at one class on one calendar day.

    `date` keeps the exact marking timestamp while `day` holds its date part;
    the UNIQUE constraint is declared over `day` so that the truncation is
    applied identically for every writer. Rows are never deleted.
    """
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", "day", name="uq_attendance_student_class_day"),
    )

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    student_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    date = Column(DateTime(timezone=True), nullable=False)
    day = Column(Date, nullable=False, index=True)
    status = enum_column(AttendanceStatus, nullable=False)
    time_in = Column(DateTime(timezone=True), nullable=True)
    time_out = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    excuse_reason = Column(Text, nullable=True)
    excuse_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    class_ = relationship("Class", back_populates="attendance_records")
    student = relationship("User")
