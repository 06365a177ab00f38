# /app/db/models/course_models.py

"""
This module defines the SQLAlchemy ORM models for the catalog: `Course`, the
`course_instructors` many-to-many association, and `Class`, a scheduled
session of a course.
"""

from sqlalchemy import (
    Column, String, Integer, Float, Boolean, DateTime, ForeignKey, JSON, Table, Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base, SoftDeleteMixin, enum_column
from app.models.enums import CourseLevel, CourseStatus, ClassStatus


# Plain association table: a course can have several instructors and a
# teacher can teach several courses.
course_instructors = Table(
    "course_instructors",
    Base.metadata,
    Column("course_id", String, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Course(SoftDeleteMixin, Base):
    """
    SQLAlchemy model representing a catalog entry.

    `total_enrollments` is a denormalised counter. It is only ever incremented
    inside the same transaction that inserts an Enrollment row; see
    `EnrollmentRepositorySQL.create_enrollment`.
    """
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    short_description = Column(String, nullable=True)
    code = Column(String, unique=True, index=True, nullable=False)
    credits = Column(Integer, nullable=False, default=3)
    level = enum_column(CourseLevel, nullable=False, default=CourseLevel.BEGINNER)
    objectives = Column(JSON, nullable=False, default=list)
    duration_weeks = Column(Integer, nullable=False, default=12)

    is_free = Column(Boolean, nullable=False, default=False)
    price = Column(Float, nullable=False, default=0)
    currency = Column(String, nullable=False, default="GHS")
    max_students = Column(Integer, nullable=False, default=30)
    thumbnail = Column(String, nullable=True)

    status = enum_column(CourseStatus, nullable=False, default=CourseStatus.DRAFT, index=True)
    total_enrollments = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    creator_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    creator = relationship("User", back_populates="created_courses", foreign_keys=[creator_id])
    instructors = relationship("User", secondary=course_instructors, back_populates="taught_courses")

    classes = relationship("Class", back_populates="course")
    enrollments = relationship("Enrollment", back_populates="course")
    assignments = relationship("Assignment", back_populates="course")

    def has_instructor(self, user_id: str) -> bool:
        return any(instructor.id == user_id for instructor in self.instructors)


class Class(SoftDeleteMixin, Base):
    """
    SQLAlchemy model representing one scheduled session of a course, taught by
    a single instructor over the half-open window [start_time, end_time).
    Cancelling a class archives it and sets its status to `cancelled`.
    """
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    course_id = Column(String, ForeignKey("courses.id"), nullable=False, index=True)
    instructor_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_pattern = Column(String, nullable=True)
    recurrence_end_date = Column(DateTime(timezone=True), nullable=True)

    location = Column(String, nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    meeting_link = Column(String, nullable=True)
    max_capacity = Column(Integer, nullable=False, default=25)
    agenda = Column(Text, nullable=True)

    status = enum_column(ClassStatus, nullable=False, default=ClassStatus.SCHEDULED, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    course = relationship("Course", back_populates="classes")
    instructor = relationship("User")
    attendance_records = relationship("Attendance", back_populates="class_")
