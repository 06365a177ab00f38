# /app/db/models/assignment_models.py

from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..base_class import Base, SoftDeleteMixin, enum_column
from app.models.enums import AssignmentType, AssignmentStatus


class Assignment(SoftDeleteMixin, Base):
    """
    SQLAlchemy model representing a course (and optionally class) scoped task.

    `resources` and `rubric` are ordered lists of records whose shape is
    defined by `AssignmentResource` and `RubricCriterion` in
    `app.models.assignment_model`. Resources are append-only.
    """
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    instructions = Column(Text, nullable=True)

    course_id = Column(String, ForeignKey("courses.id"), nullable=False, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=True, index=True)
    creator_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    type = enum_column(AssignmentType, nullable=False, default=AssignmentType.HOMEWORK)
    status = enum_column(AssignmentStatus, nullable=False, default=AssignmentStatus.DRAFT, index=True)

    total_points = Column(Integer, nullable=False, default=100)
    passing_score = Column(Integer, nullable=False, default=60)
    weight = Column(Float, nullable=False, default=0)
    publish_date = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)

    allow_late_submissions = Column(Boolean, nullable=False, default=False)
    late_submission_penalty = Column(Float, nullable=False, default=0)
    allowed_file_types = Column(JSON, nullable=False, default=list)
    max_file_size = Column(Integer, nullable=False, default=10)
    max_files = Column(Integer, nullable=False, default=1)

    resources = Column(JSON, nullable=False, default=list)
    rubric = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    course = relationship("Course", back_populates="assignments")
    class_ = relationship("Class")
    creator = relationship("User")
