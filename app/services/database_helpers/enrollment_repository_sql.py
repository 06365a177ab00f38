# /app/services/database_helpers/enrollment_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the `enrollments`
table, including the one multi-statement transaction of the platform:
inserting an Enrollment and bumping `Course.total_enrollments` together.
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError
from app.db.base import Course, Enrollment, User
from app.models.enums import EnrollmentStatus, RecordState


class EnrollmentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_enrollment(self, student_id: str, course_id: str) -> Optional[Enrollment]:
        return (
            self.db.query(Enrollment)
            .filter(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
            .first()
        )

    def create_enrollment(self, record: Dict) -> Enrollment:
        """
        Inserts the Enrollment and increments the course counter in a single
        transaction. The counter update is a SQL expression, so concurrent
        enrollments never lose an increment. If the UNIQUE constraint rejects
        the row, the whole transaction is rolled back and nothing persists.
        """
        new_enrollment = Enrollment(**record)
        self.db.add(new_enrollment)
        try:
            self.db.flush()
            (
                self.db.query(Course)
                .filter(Course.id == record["course_id"])
                .update({Course.total_enrollments: Course.total_enrollments + 1}, synchronize_session=False)
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Already enrolled in this course") from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(new_enrollment)
        return new_enrollment

    def get_enrollments_for_student(self, student_id: str) -> List[Enrollment]:
        return (
            self.db.query(Enrollment)
            .options(joinedload(Enrollment.course).selectinload(Course.instructors))
            .filter(Enrollment.student_id == student_id)
            .order_by(Enrollment.enrolled_at.desc())
            .all()
        )

    def get_active_enrollments_for_courses(self, course_ids: List[str]) -> List[Enrollment]:
        """Active enrollments of the given courses, with the student and course loaded."""
        if not course_ids:
            return []
        return (
            self.db.query(Enrollment)
            .options(joinedload(Enrollment.student), joinedload(Enrollment.course))
            .filter(
                Enrollment.course_id.in_(course_ids),
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
            .order_by(Enrollment.enrolled_at.asc())
            .all()
        )

    def get_enrolled_course_ids(self, student_id: str, status: Optional[EnrollmentStatus] = None) -> List[str]:
        query = self.db.query(Enrollment.course_id).filter(Enrollment.student_id == student_id)
        if status:
            query = query.filter(Enrollment.status == status)
        return [row[0] for row in query.all()]

    def count_enrollments(self, course_id: Optional[str] = None) -> int:
        query = self.db.query(Enrollment)
        if course_id:
            query = query.filter(Enrollment.course_id == course_id)
        return query.count()

    def count_distinct_students(self, course_ids: List[str]) -> int:
        if not course_ids:
            return 0
        return (
            self.db.query(func.count(func.distinct(Enrollment.student_id)))
            .filter(Enrollment.course_id.in_(course_ids))
            .scalar()
        ) or 0

    def get_recent_enrollments(self, limit: int = 5, course_ids: Optional[List[str]] = None) -> List[Enrollment]:
        query = self.db.query(Enrollment).options(
            joinedload(Enrollment.student), joinedload(Enrollment.course)
        )
        if course_ids is not None:
            if not course_ids:
                return []
            query = query.filter(Enrollment.course_id.in_(course_ids))
        return query.order_by(Enrollment.enrolled_at.desc()).limit(limit).all()

    def get_enrollment_rows(self, course_ids: Optional[List[str]] = None) -> List[Tuple]:
        """
        Flat (id, student_id, course_id, status, progress, grade, enrolled_at)
        rows for the reporting layer.
        """
        query = self.db.query(
            Enrollment.id,
            Enrollment.student_id,
            Enrollment.course_id,
            Enrollment.status,
            Enrollment.progress,
            Enrollment.grade,
            Enrollment.enrolled_at,
        )
        if course_ids is not None:
            query = query.filter(Enrollment.course_id.in_(course_ids))
        return query.all()

    def recount_course_enrollments(self, course_id: str) -> int:
        """
        Rewrites the course counter from the Enrollment rows in one UPDATE, so
        an enrollment committed meanwhile is counted rather than overwritten.
        """
        counted = (
            select(func.count(Enrollment.id))
            .where(Enrollment.course_id == course_id)
            .scalar_subquery()
        )
        self.db.query(Course).filter(Course.id == course_id).update(
            {Course.total_enrollments: counted}, synchronize_session=False
        )
        self.db.commit()
        return self.db.query(Course.total_enrollments).filter(Course.id == course_id).scalar()

    def get_roster_enrollments(self, course_id: str) -> List[Enrollment]:
        """
        One row per live student holding an *active* enrollment in the course.
        Withdrawn and completed enrollments never make it onto a roster. The
        (student, course) UNIQUE constraint guarantees no student repeats.
        """
        return (
            self.db.query(Enrollment)
            .join(User, User.id == Enrollment.student_id)
            .options(joinedload(Enrollment.student))
            .filter(
                Enrollment.course_id == course_id,
                Enrollment.status == EnrollmentStatus.ACTIVE,
                User.state == RecordState.ACTIVE,
            )
            .order_by(User.last_name.asc(), User.first_name.asc())
            .all()
        )
