# /app/services/database_helpers/catalog_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the catalog: the
`courses` table with its instructor association, and the `classes` table.

Default lookups go through `live()`, so archived courses and cancelled
classes are invisible unless a method says otherwise.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import ConflictError, InvalidInputError
from app.db.base import Class, Course, Enrollment, User
from app.models.enums import BLOCKING_CLASS_STATUSES, ClassStatus, CourseLevel, CourseStatus
from .query_helpers import live, paginate


class CatalogRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Course Methods ---

    def get_course_by_id(self, course_id: str) -> Optional[Course]:
        return (
            live(self.db, Course)
            .options(selectinload(Course.instructors))
            .filter(Course.id == course_id)
            .first()
        )

    def get_course_by_code(self, code: str) -> Optional[Course]:
        """Codes are unique across active and archived courses alike."""
        return self.db.query(Course).filter(Course.code == code.upper()).first()

    def add_course(self, record: Dict, instructors: List[User]) -> Course:
        new_course = Course(**record)
        new_course.instructors = list(instructors)
        self.db.add(new_course)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Course code already exists") from e
        self.db.refresh(new_course)
        return new_course

    def update_course(self, course: Course, data: Dict) -> Course:
        for key, value in data.items():
            setattr(course, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError("Invalid update data") from e
        self.db.refresh(course)
        return course

    def add_instructor(self, course: Course, instructor: User) -> Course:
        if not course.has_instructor(instructor.id):
            course.instructors.append(instructor)
            self.db.commit()
            self.db.refresh(course)
        return course

    def list_courses(
        self,
        page: int,
        limit: int,
        status: Optional[CourseStatus] = None,
        level: Optional[CourseLevel] = None,
        instructor_id: Optional[str] = None,
        is_free: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Course], Dict[str, Any]]:
        query = live(self.db, Course).options(selectinload(Course.instructors))
        if status:
            query = query.filter(Course.status == status)
        if level:
            query = query.filter(Course.level == level)
        if instructor_id:
            query = query.filter(Course.instructors.any(User.id == instructor_id))
        if is_free is not None:
            query = query.filter(Course.is_free == is_free)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Course.title).like(pattern),
                func.lower(Course.description).like(pattern),
                func.lower(Course.code).like(pattern),
            ))
        return paginate(query.order_by(Course.created_at.desc()), page, limit)

    def get_courses_for_user(self, user_id: str) -> List[Tuple[Course, int]]:
        """
        Courses created by or taught by the user, each paired with the live
        number of Enrollment rows.
        """
        enrollment_counts = (
            self.db.query(Enrollment.course_id, func.count(Enrollment.id).label("total"))
            .group_by(Enrollment.course_id)
            .subquery()
        )
        return (
            live(self.db, Course)
            .options(selectinload(Course.instructors))
            .outerjoin(enrollment_counts, enrollment_counts.c.course_id == Course.id)
            .filter(or_(Course.creator_id == user_id, Course.instructors.any(User.id == user_id)))
            .with_entities(Course, func.coalesce(enrollment_counts.c.total, 0))
            .order_by(Course.created_at.desc())
            .all()
        )

    def get_courses_taught_by(self, user_id: str) -> List[Course]:
        return live(self.db, Course).filter(Course.instructors.any(User.id == user_id)).all()

    def count_courses(self, status: Optional[CourseStatus] = None, created_since: Optional[datetime] = None) -> int:
        query = self.db.query(Course)
        if status:
            query = query.filter(Course.status == status)
        if created_since:
            query = query.filter(Course.created_at >= created_since)
        return query.count()

    def get_courses_by_ids(self, course_ids: List[str]) -> List[Course]:
        if not course_ids:
            return []
        return self.db.query(Course).filter(Course.id.in_(course_ids)).all()

    def get_all_courses_with_enrollment_counts(self) -> List[Tuple[Course, int]]:
        """Every course, archived ones included, with its real Enrollment count."""
        return (
            self.db.query(Course, func.count(Enrollment.id))
            .outerjoin(Enrollment, Enrollment.course_id == Course.id)
            .group_by(Course.id)
            .all()
        )

    def count_classes_by_status(self, course_id: str) -> List[Tuple[ClassStatus, int]]:
        return (
            self.db.query(Class.status, func.count(Class.id))
            .filter(Class.course_id == course_id)
            .group_by(Class.status)
            .all()
        )

    # --- Class Methods ---

    def get_class_by_id(self, class_id: str) -> Optional[Class]:
        return (
            live(self.db, Class)
            .options(selectinload(Class.course), selectinload(Class.instructor))
            .filter(Class.id == class_id)
            .first()
        )

    def find_conflicting_class(
        self,
        course_id: str,
        instructor_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_class_id: Optional[str] = None,
    ) -> Optional[Class]:
        """
        Returns an active scheduled/live class of the same instructor in the
        same course whose [start, end) window overlaps the given one.
        """
        query = live(self.db, Class).filter(
            Class.course_id == course_id,
            Class.instructor_id == instructor_id,
            Class.status.in_(BLOCKING_CLASS_STATUSES),
            Class.start_time < end_time,
            Class.end_time > start_time,
        )
        if exclude_class_id:
            query = query.filter(Class.id != exclude_class_id)
        return query.first()

    def add_class(self, record: Dict) -> Class:
        new_class = Class(**record)
        self.db.add(new_class)
        self.db.commit()
        self.db.refresh(new_class)
        return new_class

    def update_class(self, class_obj: Class, data: Dict) -> Class:
        for key, value in data.items():
            setattr(class_obj, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError("Invalid update data") from e
        self.db.refresh(class_obj)
        return class_obj

    def list_classes(
        self,
        page: int,
        limit: int,
        course_id: Optional[str] = None,
        instructor_id: Optional[str] = None,
        status: Optional[ClassStatus] = None,
        is_online: Optional[bool] = None,
        starts_after: Optional[datetime] = None,
        starts_before: Optional[datetime] = None,
    ) -> Tuple[List[Class], Dict[str, Any]]:
        query = live(self.db, Class).options(selectinload(Class.course), selectinload(Class.instructor))
        if course_id:
            query = query.filter(Class.course_id == course_id)
        if instructor_id:
            query = query.filter(Class.instructor_id == instructor_id)
        if status:
            query = query.filter(Class.status == status)
        if is_online is not None:
            query = query.filter(Class.is_online == is_online)
        if starts_after:
            query = query.filter(Class.start_time >= starts_after)
        if starts_before:
            query = query.filter(Class.start_time <= starts_before)
        return paginate(query.order_by(Class.start_time.asc()), page, limit)

    def get_classes_by_instructor(self, instructor_id: str) -> List[Class]:
        return (
            live(self.db, Class)
            .options(selectinload(Class.course))
            .filter(Class.instructor_id == instructor_id)
            .order_by(Class.start_time.asc())
            .all()
        )

    def get_classes_for_course(self, course_id: str) -> List[Class]:
        return (
            live(self.db, Class)
            .options(selectinload(Class.instructor))
            .filter(Class.course_id == course_id)
            .order_by(Class.start_time.asc())
            .all()
        )

    def get_upcoming_classes_for_courses(self, course_ids: List[str], now: datetime, limit: int = 5) -> List[Class]:
        if not course_ids:
            return []
        return (
            live(self.db, Class)
            .options(selectinload(Class.course))
            .filter(Class.course_id.in_(course_ids), Class.start_time >= now)
            .order_by(Class.start_time.asc())
            .limit(limit)
            .all()
        )

    def count_upcoming_classes_for_instructor(self, instructor_id: str, now: datetime) -> int:
        return (
            live(self.db, Class)
            .filter(Class.instructor_id == instructor_id, Class.start_time >= now)
            .count()
        )
