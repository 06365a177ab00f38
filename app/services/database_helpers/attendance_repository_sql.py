# /app/services/database_helpers/attendance_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the `attendance`
ledger. Rows are only ever inserted and updated here, never deleted.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, InvalidInputError
from app.db.base import Attendance, Class
from app.models.enums import AttendanceStatus
from .query_helpers import paginate


class AttendanceRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_attendance_by_id(self, attendance_id: str) -> Optional[Attendance]:
        return self.db.query(Attendance).filter(Attendance.id == attendance_id).first()

    def find_attendance_for_day(self, class_id: str, student_id: str, day: date) -> Optional[Attendance]:
        return (
            self.db.query(Attendance)
            .filter(
                Attendance.class_id == class_id,
                Attendance.student_id == student_id,
                Attendance.day == day,
            )
            .first()
        )

    def add_attendance(self, record: Dict) -> Attendance:
        """
        Inserts one attendance row. The (student, class, day) UNIQUE constraint
        is the final word on duplicates; a violation becomes a conflict.
        """
        new_record = Attendance(**record)
        self.db.add(new_record)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Attendance already marked for this day") from e
        self.db.refresh(new_record)
        return new_record

    def update_attendance(self, record: Attendance, data: Dict) -> Attendance:
        for key, value in data.items():
            setattr(record, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError("Invalid update data") from e
        self.db.refresh(record)
        return record

    def get_attendance_for_class_day(self, class_id: str, day: date) -> List[Attendance]:
        return (
            self.db.query(Attendance)
            .options(joinedload(Attendance.student))
            .filter(Attendance.class_id == class_id, Attendance.day == day)
            .order_by(Attendance.date.asc())
            .all()
        )

    def list_attendance(
        self,
        page: int,
        limit: int,
        class_id: Optional[str] = None,
        student_id: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Tuple[List[Attendance], Dict[str, Any]]:
        query = self.db.query(Attendance).options(joinedload(Attendance.student))
        if class_id:
            query = query.filter(Attendance.class_id == class_id)
        if student_id:
            query = query.filter(Attendance.student_id == student_id)
        if status:
            query = query.filter(Attendance.status == status)
        if date_from:
            query = query.filter(Attendance.day >= date_from)
        if date_to:
            query = query.filter(Attendance.day <= date_to)
        return paginate(query.order_by(Attendance.date.desc()), page, limit)

    def count_by_status(self, student_id: Optional[str] = None) -> List[Tuple[AttendanceStatus, int]]:
        query = self.db.query(Attendance.status, func.count(Attendance.id))
        if student_id:
            query = query.filter(Attendance.student_id == student_id)
        return query.group_by(Attendance.status).all()

    def get_attendance_rows(
        self,
        course_ids: Optional[List[str]] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Tuple]:
        """Flat (id, student_id, class_id, status, day) rows for the reporting layer."""
        query = self.db.query(
            Attendance.id,
            Attendance.student_id,
            Attendance.class_id,
            Attendance.status,
            Attendance.day,
        )
        if course_ids is not None:
            query = query.join(Class, Class.id == Attendance.class_id).filter(Class.course_id.in_(course_ids))
        if date_from:
            query = query.filter(Attendance.day >= date_from)
        if date_to:
            query = query.filter(Attendance.day <= date_to)
        return query.all()
