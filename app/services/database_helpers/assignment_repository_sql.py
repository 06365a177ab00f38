# /app/services/database_helpers/assignment_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the `assignments`
table.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.attributes import flag_modified

from app.core.exceptions import InvalidInputError
from app.db.base import Assignment
from app.models.enums import AssignmentStatus, AssignmentType
from .query_helpers import live, paginate


class AssignmentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_assignment_by_id(self, assignment_id: str) -> Optional[Assignment]:
        return (
            live(self.db, Assignment)
            .options(selectinload(Assignment.course))
            .filter(Assignment.id == assignment_id)
            .first()
        )

    def add_assignment(self, record: Dict) -> Assignment:
        new_assignment = Assignment(**record)
        self.db.add(new_assignment)
        self.db.commit()
        self.db.refresh(new_assignment)
        return new_assignment

    def update_assignment(self, assignment: Assignment, data: Dict) -> Assignment:
        for key, value in data.items():
            setattr(assignment, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError("Invalid update data") from e
        self.db.refresh(assignment)
        return assignment

    def append_resource(self, assignment: Assignment, resource: Dict) -> Assignment:
        """
        Appends to the JSON list. The row is locked and re-read first, so two
        concurrent appends are serialised and neither entry is lost. A plain
        JSON column does not track mutation, so the attribute is flagged
        explicitly.
        """
        assignment = (
            self.db.query(Assignment)
            .filter(Assignment.id == assignment.id)
            .populate_existing()
            .with_for_update()
            .one()
        )
        assignment.resources = list(assignment.resources or []) + [resource]
        flag_modified(assignment, "resources")
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def list_assignments(
        self,
        page: int,
        limit: int,
        visible_course_ids: Optional[List[str]] = None,
        course_id: Optional[str] = None,
        class_id: Optional[str] = None,
        type: Optional[AssignmentType] = None,
        status: Optional[AssignmentStatus] = None,
        due_after: Optional[datetime] = None,
        due_before: Optional[datetime] = None,
    ) -> Tuple[List[Assignment], Dict[str, Any]]:
        """
        `visible_course_ids`, when given, restricts the listing to those
        courses. An empty list therefore yields an empty page.
        """
        query = live(self.db, Assignment).options(selectinload(Assignment.course))
        if visible_course_ids is not None:
            query = query.filter(Assignment.course_id.in_(visible_course_ids))
        if course_id:
            query = query.filter(Assignment.course_id == course_id)
        if class_id:
            query = query.filter(Assignment.class_id == class_id)
        if type:
            query = query.filter(Assignment.type == type)
        if status:
            query = query.filter(Assignment.status == status)
        if due_after:
            query = query.filter(Assignment.due_date >= due_after)
        if due_before:
            query = query.filter(Assignment.due_date < due_before)
        return paginate(query.order_by(Assignment.due_date.asc()), page, limit)

    def get_upcoming_for_courses(self, course_ids: List[str], now: datetime, limit: int = 3) -> List[Assignment]:
        if not course_ids:
            return []
        return (
            live(self.db, Assignment)
            .options(selectinload(Assignment.course))
            .filter(Assignment.course_id.in_(course_ids), Assignment.due_date >= now)
            .order_by(Assignment.due_date.asc())
            .limit(limit)
            .all()
        )

    def count_by_status_for_courses(self, course_ids: List[str], status: AssignmentStatus) -> int:
        if not course_ids:
            return 0
        return (
            live(self.db, Assignment)
            .filter(Assignment.course_id.in_(course_ids), Assignment.status == status)
            .count()
        )
