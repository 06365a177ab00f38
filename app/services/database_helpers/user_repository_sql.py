# /app/services/database_helpers/user_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the `users` table:
accounts, the parent-child link, and the per-role directory lookups.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvalidInputError
from app.db.base import User
from app.models.enums import RecordState, UserRole
from .query_helpers import live, paginate


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Fetches a user by id, whether active or archived."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_active_user_by_id(self, user_id: str) -> Optional[User]:
        return live(self.db, User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def add_user(self, record: Dict) -> User:
        """Creates a new User record. A duplicate email surfaces as a conflict."""
        new_user = User(**record)
        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User already exists with this email") from e
        self.db.refresh(new_user)
        return new_user

    def update_user(self, user: User, data: Dict) -> User:
        for key, value in data.items():
            setattr(user, key, value)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise InvalidInputError("Invalid update data") from e
        self.db.refresh(user)
        return user

    def list_users(
        self,
        page: int,
        limit: int,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], Dict[str, Any]]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.state == (RecordState.ACTIVE if is_active else RecordState.ARCHIVED))
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(User.first_name).like(pattern),
                func.lower(User.last_name).like(pattern),
                func.lower(User.email).like(pattern),
            ))
        return paginate(query.order_by(User.created_at.desc()), page, limit)

    def count_users(self, created_since: Optional[datetime] = None, logged_in_since: Optional[datetime] = None) -> int:
        query = self.db.query(User)
        if created_since:
            query = query.filter(User.created_at >= created_since)
        if logged_in_since:
            query = query.filter(User.last_login >= logged_in_since)
        return query.count()

    def count_users_by_role(self) -> List[Tuple[UserRole, int]]:
        return self.db.query(User.role, func.count(User.id)).group_by(User.role).all()

    def get_children(self, parent_id: str) -> List[User]:
        return live(self.db, User).filter(User.parent_id == parent_id).all()

    def get_child(self, parent_id: str, child_id: str) -> Optional[User]:
        return (
            live(self.db, User)
            .filter(User.id == child_id, User.parent_id == parent_id)
            .first()
        )
