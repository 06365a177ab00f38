# /app/core/deps.py

"""
FastAPI dependencies that resolve the caller.

`get_current_user` turns a bearer token into a User row, `get_current_active_user`
additionally rejects archived accounts, and `require_roles` gates a route to a
set of roles before any handler code runs.
"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from app.core.exceptions import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token
from app.db.base import User
from app.models.enums import UserRole
from app.services.database_service import DatabaseService, get_db_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: DatabaseService = Depends(get_db_service),
) -> User:
    if not token:
        raise UnauthorizedError("Not authorized, no token")
    user_id = decode_access_token(token)
    user = db.get_user_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise UnauthorizedError("User account is deactivated")
    return current_user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Builds a dependency that lets the request through only when the active
    user's role is one of `roles`.
    """
    allowed = set(roles)

    def _dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(
                f"User role '{current_user.role.value}' is not authorized to access this route"
            )
        return current_user

    return _dependency
