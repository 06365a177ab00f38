# /app/routers/users_router.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models import user_model
from ..models.common_model import MessageResponse
from ..models.enums import UserRole
from ..services import user_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

# --- DIRECTORY ENDPOINTS (/api/users) ---

@router.get("", response_model=user_model.UserListResponse, summary="List Users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return user_service.list_users(db, page, limit, role=role, is_active=is_active, search=search)


@router.get("/stats", response_model=List[user_model.RoleCount], summary="Count Users per Role")
def get_user_stats(
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return user_service.get_user_stats(db)


@router.get("/my-students", response_model=user_model.MyStudentsResponse, summary="Students of My Courses")
def get_my_students(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER)),
):
    return user_service.get_my_students(db, current_user)


@router.post("/link-child", response_model=user_model.User, summary="Link a Student to the Current Parent")
def link_child(
    request: user_model.LinkChildRequest,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.PARENT)),
):
    return user_service.link_child(db, current_user, request.student_email)

# --- INDIVIDUAL USER ENDPOINTS (/api/users/{user_id}) ---

@router.get("/{user_id}", response_model=user_model.User, summary="Get a User")
def get_user(
    user_id: str,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(get_current_active_user),
):
    return user_service.get_user(db, user_id)


@router.put("/{user_id}", response_model=user_model.User, summary="Update a User Profile")
def update_user(
    user_id: str,
    user_update: user_model.UserUpdate,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(get_current_active_user),
):
    return user_service.update_user(db, user_id, user_update, current_user)


@router.delete("/{user_id}", response_model=MessageResponse, summary="Deactivate a User")
def delete_user(
    user_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    user_service.deactivate_user(db, user_id, current_user)
    return MessageResponse(message="User deactivated successfully")


@router.patch("/{user_id}/role", response_model=user_model.User, summary="Change a User's Role")
def change_user_role(
    user_id: str,
    role_change: user_model.RoleChange,
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return user_service.change_role(db, user_id, role_change.role)
