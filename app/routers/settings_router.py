# /app/routers/settings_router.py

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ..core.deps import get_current_active_user, require_roles
from ..db.base import User as UserModel
from ..models.enums import UserRole
from ..services import settings_service

router = APIRouter()


@router.get("", response_model=Dict[str, Any], summary="Read System Settings")
def get_settings(_: UserModel = Depends(get_current_active_user)):
    return settings_service.read_settings()


@router.put("", response_model=Dict[str, Any], summary="Update System Settings")
def update_settings(
    updates: Dict[str, Any] = Body(...),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return settings_service.update_settings(updates)
