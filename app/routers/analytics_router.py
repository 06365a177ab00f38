# /app/routers/analytics_router.py

from fastapi import APIRouter, Depends, Query

from ..core.deps import require_roles
from ..db.base import User as UserModel
from ..models import analytics_model
from ..models.enums import UserRole
from ..services import analytics_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get("", response_model=analytics_model.SystemAnalytics, summary="System Analytics")
def get_system_analytics(
    timeframe: str = Query(analytics_service.DEFAULT_TIMEFRAME, description="One of week, month or year."),
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return analytics_service.get_system_analytics(db, timeframe)
