# /app/routers/dashboard_router.py

# --- Core FastAPI Imports ---
from fastapi import APIRouter, Depends

# --- Service and Model Imports ---
from ..core.deps import require_roles
from ..db.base import User as UserModel
from ..models import dashboard_model
from ..models.enums import UserRole
from ..services import dashboard_service
from ..services.database_service import DatabaseService, get_db_service

# --- APIRouter Instance ---
router = APIRouter()

# --- Endpoint Definitions ---
# Each dashboard is a thin pass-through: the role gate lives in the
# dependency, the aggregation in `dashboard_service`.

@router.get("/student", response_model=dashboard_model.StudentDashboard, summary="Student Dashboard")
def get_student_dashboard(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.STUDENT)),
):
    return dashboard_service.get_student_dashboard(db, current_user)


@router.get("/teacher", response_model=dashboard_model.TeacherDashboard, summary="Teacher Dashboard")
def get_teacher_dashboard(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.TEACHER)),
):
    return dashboard_service.get_teacher_dashboard(db, current_user)


@router.get("/admin", response_model=dashboard_model.AdminDashboard, summary="Admin Dashboard")
def get_admin_dashboard(
    db: DatabaseService = Depends(get_db_service),
    _: UserModel = Depends(require_roles(UserRole.ADMIN)),
):
    return dashboard_service.get_admin_dashboard(db)


@router.get("/parent", response_model=dashboard_model.ParentDashboard, summary="Parent Dashboard")
def get_parent_dashboard(
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.PARENT)),
):
    return dashboard_service.get_parent_dashboard(db, current_user)


@router.get("/parent/child/{child_id}", response_model=dashboard_model.ChildDetail, summary="One Child's Dashboard")
def get_child_detail(
    child_id: str,
    db: DatabaseService = Depends(get_db_service),
    current_user: UserModel = Depends(require_roles(UserRole.PARENT)),
):
    return dashboard_service.get_child_detail(db, current_user, child_id)
