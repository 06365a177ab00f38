# /app/main.py

# --- Core FastAPI Imports ---
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# --- Application Configuration, Logging and Errors ---
from .core.app_logger import get_logger
from .core.config import settings
from .core.exceptions import ServiceError

# --- Persistence ---
from .db.base import Base
from .db.database import engine

# --- Application-specific Router Imports ---
from .routers import (
    analytics_router,
    assignments_router,
    attendance_router,
    auth_router,
    classes_router,
    courses_router,
    dashboard_router,
    enrollments_router,
    notifications_router,
    reports_router,
    settings_router,
    users_router,
)

logger = get_logger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schemas are managed by Alembic; local SQLite databases are created on the fly.
    if settings.DATABASE_URL.startswith("sqlite") or not settings.is_production:
        Base.metadata.create_all(bind=engine)
    logger.info("%s started (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    logger.info("%s shutting down", settings.PROJECT_NAME)


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="School management API: users, courses, classes, enrollments and attendance.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Envelope ---
@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users_router.router, prefix="/api/users", tags=["Users"])
app.include_router(courses_router.router, prefix="/api/courses", tags=["Courses"])
app.include_router(enrollments_router.router, prefix="/api/enrollments", tags=["Enrollments"])
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(attendance_router.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(assignments_router.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(notifications_router.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(dashboard_router.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(reports_router.router, prefix="/api/reports", tags=["Reports"])
app.include_router(analytics_router.router, prefix="/api/analytics", tags=["Analytics"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["Settings"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": f"{settings.PROJECT_NAME} is running!", "version": app.version}
