# /tests/conftest.py

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import security
from app.db.base import Base
from app.db.database import get_db
from app.main import app
from app.models.enums import ClassStatus, CourseStatus, UserRole
from app.services.database_service import DatabaseService


@pytest.fixture
def session():
    """
    A fresh in-memory SQLite database for EACH test. StaticPool keeps the
    single connection alive so every session sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_service(session):
    return DatabaseService(db_session=session)


# --- Factories ---

@pytest.fixture
def make_user(db_service):
    def _make(role=UserRole.STUDENT, first_name="Test", last_name="User", email=None, password="secret123", **extra):
        record = {
            "id": f"usr_{uuid.uuid4().hex[:12]}",
            "first_name": first_name,
            "last_name": last_name,
            "email": email or f"{uuid.uuid4().hex[:8]}@example.com",
            "hashed_password": security.hash_password(password),
            "role": role,
        }
        record.update(extra)
        return db_service.add_user(record)
    return _make


@pytest.fixture
def make_course(db_service):
    def _make(creator, instructors=(), code=None, title="Introduction to Algebra", **extra):
        record = {
            "id": f"crs_{uuid.uuid4().hex[:12]}",
            "title": title,
            "description": "A first course in algebraic thinking.",
            "code": code or f"C{uuid.uuid4().hex[:6].upper()}",
            "creator_id": creator.id,
            "status": CourseStatus.PUBLISHED,
            "total_enrollments": 0,
        }
        record.update(extra)
        return db_service.add_course(record, list(instructors))
    return _make


@pytest.fixture
def make_class(db_service):
    def _make(course, instructor, start_time=None, hours=1, **extra):
        start_time = start_time or datetime.now(timezone.utc) + timedelta(days=1)
        record = {
            "id": f"cls_{uuid.uuid4().hex[:12]}",
            "title": "Lesson",
            "course_id": course.id,
            "instructor_id": instructor.id,
            "start_time": start_time,
            "end_time": start_time + timedelta(hours=hours),
            "status": ClassStatus.SCHEDULED,
        }
        record.update(extra)
        return db_service.add_class(record)
    return _make


# --- API ---

@pytest.fixture
def client(session):
    """A TestClient whose requests all run against the test session."""
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {security.create_access_token(subject=user.id)}"}
    return _headers
