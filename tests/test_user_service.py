# /tests/test_user_service.py

import pytest

from app.core import security
from app.core.exceptions import (
    ConflictError, ForbiddenError, InvalidInputError, NotFoundError, UnauthorizedError,
)
from app.models import user_model
from app.models.enums import UserRole
from app.services import enrollment_service, user_service


def _register(email="Kofi.Mensah@Example.com", role=UserRole.STUDENT):
    return user_model.UserCreate(
        first_name=" Kofi ", last_name="Mensah", email=email, password="secret123", role=role,
    )


def test_register_hashes_password_and_lowercases_email(db_service):
    user = user_service.create_user(db_service, _register())

    assert user.email == "kofi.mensah@example.com"
    assert user.first_name == "Kofi"
    assert user.hashed_password != "secret123"
    assert security.verify_password("secret123", user.hashed_password)


def test_duplicate_email_is_rejected(db_service):
    user_service.create_user(db_service, _register())
    with pytest.raises(InvalidInputError, match="User already exists"):
        user_service.create_user(db_service, _register(email="kofi.mensah@example.com"))


def test_login_returns_token_for_subject(db_service):
    user = user_service.create_user(db_service, _register())

    token = user_service.login(db_service, "kofi.mensah@example.com", "secret123")

    assert security.decode_access_token(token) == user.id
    assert db_service.get_user_by_id(user.id).last_login is not None


def test_login_failures(db_service, make_user):
    user_service.create_user(db_service, _register())
    with pytest.raises(UnauthorizedError, match="Incorrect email or password"):
        user_service.login(db_service, "kofi.mensah@example.com", "wrong-pass")

    archived = make_user(email="gone@example.com")
    archived.archive()
    db_service.update_user(archived, {})
    with pytest.raises(UnauthorizedError, match="deactivated"):
        user_service.login(db_service, "gone@example.com", "secret123")


def test_tampered_token_is_rejected():
    token = security.create_access_token(subject="usr_1") + "x"
    with pytest.raises(UnauthorizedError):
        security.decode_access_token(token)


def test_update_is_self_or_admin(db_service, make_user):
    user = make_user()
    with pytest.raises(ForbiddenError):
        user_service.update_user(db_service, user.id, user_model.UserUpdate(phone="123"), make_user())
    with pytest.raises(InvalidInputError):
        user_service.update_user(db_service, user.id, user_model.UserUpdate(), user)

    updated = user_service.update_user(db_service, user.id, user_model.UserUpdate(phone="0244"), user)
    assert updated.phone == "0244"


def test_admin_cannot_deactivate_self(db_service, make_user):
    admin = make_user(role=UserRole.ADMIN)
    with pytest.raises(InvalidInputError):
        user_service.deactivate_user(db_service, admin.id, admin)

    target = make_user()
    user_service.deactivate_user(db_service, target.id, admin)
    assert db_service.get_user_by_id(target.id).is_active is False
    assert db_service.get_active_user_by_id(target.id) is None


def test_stats_report_every_role(db_service, make_user):
    make_user(role=UserRole.TEACHER)
    make_user(role=UserRole.TEACHER)

    stats = {row.role: row.total for row in user_service.get_user_stats(db_service)}

    assert stats[UserRole.TEACHER] == 2
    assert stats[UserRole.PARENT] == 0
    assert set(stats) == set(UserRole)


def test_my_students_groups_courses_per_student(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    first = make_course(admin, instructors=[teacher])
    second = make_course(admin, instructors=[teacher])
    student = make_user()
    enrollment_service.enroll(db_service, student, first.id)
    enrollment_service.enroll(db_service, student, second.id)

    result = user_service.get_my_students(db_service, teacher)

    assert result.count == 1
    assert {c.id for c in result.students[0].courses} == {first.id, second.id}


def test_link_child(db_service, make_user):
    parent = make_user(role=UserRole.PARENT)
    child = make_user(email="child@example.com")

    linked = user_service.link_child(db_service, parent, "child@example.com")
    assert linked.parent_id == parent.id

    with pytest.raises(ConflictError):
        user_service.link_child(db_service, make_user(role=UserRole.PARENT), "child@example.com")
    with pytest.raises(NotFoundError):
        user_service.link_child(db_service, parent, "nobody@example.com")

    make_user(role=UserRole.TEACHER, email="teacher@example.com")
    with pytest.raises(InvalidInputError):
        user_service.link_child(db_service, parent, "teacher@example.com")
    assert child.id == linked.id
