# /tests/test_class_service.py

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from app.models import class_model
from app.models.enums import ClassStatus, NotificationType, UserRole
from app.services import class_service

START = datetime(2030, 5, 6, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN)


@pytest.fixture
def teacher(make_user):
    return make_user(role=UserRole.TEACHER)


@pytest.fixture
def course(admin, teacher, make_course):
    return make_course(admin, instructors=[teacher], code="MATH-101")


def _payload(course, instructor, start=START, hours=1, **extra):
    return class_model.ClassCreate(
        title="  Fractions  ",
        course_id=course.id,
        instructor_id=instructor.id,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        **extra,
    )


def test_create_class_schedules_and_notifies(db_service, admin, teacher, course):
    new_class = class_service.create_class(db_service, _payload(course, teacher), admin)

    assert new_class.title == "Fractions"
    assert new_class.status == ClassStatus.SCHEDULED

    inbox = db_service.get_notifications_for_user(teacher.id)
    assert len(inbox) == 1
    assert inbox[0].title == "New Class Scheduled"
    assert inbox[0].type == NotificationType.SCHEDULE
    assert "MATH-101" in inbox[0].message


def test_overlapping_window_conflicts(db_service, admin, teacher, course):
    class_service.create_class(db_service, _payload(course, teacher), admin)

    with pytest.raises(ConflictError):
        class_service.create_class(db_service, _payload(course, teacher, start=START + timedelta(minutes=30)), admin)


def test_back_to_back_classes_do_not_conflict(db_service, admin, teacher, course):
    class_service.create_class(db_service, _payload(course, teacher), admin)
    second = class_service.create_class(db_service, _payload(course, teacher, start=START + timedelta(hours=1)), admin)
    assert second.start_time is not None


def test_cancelled_class_frees_the_slot(db_service, admin, teacher, course):
    first = class_service.create_class(db_service, _payload(course, teacher), admin)
    class_service.delete_class(db_service, first.id, admin)

    replacement = class_service.create_class(db_service, _payload(course, teacher), admin)

    assert replacement.id != first.id
    with pytest.raises(NotFoundError):
        class_service.get_class_or_404(db_service, first.id)


def test_end_must_follow_start(db_service, admin, teacher, course):
    with pytest.raises(InvalidInputError):
        class_service.create_class(db_service, _payload(course, teacher, hours=0), admin)


def test_teacher_can_only_schedule_themself(db_service, teacher, course, make_user):
    colleague = make_user(role=UserRole.TEACHER)
    with pytest.raises(ForbiddenError):
        class_service.create_class(db_service, _payload(course, colleague), teacher)


def test_teacher_must_teach_the_course(db_service, admin, make_user, make_course):
    outsider = make_user(role=UserRole.TEACHER)
    other_course = make_course(admin)
    with pytest.raises(ForbiddenError):
        class_service.create_class(db_service, _payload(other_course, outsider), outsider)


def test_unknown_instructor(db_service, admin, course):
    payload = class_model.ClassCreate(
        title="Lesson", course_id=course.id, instructor_id="usr_missing",
        start_time=START, end_time=START + timedelta(hours=1),
    )
    with pytest.raises(NotFoundError):
        class_service.create_class(db_service, payload, admin)


def test_notification_failure_keeps_the_class(db_service, admin, teacher, course, mocker):
    mocker.patch("app.services.notification_service.notify", side_effect=SQLAlchemyError("down"))

    new_class = class_service.create_class(db_service, _payload(course, teacher), admin)

    assert db_service.get_class_by_id(new_class.id) is not None


def test_rescheduling_rechecks_conflicts(db_service, admin, teacher, course):
    class_service.create_class(db_service, _payload(course, teacher), admin)
    later = class_service.create_class(db_service, _payload(course, teacher, start=START + timedelta(hours=3)), admin)

    with pytest.raises(ConflictError):
        class_service.update_class(
            db_service, later.id,
            class_model.ClassUpdate(start_time=START + timedelta(minutes=15), end_time=START + timedelta(hours=1)),
            admin,
        )

    moved = class_service.update_class(
        db_service, later.id, class_model.ClassUpdate(start_time=START + timedelta(hours=3, minutes=30)), admin,
    )
    assert moved.start_time.replace(tzinfo=timezone.utc) == START + timedelta(hours=3, minutes=30)


def test_unrelated_teacher_cannot_manage(db_service, admin, teacher, course, make_user):
    new_class = class_service.create_class(db_service, _payload(course, teacher), admin)
    with pytest.raises(ForbiddenError):
        class_service.update_status(db_service, new_class.id, ClassStatus.LIVE, make_user(role=UserRole.TEACHER))

    live = class_service.update_status(db_service, new_class.id, ClassStatus.LIVE, teacher)
    assert live.status == ClassStatus.LIVE


def test_null_window_and_flags_on_update_are_ignored(db_service, admin, teacher, course):
    class_obj = class_service.create_class(db_service, _payload(course, teacher), admin)

    updated = class_service.update_class(
        db_service, class_obj.id,
        class_model.ClassUpdate(start_time=None, is_online=None, location="Room 4"),
        admin,
    )

    assert updated.location == "Room 4"
    assert updated.is_online is False
    assert updated.start_time.replace(tzinfo=timezone.utc) == START
