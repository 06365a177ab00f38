# /tests/test_course_service.py

from unittest.mock import MagicMock

import pytest

from app.core.exceptions import ForbiddenError, InvalidInputError, InvalidReferenceError, NotFoundError
from app.models import course_model
from app.models.enums import UserRole
from app.services import course_service, enrollment_service


def _create(code="BIO-201", instructor_ids=None, **extra):
    return course_model.CourseCreate(
        title="Cell Biology",
        description="Structure and function of the living cell.",
        code=code,
        instructor_ids=instructor_ids or [],
        **extra,
    )


def test_create_course_normalises_code_and_starts_empty(db_service, make_user):
    admin = make_user(role=UserRole.ADMIN)
    course = course_service.create_course(db_service, _create(code="bio-201"), admin)

    assert course.code == "BIO-201"
    assert course.total_enrollments == 0
    assert course.creator_id == admin.id
    assert course.instructors == []


def test_duplicate_code_is_rejected(db_service, make_user):
    admin = make_user(role=UserRole.ADMIN)
    course_service.create_course(db_service, _create(), admin)

    with pytest.raises(InvalidInputError, match="Course code already exists"):
        course_service.create_course(db_service, _create(), admin)


def test_teacher_creator_is_auto_assigned(db_service, make_user):
    teacher = make_user(role=UserRole.TEACHER)
    course = course_service.create_course(db_service, _create(), teacher)
    assert [i.id for i in course.instructors] == [teacher.id]


def test_instructors_must_be_active_teachers(db_service, make_user):
    admin = make_user(role=UserRole.ADMIN)
    student = make_user(role=UserRole.STUDENT)

    with pytest.raises(InvalidReferenceError):
        course_service.create_course(db_service, _create(instructor_ids=[student.id]), admin)


def test_duplicate_instructor_ids_are_collapsed(db_service, make_user):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    course = course_service.create_course(db_service, _create(instructor_ids=[teacher.id, teacher.id]), admin)
    assert len(course.instructors) == 1


def test_free_course_costs_nothing():
    payload = _create(is_free=True, price=250)
    assert payload.price == 0


def test_only_instructors_or_admins_update(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    course = make_course(admin, instructors=[teacher])

    with pytest.raises(ForbiddenError):
        course_service.update_course(
            db_service, course.id, course_model.CourseUpdate(price=10), make_user(role=UserRole.TEACHER)
        )

    updated = course_service.update_course(
        db_service, course.id, course_model.CourseUpdate(is_free=True, price=99), teacher
    )
    assert updated.is_free is True
    assert updated.price == 0


def test_archived_course_is_hidden(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    course = make_course(admin)

    course_service.delete_course(db_service, course.id, admin)

    with pytest.raises(NotFoundError):
        course_service.get_course_or_404(db_service, course.id)


def test_reconcile_repairs_drifted_counters(db_service, session, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    course = make_course(admin, code="CHEM-1")
    untouched = make_course(admin, code="PHYS-1")
    enrollment_service.enroll(db_service, make_user(), course.id)
    course.total_enrollments = 7
    session.commit()

    report = course_service.reconcile_enrollment_counts(db_service)

    assert report.checked == 2
    assert [(c.course_id, c.stored, c.actual) for c in report.corrected] == [(course.id, 7, 1)]
    assert db_service.get_course_by_id(course.id).total_enrollments == 1
    assert db_service.get_course_by_id(untouched.id).total_enrollments == 0


def test_reconcile_with_mocked_store_leaves_accurate_counters_alone():
    db = MagicMock()
    accurate = MagicMock(id="crs_1", code="A-1", total_enrollments=3)
    db.get_all_courses_with_enrollment_counts.return_value = [(accurate, 3)]

    report = course_service.reconcile_enrollment_counts(db)

    assert report.checked == 1
    assert report.corrected == []
    db.recount_course_enrollments.assert_not_called()


def test_reconcile_counts_enrollments_committed_during_the_run(db_service, session, make_user, make_course, mocker):
    admin = make_user(role=UserRole.ADMIN)
    course = make_course(admin)
    enrollment_service.enroll(db_service, make_user(), course.id)
    course.total_enrollments = 5
    session.commit()
    snapshot = db_service.get_all_courses_with_enrollment_counts()
    enrollment_service.enroll(db_service, make_user(), course.id)
    mocker.patch.object(db_service, "get_all_courses_with_enrollment_counts", return_value=snapshot)

    report = course_service.reconcile_enrollment_counts(db_service)

    assert report.corrected[0].actual == 2
    assert db_service.get_course_by_id(course.id).total_enrollments == 2


def test_null_fields_on_update_are_ignored(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    course = make_course(admin, title="Introduction to Algebra")

    updated = course_service.update_course(
        db_service, course.id, course_model.CourseUpdate(title=None, price=None, thumbnail="/img/algebra.png"), admin,
    )

    assert updated.title == "Introduction to Algebra"
    assert updated.price == 0
    assert updated.thumbnail == "/img/algebra.png"
