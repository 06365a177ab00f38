# /tests/test_enrollment_service.py

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConflictError, InvalidReferenceError, NotFoundError
from app.models.enums import EnrollmentStatus, UserRole
from app.services import enrollment_service


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN)


@pytest.fixture
def teacher(make_user):
    return make_user(role=UserRole.TEACHER, first_name="Ama")


@pytest.fixture
def student(make_user):
    return make_user(role=UserRole.STUDENT)


def test_enroll_creates_active_enrollment_and_bumps_counter(db_service, admin, teacher, student, make_course):
    course = make_course(admin, instructors=[teacher])

    enrollment = enrollment_service.enroll(db_service, student, course.id)

    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert enrollment.progress == 0
    assert db_service.get_course_by_id(course.id).total_enrollments == 1


def test_double_enroll_yields_one_conflict_and_single_increment(db_service, admin, student, make_course):
    course = make_course(admin)
    enrollment_service.enroll(db_service, student, course.id)

    with pytest.raises(ConflictError):
        enrollment_service.enroll(db_service, student, course.id)

    assert db_service.count_enrollments(course.id) == 1
    assert db_service.get_course_by_id(course.id).total_enrollments == 1


def test_store_rejects_duplicate_even_without_precheck(db_service, admin, student, make_course):
    """Two writers that both passed the pre-check: the UNIQUE constraint decides."""
    course = make_course(admin)
    base = {"student_id": student.id, "course_id": course.id, "progress": 0, "status": EnrollmentStatus.ACTIVE}
    db_service.create_enrollment({"id": "enr_first", **base})

    with pytest.raises(ConflictError):
        db_service.create_enrollment({"id": "enr_second", **base})

    assert db_service.count_enrollments(course.id) == 1
    assert db_service.get_course_by_id(course.id).total_enrollments == 1


def test_single_instructor_is_auto_assigned(db_service, admin, teacher, student, make_course):
    course = make_course(admin, instructors=[teacher])
    enrollment = enrollment_service.enroll(db_service, student, course.id)
    assert enrollment.instructor_id == teacher.id


@pytest.mark.parametrize("instructor_count", [0, 2])
def test_no_instructor_when_choice_is_ambiguous(db_service, admin, student, make_user, make_course, instructor_count):
    instructors = [make_user(role=UserRole.TEACHER) for _ in range(instructor_count)]
    course = make_course(admin, instructors=instructors)

    enrollment = enrollment_service.enroll(db_service, student, course.id)

    assert enrollment.instructor_id is None


def test_explicit_instructor_must_teach_the_course(db_service, admin, teacher, student, make_user, make_course):
    outsider = make_user(role=UserRole.TEACHER)
    course = make_course(admin, instructors=[teacher])

    with pytest.raises(InvalidReferenceError):
        enrollment_service.enroll(db_service, student, course.id, instructor_id=outsider.id)

    assert db_service.count_enrollments(course.id) == 0


def test_enroll_unknown_course(db_service, student):
    with pytest.raises(NotFoundError):
        enrollment_service.enroll(db_service, student, "crs_missing")


def test_enrollment_status(db_service, admin, student, make_course):
    course = make_course(admin)
    assert enrollment_service.get_enrollment_status(db_service, student.id, course.id).is_enrolled is False

    enrollment_service.enroll(db_service, student, course.id)
    status = enrollment_service.get_enrollment_status(db_service, student.id, course.id)

    assert status.is_enrolled is True
    assert status.enrollment.status == EnrollmentStatus.ACTIVE


def test_failed_commit_persists_neither_row_nor_increment(db_service, session, admin, student, make_course, mocker):
    course = make_course(admin)
    mocker.patch.object(
        session, "commit", side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))
    )

    with pytest.raises(OperationalError):
        enrollment_service.enroll(db_service, student, course.id)

    mocker.stopall()
    assert db_service.count_enrollments(course.id) == 0
    assert db_service.get_course_by_id(course.id).total_enrollments == 0
