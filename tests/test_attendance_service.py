# /tests/test_attendance_service.py

from datetime import date

import pytest

from app.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from app.models import attendance_model
from app.models.enums import AttendanceStatus, EnrollmentStatus, UserRole
from app.services import attendance_service, enrollment_service

DAY = date(2025, 3, 10)


@pytest.fixture
def setting(make_user, make_course, make_class):
    """An admin-created course taught by one teacher, with a single class."""
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    course = make_course(admin, instructors=[teacher])
    class_obj = make_class(course, teacher)
    return {"admin": admin, "teacher": teacher, "course": course, "class": class_obj}


def _mark(class_id, student_id, status=AttendanceStatus.PRESENT, day=DAY):
    return attendance_model.AttendanceMark(class_id=class_id, student_id=student_id, status=status, date=day)


def test_mark_records_the_requested_day(db_service, setting, make_user):
    student = make_user()
    record = attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id))

    assert record.day == DAY
    assert record.date.date() == DAY
    assert record.status == AttendanceStatus.PRESENT
    assert record.excuse_approved is False


def test_double_mark_same_day_conflicts(db_service, setting, make_user):
    student = make_user()
    attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id))

    with pytest.raises(ConflictError):
        attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id, AttendanceStatus.LATE))


def test_marks_on_different_days_both_succeed(db_service, setting, make_user):
    student = make_user()
    attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id, day=date(2025, 3, 10)))
    attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id, day=date(2025, 3, 11)))

    records, pagination = db_service.list_attendance(1, 10, student_id=student.id)
    assert pagination["total_records"] == 2


def test_store_rejects_same_day_duplicate(db_service, setting, make_user):
    student = make_user()
    attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id))

    with pytest.raises(ConflictError):
        db_service.add_attendance({
            "id": "att_dup",
            "class_id": setting["class"].id,
            "student_id": student.id,
            "date": attendance_service._stamp_for_day(DAY, attendance_service.utc_now()),
            "day": DAY,
            "status": AttendanceStatus.ABSENT,
            "excuse_approved": False,
        })


def test_mark_unknown_class_or_student(db_service, setting, make_user):
    with pytest.raises(NotFoundError):
        attendance_service.mark_attendance(db_service, _mark("cls_missing", make_user().id))
    with pytest.raises(NotFoundError):
        attendance_service.mark_attendance(db_service, _mark(setting["class"].id, "usr_missing"))


def test_roster_lists_active_enrollments_once_and_excludes_withdrawn(db_service, session, setting, make_user):
    course = setting["course"]
    kept = make_user(last_name="Adjei")
    withdrawn = make_user(last_name="Boateng")
    enrollment_service.enroll(db_service, kept, course.id)
    dropped = enrollment_service.enroll(db_service, withdrawn, course.id)
    dropped.status = EnrollmentStatus.WITHDRAWN
    session.commit()

    roster = attendance_service.build_roster(db_service, setting["class"].id, DAY)

    assert [entry.student.id for entry in roster.roster] == [kept.id]
    assert roster.roster[0].attendance is None
    assert roster.date == DAY


def test_roster_carries_the_days_record(db_service, setting, make_user):
    student = make_user()
    enrollment_service.enroll(db_service, student, setting["course"].id)
    attendance_service.mark_attendance(db_service, _mark(setting["class"].id, student.id, AttendanceStatus.LATE))

    roster = attendance_service.build_roster(db_service, setting["class"].id, DAY)
    other_day = attendance_service.build_roster(db_service, setting["class"].id, date(2025, 3, 12))

    assert roster.roster[0].attendance.status == AttendanceStatus.LATE
    assert other_day.roster[0].attendance is None


def test_bulk_mark_reports_per_student_outcome(db_service, setting, make_user):
    students = [make_user() for _ in range(3)]
    class_id = setting["class"].id
    attendance_service.mark_attendance(db_service, _mark(class_id, students[0].id))

    request = attendance_model.BulkAttendanceRequest(
        class_id=class_id,
        date=DAY,
        records=[
            attendance_model.BulkAttendanceItem(student_id=s.id, status=AttendanceStatus.PRESENT)
            for s in students
        ],
    )
    result = attendance_service.bulk_mark_attendance(db_service, request)

    assert [s.student_id for s in result.succeeded] == [students[1].id, students[2].id]
    assert len(result.failed) == 1
    assert result.failed[0].student_id == students[0].id
    assert result.failed[0].error == "Attendance already marked for this day"


def test_bulk_result_serialises_success_key():
    result = attendance_model.BulkAttendanceResult()
    result.succeeded.append(attendance_model.BulkSucceeded(student_id="usr_1"))
    assert result.model_dump(by_alias=True) == {"success": [{"studentId": "usr_1"}], "failed": []}


def test_rejected_excuse_leaves_status(db_service, setting, make_user):
    student = make_user()
    record = attendance_service.mark_attendance(
        db_service, _mark(setting["class"].id, student.id, AttendanceStatus.ABSENT)
    )

    rejected = attendance_service.approve_excuse(db_service, record.id, False)
    assert rejected.status == AttendanceStatus.ABSENT
    assert rejected.excuse_approved is False

    approved = attendance_service.approve_excuse(db_service, record.id, True)
    assert approved.status == AttendanceStatus.EXCUSED
    assert approved.excuse_approved is True


def test_update_requires_data(db_service, setting, make_user):
    record = attendance_service.mark_attendance(db_service, _mark(setting["class"].id, make_user().id))
    with pytest.raises(InvalidInputError):
        attendance_service.update_attendance(db_service, record.id, attendance_model.AttendanceUpdate())


def test_update_ignores_null_status_and_keeps_nullable_fields_clearable(db_service, setting, make_user):
    record = attendance_service.mark_attendance(db_service, _mark(setting["class"].id, make_user().id))
    attendance_service.update_attendance(
        db_service, record.id, attendance_model.AttendanceUpdate(notes="Arrived with a note")
    )

    updated = attendance_service.update_attendance(
        db_service, record.id, attendance_model.AttendanceUpdate(status=None, notes=None)
    )

    assert updated.status == AttendanceStatus.PRESENT
    assert updated.notes is None


def test_update_with_only_null_status_is_rejected(db_service, setting, make_user):
    record = attendance_service.mark_attendance(db_service, _mark(setting["class"].id, make_user().id))
    with pytest.raises(InvalidInputError):
        attendance_service.update_attendance(db_service, record.id, attendance_model.AttendanceUpdate(status=None))


def test_store_rejection_on_update_rolls_back(db_service, setting, make_user):
    record = attendance_service.mark_attendance(db_service, _mark(setting["class"].id, make_user().id))

    with pytest.raises(InvalidInputError):
        db_service.update_attendance(record, {"status": None})

    assert db_service.get_attendance_by_id(record.id).status == AttendanceStatus.PRESENT


def test_student_stats_and_visibility(db_service, setting, make_user):
    student = make_user()
    class_id = setting["class"].id
    attendance_service.mark_attendance(db_service, _mark(class_id, student.id, AttendanceStatus.PRESENT, date(2025, 3, 10)))
    attendance_service.mark_attendance(db_service, _mark(class_id, student.id, AttendanceStatus.ABSENT, date(2025, 3, 11)))

    stats = attendance_service.get_student_stats(db_service, student.id, student)
    assert stats.total_records == 2
    assert stats.by_status["present"] == 1
    assert stats.attendance_rate == 50.0

    with pytest.raises(ForbiddenError):
        attendance_service.get_student_stats(db_service, student.id, make_user())


def test_parent_can_view_own_child(db_service, make_user):
    parent = make_user(role=UserRole.PARENT)
    child = make_user(parent_id=parent.id)

    stats = attendance_service.get_student_stats(db_service, child.id, parent)

    assert stats.total_records == 0
    assert stats.attendance_rate == 0.0
