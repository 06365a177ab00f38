# /tests/test_report_service.py

from datetime import date
from unittest.mock import MagicMock

import pandas as pd
import pytest

from app.models import attendance_model
from app.models.enums import AttendanceStatus, EnrollmentStatus, UserRole
from app.services import attendance_service, enrollment_service, report_service
from app.services.database_service import ATTENDANCE_COLUMNS, ENROLLMENT_COLUMNS


@pytest.fixture
def mock_db_service():
    return MagicMock()


def _admin():
    return MagicMock(role=UserRole.ADMIN, id="usr_admin")


def test_performance_report_bins_grades(mock_db_service):
    mock_db_service.get_enrollments_as_dataframe.return_value = pd.DataFrame(
        [
            ("enr_1", "usr_1", "crs_a", EnrollmentStatus.ACTIVE, 50.0, 95.0, None),
            ("enr_2", "usr_2", "crs_a", EnrollmentStatus.ACTIVE, 30.0, 85.0, None),
            ("enr_3", "usr_3", "crs_b", EnrollmentStatus.ACTIVE, 10.0, 40.0, None),
            ("enr_4", "usr_4", "crs_b", EnrollmentStatus.ACTIVE, 0.0, None, None),
        ],
        columns=ENROLLMENT_COLUMNS,
    )
    mock_db_service.get_courses_by_ids.return_value = [
        MagicMock(id="crs_a", title="Algebra"),
        MagicMock(id="crs_b", title="Biology"),
    ]

    report = report_service.get_performance_report(mock_db_service, _admin())

    assert report.overall_average_grade == pytest.approx(73.33)
    assert report.grade_distribution["A (90-100)"] == 1
    assert report.grade_distribution["B (80-89)"] == 1
    assert report.grade_distribution["F (0-59)"] == 1
    assert [c.course_id for c in report.by_course] == ["crs_a", "crs_b"]
    assert report.by_course[1].graded_students == 1


def test_grade_bins_are_half_open_at_each_boundary(mock_db_service):
    grades = [59.99, 60.0, 69.99, 70.0, 89.99, 90.0, 100.0]
    mock_db_service.get_enrollments_as_dataframe.return_value = pd.DataFrame(
        [(f"enr_{i}", f"usr_{i}", "crs_a", EnrollmentStatus.ACTIVE, 0.0, grade, None) for i, grade in enumerate(grades)],
        columns=ENROLLMENT_COLUMNS,
    )
    mock_db_service.get_courses_by_ids.return_value = [MagicMock(id="crs_a", title="Algebra")]

    report = report_service.get_performance_report(mock_db_service, _admin())

    assert report.grade_distribution == {
        "F (0-59)": 1,
        "D (60-69)": 2,
        "C (70-79)": 1,
        "B (80-89)": 1,
        "A (90-100)": 2,
    }


def test_performance_report_without_enrollments(mock_db_service):
    mock_db_service.get_enrollments_as_dataframe.return_value = pd.DataFrame(columns=ENROLLMENT_COLUMNS)

    report = report_service.get_performance_report(mock_db_service, _admin())

    assert report.overall_average_grade is None
    assert set(report.grade_distribution.values()) == {0}


def test_attendance_report_counts_and_trend(mock_db_service):
    mock_db_service.get_attendance_as_dataframe.return_value = pd.DataFrame(
        [
            ("att_1", "usr_1", "cls_1", AttendanceStatus.PRESENT, date(2025, 3, 10)),
            ("att_2", "usr_2", "cls_1", AttendanceStatus.ABSENT, date(2025, 3, 10)),
            ("att_3", "usr_1", "cls_1", AttendanceStatus.LATE, date(2025, 3, 11)),
            ("att_4", "usr_2", "cls_1", AttendanceStatus.EXCUSED, date(2025, 3, 11)),
        ],
        columns=ATTENDANCE_COLUMNS,
    )

    report = report_service.get_attendance_report(mock_db_service, _admin())

    assert report.total_records == 4
    assert report.by_status == {"present": 1, "absent": 1, "late": 1, "excused": 1}
    assert report.attendance_rate == 75.0
    assert report.daily_trend == {"2025-03-10": 2, "2025-03-11": 2}


def test_teacher_reports_are_scoped_to_taught_courses(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    taught = make_course(admin, instructors=[teacher])
    other = make_course(admin)
    for course in (taught, other):
        enrollment_service.enroll(db_service, make_user(), course.id)

    teacher_view = report_service.get_enrollment_report(db_service, teacher)
    admin_view = report_service.get_enrollment_report(db_service, admin)

    assert teacher_view.total_enrollments == 1
    assert [c.course_id for c in teacher_view.by_course] == [taught.id]
    assert admin_view.total_enrollments == 2
    assert admin_view.by_status["active"] == 2


def test_attendance_report_date_window(db_service, make_user, make_course, make_class):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    class_obj = make_class(make_course(admin, instructors=[teacher]), teacher)
    student = make_user()
    for day in (date(2025, 3, 10), date(2025, 3, 20)):
        attendance_service.mark_attendance(db_service, attendance_model.AttendanceMark(
            class_id=class_obj.id, student_id=student.id, status=AttendanceStatus.PRESENT, date=day,
        ))

    report = report_service.get_attendance_report(db_service, admin, date(2025, 3, 15), date(2025, 3, 31))

    assert report.total_records == 1
    assert report.daily_trend == {"2025-03-20": 1}
