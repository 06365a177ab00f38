# /tests/test_analytics_service.py

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pandas as pd
import pytest

from app.models.enums import CourseStatus, EnrollmentStatus, UserRole
from app.services import analytics_service, enrollment_service
from app.services.database_service import ENROLLMENT_COLUMNS

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_db_service():
    db = MagicMock()
    db.count_users_by_role.return_value = [(UserRole.STUDENT, 6), (UserRole.TEACHER, 2), (UserRole.ADMIN, 1)]
    db.count_users.side_effect = lambda created_since=None, logged_in_since=None: (
        1 if created_since else 4 if logged_in_since else 9
    )
    course_counts = {CourseStatus.PUBLISHED: 2, CourseStatus.DRAFT: 1, CourseStatus.ARCHIVED: 0}
    db.count_courses.side_effect = lambda status=None, created_since=None: (
        0 if created_since else course_counts[status] if status else 3
    )
    db.get_courses_by_ids.return_value = [
        MagicMock(id="crs_a", title="Algebra"),
        MagicMock(id="crs_b", title="Biology"),
    ]
    return db


def _frame(rows):
    return pd.DataFrame(
        [(f"enr_{i}", f"usr_{i}", course_id, EnrollmentStatus.ACTIVE, 0.0, None, enrolled_at)
         for i, (course_id, enrolled_at) in enumerate(rows)],
        columns=ENROLLMENT_COLUMNS,
    )


def test_trend_growth_and_top_courses(mock_db_service):
    mock_db_service.get_enrollments_as_dataframe.return_value = _frame([
        ("crs_a", datetime(2024, 1, 20)),
        ("crs_a", datetime(2024, 10, 2)),
        ("crs_b", datetime(2025, 2, 3)),
        ("crs_b", datetime(2025, 2, 27)),
        ("crs_a", datetime(2025, 3, 2)),
        ("crs_b", datetime(2025, 3, 9)),
        ("crs_a", datetime(2025, 3, 15, 6, 0)),
    ])

    analytics = analytics_service.get_system_analytics(mock_db_service, "month", now=NOW)

    assert [(p.month, p.count) for p in analytics.enrollment_trends] == [("Oct", 1), ("Feb", 2), ("Mar", 3)]
    assert analytics.overview.growth_rate == 50.0
    assert analytics.overview.total_enrollments == 7
    assert [(c.course_id, c.enrollments) for c in analytics.top_courses] == [("crs_a", 4), ("crs_b", 3)]
    assert analytics.course_stats.average_enrollment == 2
    assert analytics.recent_activity[0].description == "1 new enrollment today"
    assert analytics.recent_activity[1].description == "0 new courses published today"


def test_overview_counts_and_timeframe_window(mock_db_service):
    mock_db_service.get_enrollments_as_dataframe.return_value = _frame([])

    analytics = analytics_service.get_system_analytics(mock_db_service, "week", now=NOW)

    assert analytics.overview.total_users == 9
    assert analytics.overview.active_users == 4
    assert analytics.overview.total_students == 6
    assert analytics.overview.total_parents == 0
    assert analytics.course_stats.published == 2
    assert analytics.overview.growth_rate == 0.0
    assert analytics.enrollment_trends == []
    assert analytics.top_courses == []
    mock_db_service.count_users.assert_any_call(logged_in_since=datetime(2025, 3, 8, 12, 0, tzinfo=timezone.utc))


def test_unknown_timeframe_falls_back_to_month(mock_db_service):
    mock_db_service.get_enrollments_as_dataframe.return_value = _frame([])

    analytics = analytics_service.get_system_analytics(mock_db_service, "decade", now=NOW)

    assert analytics.timeframe == "month"
    mock_db_service.count_users.assert_any_call(logged_in_since=datetime(2025, 2, 13, 12, 0, tzinfo=timezone.utc))


def test_analytics_over_the_store(db_service, make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    popular = make_course(admin, title="Popular Course")
    quiet = make_course(admin, title="Quiet Course", status=CourseStatus.DRAFT)
    for _ in range(2):
        enrollment_service.enroll(db_service, make_user(), popular.id)
    enrollment_service.enroll(db_service, make_user(), quiet.id)

    analytics = analytics_service.get_system_analytics(db_service)

    assert analytics.overview.total_enrollments == 3
    assert analytics.overview.total_students == 3
    assert analytics.course_stats.published == 1
    assert analytics.course_stats.draft == 1
    assert [c.title for c in analytics.top_courses] == ["Popular Course", "Quiet Course"]
    assert sum(p.count for p in analytics.enrollment_trends) == 3
    assert analytics.recent_activity[2].description == "4 new user registrations today"
