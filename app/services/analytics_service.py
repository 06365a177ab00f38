# /app/services/analytics_service.py

"""
Platform-wide analytics for administrators.

Head counts come straight from the repositories. The enrollment trend, the
month-over-month growth and the top courses are computed with pandas over the
enrollment frame, the same one the reports use.
"""

from datetime import datetime, timedelta
from typing import List, Optional

import pandas as pd

from ..core.app_logger import get_logger
from ..models import analytics_model
from ..models.enums import CourseStatus, UserRole
from .database_helpers.query_helpers import as_utc, utc_now
from .database_service import DatabaseService

logger = get_logger(__name__)

TIMEFRAME_DAYS = {"week": 7, "month": 30, "year": 365}
DEFAULT_TIMEFRAME = "month"
TREND_DAYS = 180
TOP_COURSES = 5


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _enrollment_times(df: pd.DataFrame) -> pd.Series:
    """`enrolled_at` as tz-aware UTC timestamps. SQLite rows come back naive."""
    if df.empty:
        return pd.Series([], dtype="datetime64[ns, UTC]")
    return pd.to_datetime(df["enrolled_at"], utc=True).dropna()


def _monthly_trend(times: pd.Series, now: datetime) -> List[analytics_model.EnrollmentTrendPoint]:
    recent = times[times >= now - timedelta(days=TREND_DAYS)]
    if recent.empty:
        return []
    per_month = recent.dt.tz_convert(None).dt.to_period("M").value_counts().sort_index()
    return [
        analytics_model.EnrollmentTrendPoint(month=period.strftime("%b"), count=int(count))
        for period, count in per_month.items()
    ]


def _growth_rate(times: pd.Series, now: datetime) -> float:
    """Percent change from the previous calendar month to the current one."""
    current_start = pd.Timestamp(now.replace(day=1, hour=0, minute=0, second=0, microsecond=0))
    previous_start = current_start - pd.DateOffset(months=1)
    previous = int(((times >= previous_start) & (times < current_start)).sum())
    current = int((times >= current_start).sum())
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def _top_courses(db: DatabaseService, df: pd.DataFrame) -> List[analytics_model.TopCourse]:
    if df.empty:
        return []
    per_course = df.groupby("course_id")["id"].count().sort_values(ascending=False, kind="stable").head(TOP_COURSES)
    courses = {c.id: c for c in db.get_courses_by_ids(list(per_course.index))}
    return [
        analytics_model.TopCourse(
            course_id=course_id,
            title=courses[course_id].title if course_id in courses else "Unknown Course",
            enrollments=int(total),
        )
        for course_id, total in per_course.items()
    ]


def get_system_analytics(
    db: DatabaseService, timeframe: str = DEFAULT_TIMEFRAME, now: Optional[datetime] = None
) -> analytics_model.SystemAnalytics:
    if timeframe not in TIMEFRAME_DAYS:
        timeframe = DEFAULT_TIMEFRAME
    now = as_utc(now) if now else utc_now()
    window_start = now - timedelta(days=TIMEFRAME_DAYS[timeframe])
    day_ago = now - timedelta(days=1)

    df = db.get_enrollments_as_dataframe()
    times = _enrollment_times(df)
    total_enrollments = len(df)

    by_role = dict(db.count_users_by_role())
    total_courses = db.count_courses()
    overview = analytics_model.AnalyticsOverview(
        total_users=db.count_users(),
        total_courses=total_courses,
        total_enrollments=total_enrollments,
        active_users=db.count_users(logged_in_since=window_start),
        growth_rate=_growth_rate(times, now),
        total_students=by_role.get(UserRole.STUDENT, 0),
        total_teachers=by_role.get(UserRole.TEACHER, 0),
        total_parents=by_role.get(UserRole.PARENT, 0),
    )
    course_stats = analytics_model.CourseStats(
        published=db.count_courses(CourseStatus.PUBLISHED),
        draft=db.count_courses(CourseStatus.DRAFT),
        archived=db.count_courses(CourseStatus.ARCHIVED),
        average_enrollment=int(total_enrollments / total_courses + 0.5) if total_courses else 0,
    )

    new_enrollments = int((times >= day_ago).sum())
    new_courses = db.count_courses(CourseStatus.PUBLISHED, created_since=day_ago)
    new_users = db.count_users(created_since=day_ago)
    recent_activity = [
        analytics_model.ActivityItem(type="enrollment", description=f"{_plural(new_enrollments, 'new enrollment')} today"),
        analytics_model.ActivityItem(type="course", description=f"{_plural(new_courses, 'new course')} published today"),
        analytics_model.ActivityItem(type="user", description=f"{_plural(new_users, 'new user registration')} today"),
    ]

    logger.info("System analytics computed for timeframe '%s' over %d enrollments", timeframe, total_enrollments)
    return analytics_model.SystemAnalytics(
        timeframe=timeframe,
        overview=overview,
        course_stats=course_stats,
        enrollment_trends=_monthly_trend(times, now),
        top_courses=_top_courses(db, df),
        recent_activity=recent_activity,
    )
