# /app/models/analytics_model.py

from typing import List

from .common_model import APIModel


class AnalyticsOverview(APIModel):
    total_users: int
    total_courses: int
    total_enrollments: int
    active_users: int
    growth_rate: float
    total_students: int
    total_teachers: int
    total_parents: int


class CourseStats(APIModel):
    published: int
    draft: int
    archived: int
    average_enrollment: int


class EnrollmentTrendPoint(APIModel):
    month: str
    count: int


class TopCourse(APIModel):
    course_id: str
    title: str
    enrollments: int


class ActivityItem(APIModel):
    type: str
    description: str
    time: str = "24 hours"


class SystemAnalytics(APIModel):
    timeframe: str
    overview: AnalyticsOverview
    course_stats: CourseStats
    enrollment_trends: List[EnrollmentTrendPoint]
    top_courses: List[TopCourse]
    recent_activity: List[ActivityItem]
