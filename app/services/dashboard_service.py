# /app/services/dashboard_service.py

"""
Read-only aggregations behind the four role dashboards.

Nothing here writes. Every function pulls rows through the `DatabaseService`
and shapes them into the contracts of `app.models.dashboard_model`.
"""

from typing import List

from ..core.exceptions import NotFoundError
from ..db.base import Assignment, Class, User
from ..models import dashboard_model
from ..models.enrollment_model import EnrollmentWithCourse
from ..models.enums import AssignmentStatus, AttendanceStatus, CourseStatus, EnrollmentStatus, UserRole
from ..models.user_model import UserSummary
from .database_helpers.query_helpers import utc_now
from .database_service import DatabaseService

# Dashboards count a record as attended only when the student showed up.
PRESENT_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE)


# --- Shared helpers ---

def _upcoming_class(class_obj: Class) -> dashboard_model.UpcomingClass:
    return dashboard_model.UpcomingClass(
        id=class_obj.id,
        title=class_obj.title,
        start_time=class_obj.start_time,
        course_title=class_obj.course.title,
    )


def _upcoming_assignment(assignment: Assignment) -> dashboard_model.UpcomingAssignment:
    return dashboard_model.UpcomingAssignment(
        id=assignment.id,
        title=assignment.title,
        due_date=assignment.due_date,
        course_title=assignment.course.title,
    )


def student_attendance_rate(db: DatabaseService, student_id: str) -> int:
    """Percent of the student's records marked present or late; 100 with no records."""
    counts = dict(db.count_attendance_by_status(student_id))
    total = sum(counts.values())
    if not total:
        return 100
    attended = sum(counts.get(status, 0) for status in PRESENT_STATUSES)
    return round(attended / total * 100)


def _average(values: List[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def _student_view(db: DatabaseService, student_id: str):
    enrollments = db.get_enrollments_for_student(student_id)
    course_ids = [e.course_id for e in enrollments]
    now = utc_now()
    upcoming_classes = db.get_upcoming_classes_for_courses(course_ids, now, limit=5)
    assignments = db.get_upcoming_assignments_for_courses(course_ids, now, limit=3)

    stats = dashboard_model.StudentDashboardStats(
        total_courses=len(enrollments),
        completed_courses=sum(1 for e in enrollments if e.status == EnrollmentStatus.COMPLETED),
        average_grade=_average([e.grade for e in enrollments if e.grade is not None]),
        total_credits=sum(e.course.credits or 0 for e in enrollments),
        attendance_rate=student_attendance_rate(db, student_id),
        pending_assignments_count=len(assignments),
    )
    return (
        stats,
        [EnrollmentWithCourse.model_validate(e) for e in enrollments],
        [_upcoming_class(c) for c in upcoming_classes],
        [_upcoming_assignment(a) for a in assignments],
    )


def _recent_activity(enrollments) -> List[dashboard_model.ActivityItem]:
    return [
        dashboard_model.ActivityItem(
            type="enrollment",
            description=f'{e.student.full_name} enrolled in "{e.course.title}"',
            time=e.enrolled_at,
        )
        for e in enrollments
    ]


# --- Core Public Functions ---

def get_student_dashboard(db: DatabaseService, student: User) -> dashboard_model.StudentDashboard:
    stats, enrolled_courses, upcoming_classes, assignments = _student_view(db, student.id)
    return dashboard_model.StudentDashboard(
        stats=stats,
        enrolled_courses=enrolled_courses,
        upcoming_classes=upcoming_classes,
        assignments=assignments,
    )


def get_teacher_dashboard(db: DatabaseService, teacher: User) -> dashboard_model.TeacherDashboard:
    course_ids = [c.id for c in db.get_courses_taught_by(teacher.id)]
    # Published assignments are the ones that can still receive work to grade.
    stats = dashboard_model.TeacherDashboardStats(
        total_courses=len(course_ids),
        total_students=db.count_distinct_students(course_ids),
        pending_grading=db.count_assignments_for_courses(course_ids, AssignmentStatus.PUBLISHED),
        upcoming_classes=db.count_upcoming_classes_for_instructor(teacher.id, utc_now()),
    )
    return dashboard_model.TeacherDashboard(
        stats=stats,
        recent_activity=_recent_activity(db.get_recent_enrollments(limit=5, course_ids=course_ids)),
    )


def get_admin_dashboard(db: DatabaseService) -> dashboard_model.AdminDashboard:
    by_role = dict(db.count_users_by_role())
    stats = dashboard_model.AdminDashboardStats(
        total_users=sum(by_role.values()),
        total_students=by_role.get(UserRole.STUDENT, 0),
        total_teachers=by_role.get(UserRole.TEACHER, 0),
        total_parents=by_role.get(UserRole.PARENT, 0),
        total_courses=db.count_courses(),
        published_courses=db.count_courses(CourseStatus.PUBLISHED),
        draft_courses=db.count_courses(CourseStatus.DRAFT),
        total_enrollments=db.count_enrollments(),
    )
    return dashboard_model.AdminDashboard(
        stats=stats,
        recent_activity=_recent_activity(db.get_recent_enrollments(limit=5)),
    )


def _child_overview(db: DatabaseService, child: User) -> dashboard_model.ChildOverview:
    enrollments = db.get_enrollments_for_student(child.id)
    upcoming = db.get_upcoming_classes_for_courses([e.course_id for e in enrollments], utc_now(), limit=1)
    return dashboard_model.ChildOverview(
        id=child.id,
        name=child.full_name,
        avatar=child.avatar,
        attendance_rate=student_attendance_rate(db, child.id),
        courses=[
            dashboard_model.ChildCourse(id=e.course_id, name=e.course.title, progress=e.progress, grade=e.grade)
            for e in enrollments
        ],
        next_class=_upcoming_class(upcoming[0]) if upcoming else None,
    )


def get_parent_dashboard(db: DatabaseService, parent: User) -> dashboard_model.ParentDashboard:
    children = [_child_overview(db, child) for child in db.get_children(parent.id)]
    grades = [course.grade for child in children for course in child.courses if course.grade is not None]
    stats = dashboard_model.ParentDashboardStats(
        total_children=len(children),
        total_courses=sum(len(child.courses) for child in children),
        average_grade=_average(grades),
        attendance_rate=round(sum(c.attendance_rate for c in children) / len(children)) if children else 0,
    )
    return dashboard_model.ParentDashboard(stats=stats, children=children)


def get_child_detail(db: DatabaseService, parent: User, child_id: str) -> dashboard_model.ChildDetail:
    child = db.get_child(parent.id, child_id)
    if not child:
        raise NotFoundError("Child not found or not authorized")
    stats, enrolled_courses, upcoming_classes, assignments = _student_view(db, child.id)
    return dashboard_model.ChildDetail(
        student=UserSummary.model_validate(child),
        stats=stats,
        enrolled_courses=enrolled_courses,
        upcoming_classes=upcoming_classes,
        assignments=assignments,
    )
