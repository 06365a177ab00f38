# /tests/test_assignment_service.py

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ForbiddenError, InvalidReferenceError, NotFoundError
from app.db.base import Assignment
from app.models import assignment_model
from app.models.enums import AssignmentStatus, UserRole
from app.services import assignment_service, enrollment_service


@pytest.fixture
def setting(make_user, make_course):
    admin = make_user(role=UserRole.ADMIN)
    teacher = make_user(role=UserRole.TEACHER)
    return {
        "admin": admin,
        "teacher": teacher,
        "course": make_course(admin, instructors=[teacher]),
        "other_course": make_course(admin),
    }


def _create(course_id, class_id=None, due_in_days=7, **extra):
    return assignment_model.AssignmentCreate(
        title="Problem Set 1",
        description="Exercises from chapter one.",
        course_id=course_id,
        class_id=class_id,
        due_date=datetime.now(timezone.utc) + timedelta(days=due_in_days),
        **extra,
    )


def test_create_stamps_resources_with_uploader(db_service, setting):
    payload = _create(
        setting["course"].id,
        resources=[assignment_model.AssignmentResourceCreate(title="Notes", file_url="/files/notes.pdf")],
        rubric=[assignment_model.RubricCriterion(criterion="Accuracy", points=10)],
    )

    assignment = assignment_service.create_assignment(db_service, payload, setting["teacher"])

    assert assignment.resources[0]["uploaded_by"] == setting["teacher"].id
    assert assignment.rubric[0]["criterion"] == "Accuracy"
    assert assignment.status == AssignmentStatus.DRAFT


def test_class_must_belong_to_course(db_service, setting, make_class):
    foreign_class = make_class(setting["other_course"], setting["teacher"])
    with pytest.raises(InvalidReferenceError):
        assignment_service.create_assignment(
            db_service, _create(setting["course"].id, class_id=foreign_class.id), setting["teacher"]
        )


def test_unknown_course(db_service, setting):
    with pytest.raises(NotFoundError):
        assignment_service.create_assignment(db_service, _create("crs_missing"), setting["admin"])


def test_resources_are_appended_in_order(db_service, setting):
    assignment = assignment_service.create_assignment(db_service, _create(setting["course"].id), setting["teacher"])

    for title in ("Slides", "Reading"):
        assignment_service.add_resource(
            db_service, assignment.id,
            assignment_model.AssignmentResourceCreate(title=title, external_link="https://example.com"),
            setting["teacher"],
        )

    stored = db_service.get_assignment_by_id(assignment.id)
    assert [r["title"] for r in stored.resources] == ["Slides", "Reading"]


def test_students_see_only_enrolled_courses(db_service, setting, make_user):
    student = make_user()
    enrollment_service.enroll(db_service, student, setting["course"].id)
    visible = assignment_service.create_assignment(db_service, _create(setting["course"].id), setting["admin"])
    hidden = assignment_service.create_assignment(db_service, _create(setting["other_course"].id), setting["admin"])

    listing = assignment_service.list_assignments(db_service, student, 1, 10)

    assert [a.id for a in listing.assignments] == [visible.id]
    assert assignment_service.get_assignment(db_service, visible.id, student).id == visible.id
    with pytest.raises(ForbiddenError):
        assignment_service.get_assignment(db_service, hidden.id, student)


def test_upcoming_and_overdue_filters(db_service, setting):
    course_id = setting["course"].id
    upcoming = assignment_service.create_assignment(
        db_service, _create(course_id, status=AssignmentStatus.PUBLISHED), setting["admin"]
    )
    overdue = assignment_service.create_assignment(
        db_service, _create(course_id, due_in_days=-2, status=AssignmentStatus.PUBLISHED), setting["admin"]
    )
    assignment_service.create_assignment(db_service, _create(course_id), setting["admin"])

    upcoming_ids = [a.id for a in assignment_service.list_assignments(db_service, setting["admin"], 1, 10, upcoming=True).assignments]
    overdue_ids = [a.id for a in assignment_service.list_assignments(db_service, setting["admin"], 1, 10, overdue=True).assignments]

    assert upcoming_ids == [upcoming.id]
    assert overdue_ids == [overdue.id]


def test_delete_closes_and_hides(db_service, setting, make_user):
    assignment = assignment_service.create_assignment(db_service, _create(setting["course"].id), setting["teacher"])

    with pytest.raises(ForbiddenError):
        assignment_service.delete_assignment(db_service, assignment.id, make_user(role=UserRole.TEACHER))

    assignment_service.delete_assignment(db_service, assignment.id, setting["teacher"])
    with pytest.raises(NotFoundError):
        assignment_service.get_assignment_or_404(db_service, assignment.id)


def test_resource_append_keeps_entries_written_by_another_request(db_service, session, setting):
    assignment = assignment_service.create_assignment(db_service, _create(setting["course"].id), setting["teacher"])
    concurrent = {"title": "Syllabus", "external_link": "https://example.com/syllabus", "uploaded_by": setting["admin"].id}
    session.query(Assignment).filter(Assignment.id == assignment.id).update(
        {Assignment.resources: [concurrent]}, synchronize_session=False
    )

    assignment_service.add_resource(
        db_service, assignment.id,
        assignment_model.AssignmentResourceCreate(title="Slides", external_link="https://example.com/slides"),
        setting["teacher"],
    )

    stored = db_service.get_assignment_by_id(assignment.id)
    assert [r["title"] for r in stored.resources] == ["Syllabus", "Slides"]


def test_null_title_on_update_is_ignored(db_service, setting):
    assignment = assignment_service.create_assignment(db_service, _create(setting["course"].id), setting["teacher"])

    updated = assignment_service.update_assignment(
        db_service, assignment.id,
        assignment_model.AssignmentUpdate(title=None, instructions="Show your working."),
        setting["teacher"],
    )

    assert updated.title == "Problem Set 1"
    assert updated.instructions == "Show your working."
