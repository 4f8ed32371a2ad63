"""Tests for reading, editing and publishing courses."""

import pytest

from bytecourses.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from bytecourses.models.schemas import CourseContent, CourseStatus

from .factories import ADMIN, AUTHOR, OTHER_STUDENT, make_content


@pytest.fixture
def draft_course(services):
    proposal_service, _ = services
    proposal = proposal_service.create(AUTHOR, make_content(title="Go", summary="Concurrency"))
    proposal_service.transition(proposal.id, AUTHOR, "submit")
    proposal_service.transition(proposal.id, ADMIN, "approve")
    return proposal_service.create_course(proposal.id, AUTHOR)


@pytest.fixture
def course_service(services):
    return services[1]


def test_draft_course_hidden_from_others(course_service, draft_course):
    assert course_service.get(draft_course.id, AUTHOR).id == draft_course.id
    assert course_service.get(draft_course.id, ADMIN).id == draft_course.id

    with pytest.raises(NotFoundError):
        course_service.get(draft_course.id, OTHER_STUDENT)
    with pytest.raises(NotFoundError):
        course_service.get(draft_course.id, None)


def test_missing_course_not_found(course_service, draft_course):
    with pytest.raises(NotFoundError):
        course_service.get(draft_course.id + 1000, ADMIN)


def test_instructor_updates_content(course_service, draft_course):
    updated = course_service.update(
        draft_course.id,
        AUTHOR,
        CourseContent(title="  Go in Depth ", summary="Channels and select"),
    )

    assert updated.title == "Go in Depth"
    assert updated.summary == "Channels and select"
    assert updated.target_audience == ""
    assert updated.status == CourseStatus.DRAFT


def test_admin_cannot_update_course(course_service, draft_course):
    with pytest.raises(ForbiddenError):
        course_service.update(draft_course.id, ADMIN, CourseContent(title="X", summary="Y"))

    assert course_service.get(draft_course.id, AUTHOR).title == "Go"


def test_publish_once(course_service, draft_course):
    published = course_service.publish(draft_course.id, AUTHOR)
    assert published.status == CourseStatus.PUBLISHED

    with pytest.raises(ConflictError):
        course_service.publish(draft_course.id, AUTHOR)


def test_publish_requires_instructor(course_service, draft_course):
    with pytest.raises(ForbiddenError):
        course_service.publish(draft_course.id, ADMIN)

    assert course_service.get(draft_course.id, AUTHOR).status == CourseStatus.DRAFT


def test_published_course_is_public_and_listed(course_service, draft_course):
    assert course_service.list_published() == []

    course_service.publish(draft_course.id, AUTHOR)

    assert course_service.get(draft_course.id, None).status == CourseStatus.PUBLISHED
    assert course_service.get(draft_course.id, OTHER_STUDENT).id == draft_course.id
    assert [c.id for c in course_service.list_published()] == [draft_course.id]
