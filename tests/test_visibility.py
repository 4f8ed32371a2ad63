"""Tests for the proposal and course visibility rules."""

from datetime import datetime, timezone

import pytest

from bytecourses.models.schemas import CourseRecord, CourseStatus, ProposalRecord, ProposalStatus
from bytecourses.services.visibility import can_view_course, can_view_proposal

from .factories import ADMIN, AUTHOR, OTHER_STUDENT

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def proposal_in(status: ProposalStatus, author_id: int = AUTHOR.id) -> ProposalRecord:
    return ProposalRecord(
        id=10,
        author_id=author_id,
        title="T",
        summary="S",
        target_audience="",
        learning_objectives="",
        outline="",
        assumed_prerequisites="",
        qualifications="",
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


def course_in(status: CourseStatus) -> CourseRecord:
    return CourseRecord(
        id=5,
        proposal_id=10,
        instructor_id=AUTHOR.id,
        title="T",
        summary="S",
        target_audience="",
        learning_objectives="",
        assumed_prerequisites="",
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.mark.parametrize("status", list(ProposalStatus))
def test_author_always_sees_own_proposal(status):
    assert can_view_proposal(AUTHOR, proposal_in(status))


@pytest.mark.parametrize("status,visible", [
    (ProposalStatus.DRAFT, False),
    (ProposalStatus.SUBMITTED, True),
    (ProposalStatus.CHANGES_REQUESTED, True),
    (ProposalStatus.APPROVED, True),
    (ProposalStatus.REJECTED, True),
    (ProposalStatus.WITHDRAWN, False),
])
def test_admin_sees_only_reviewable_proposals(status, visible):
    assert can_view_proposal(ADMIN, proposal_in(status)) is visible


def test_admin_sees_own_draft():
    assert can_view_proposal(ADMIN, proposal_in(ProposalStatus.DRAFT, author_id=ADMIN.id))


@pytest.mark.parametrize("status", list(ProposalStatus))
def test_other_students_and_anonymous_see_nothing(status):
    proposal = proposal_in(status)
    assert not can_view_proposal(OTHER_STUDENT, proposal)
    assert not can_view_proposal(None, proposal)


def test_published_course_is_public():
    course = course_in(CourseStatus.PUBLISHED)
    assert can_view_course(None, course)
    assert can_view_course(OTHER_STUDENT, course)


def test_draft_course_visible_to_instructor_and_admin_only():
    course = course_in(CourseStatus.DRAFT)
    assert can_view_course(AUTHOR, course)
    assert can_view_course(ADMIN, course)
    assert not can_view_course(OTHER_STUDENT, course)
    assert not can_view_course(None, course)
