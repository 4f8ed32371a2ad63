"""
Visibility rules for proposals and courses.

A proposal the caller may not see is reported exactly like a missing one.
"""

from typing import FrozenSet, Optional

from ..models.schemas import (
    Actor,
    CourseRecord,
    CourseStatus,
    ProposalRecord,
    ProposalStatus,
)

# Statuses an admin never sees unless they wrote the proposal
HIDDEN_FROM_REVIEWERS: FrozenSet[ProposalStatus] = frozenset({
    ProposalStatus.DRAFT,
    ProposalStatus.WITHDRAWN,
})

REVIEWABLE_STATUSES: FrozenSet[ProposalStatus] = frozenset(
    status for status in ProposalStatus if status not in HIDDEN_FROM_REVIEWERS
)


def is_author(actor: Optional[Actor], proposal: ProposalRecord) -> bool:
    return actor is not None and proposal.author_id == actor.id


def is_reviewable(status: ProposalStatus) -> bool:
    return status in REVIEWABLE_STATUSES


def can_view_proposal(actor: Optional[Actor], proposal: ProposalRecord) -> bool:
    if actor is None:
        return False
    if is_author(actor, proposal):
        return True
    return actor.is_admin and is_reviewable(proposal.status)


def is_instructor(actor: Optional[Actor], course: CourseRecord) -> bool:
    return actor is not None and course.instructor_id == actor.id


def can_view_course(actor: Optional[Actor], course: CourseRecord) -> bool:
    """Published courses are public; drafts are seen by admins and the instructor."""
    if course.status == CourseStatus.PUBLISHED:
        return True
    if actor is None:
        return False
    return actor.is_admin or is_instructor(actor, course)
