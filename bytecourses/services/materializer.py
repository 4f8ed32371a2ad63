"""
Turns an approved proposal into its course, at most once.
"""

import logging

from ..core.exceptions import ConflictError, NotFoundError
from ..core.logging import log_course_event
from ..core.monitoring import record_materialization
from ..models.schemas import (
    COURSE_CONTENT_FIELDS,
    Actor,
    CourseContent,
    CourseRecord,
    ProposalRecord,
    ProposalStatus,
)
from ..repositories.base import CourseRepository, ProposalRepository
from .visibility import is_author

logger = logging.getLogger(__name__)


def course_content_from(proposal: ProposalRecord) -> CourseContent:
    """Copy the course fields verbatim from a proposal."""
    return CourseContent.model_construct(
        **{name: getattr(proposal, name) for name in COURSE_CONTENT_FIELDS}
    )


class CourseMaterializer:
    """Creates the single course that belongs to an approved proposal."""

    def __init__(self, proposals: ProposalRepository, courses: CourseRepository):
        self.proposals = proposals
        self.courses = courses

    def materialize(self, proposal_id: int, actor: Actor) -> CourseRecord:
        """
        Create the course for ``proposal_id``.

        Approved is a terminal status, so the status check cannot go stale
        before the insert; the repository's ``create_if_absent`` settles races
        between concurrent callers.

        Args:
            proposal_id: Proposal to materialize
            actor: Caller; must be the proposal's author

        Returns:
            The newly created draft course

        Raises:
            NotFoundError: Proposal missing or not authored by the caller
            ConflictError: Proposal not approved, or already materialized
                (payload carries the existing ``course_id``)
        """
        proposal = self.proposals.get(proposal_id)
        if proposal is None or not is_author(actor, proposal):
            raise NotFoundError("Proposal not found")

        if proposal.status != ProposalStatus.APPROVED:
            raise ConflictError(
                "Only approved proposals can become courses",
                payload={"status": proposal.status.value},
            )

        course, existed = self.courses.create_if_absent(
            proposal_id=proposal.id,
            instructor_id=proposal.author_id,
            content=course_content_from(proposal),
        )

        if existed:
            record_materialization("existing")
            logger.info(
                f"Course already exists for proposal {proposal.id}",
                extra={"proposal_id": proposal.id, "course_id": course.id, "actor_id": actor.id},
            )
            raise ConflictError(
                "A course already exists for this proposal",
                payload={"course_id": course.id},
            )

        record_materialization("created")
        log_course_event(
            "course.materialized",
            course_id=course.id,
            actor_id=actor.id,
            proposal_id=proposal.id,
            title=course.title,
        )
        return course
