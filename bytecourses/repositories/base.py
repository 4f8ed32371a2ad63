"""
Repository contracts for proposals and courses.

Every mutating method here is atomic with respect to the record it touches:
guarded updates either apply completely or report that the guard failed,
and ``CourseRepository.create_if_absent`` never yields two courses for one
proposal.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from ..models.schemas import (
    CourseContent,
    CourseRecord,
    ProposalContent,
    ProposalRecord,
    ProposalStatus,
)


class ProposalRepository(ABC):
    """Durable store of proposals."""

    @abstractmethod
    def create(self, author_id: int, content: ProposalContent) -> ProposalRecord:
        """Insert a new draft proposal."""

    @abstractmethod
    def get(self, proposal_id: int) -> Optional[ProposalRecord]:
        pass

    @abstractmethod
    def list_by_author(self, author_id: int) -> List[ProposalRecord]:
        """All proposals of one author, oldest first."""

    @abstractmethod
    def list_by_statuses(self, statuses: Iterable[ProposalStatus]) -> List[ProposalRecord]:
        """All proposals in any of ``statuses``, oldest first."""

    @abstractmethod
    def replace_content(
        self,
        proposal_id: int,
        content: ProposalContent,
        allowed_statuses: Iterable[ProposalStatus],
    ) -> Optional[ProposalRecord]:
        """
        Overwrite every content field if the current status is allowed.

        Returns:
            The updated proposal, or None when the record is missing or its
            status is not in ``allowed_statuses``
        """

    @abstractmethod
    def compare_and_set_status(
        self,
        proposal_id: int,
        expected: ProposalStatus,
        new: ProposalStatus,
        review_notes: Optional[str] = None,
        reviewer_id: Optional[int] = None,
    ) -> Optional[ProposalRecord]:
        """
        Move ``expected`` to ``new`` in one step.

        ``review_notes`` and ``reviewer_id`` are written only when given.

        Returns:
            The updated proposal, or None when the status was not ``expected``
        """

    @abstractmethod
    def delete_if_status(self, proposal_id: int, expected: ProposalStatus) -> bool:
        """Hard-delete the proposal if it is in ``expected``; True on delete."""


class CourseRepository(ABC):
    """Durable store of courses."""

    @abstractmethod
    def get(self, course_id: int) -> Optional[CourseRecord]:
        pass

    @abstractmethod
    def get_by_proposal(self, proposal_id: int) -> Optional[CourseRecord]:
        pass

    @abstractmethod
    def create_if_absent(
        self,
        proposal_id: int,
        instructor_id: int,
        content: CourseContent,
    ) -> Tuple[CourseRecord, bool]:
        """
        Create a draft course for ``proposal_id`` unless one exists.

        Returns:
            (course, existed). When ``existed`` is True the course is the one
            created earlier and nothing was written.
        """

    @abstractmethod
    def replace_content(self, course_id: int, content: CourseContent) -> Optional[CourseRecord]:
        pass

    @abstractmethod
    def publish(self, course_id: int) -> Optional[CourseRecord]:
        """Move a draft course to published; None if it was not a draft."""

    @abstractmethod
    def list_published(self) -> List[CourseRecord]:
        pass
