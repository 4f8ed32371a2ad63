"""In-process repositories, used for local runs and service tests."""

import itertools
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.base import utcnow
from ..models.schemas import (
    CourseContent,
    CourseRecord,
    CourseStatus,
    ProposalContent,
    ProposalRecord,
    ProposalStatus,
)
from .base import CourseRepository, ProposalRepository


class InMemoryProposalRepository(ProposalRepository):
    """Proposal store guarded by a single lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._proposals: Dict[int, ProposalRecord] = {}

    def create(self, author_id: int, content: ProposalContent) -> ProposalRecord:
        now = utcnow()
        with self._lock:
            proposal = ProposalRecord(
                id=next(self._ids),
                author_id=author_id,
                status=ProposalStatus.DRAFT,
                review_notes="",
                reviewer_id=None,
                created_at=now,
                updated_at=now,
                **content.model_dump(),
            )
            self._proposals[proposal.id] = proposal
            return proposal.model_copy()

    def get(self, proposal_id: int) -> Optional[ProposalRecord]:
        with self._lock:
            proposal = self._proposals.get(proposal_id)
            return proposal.model_copy() if proposal else None

    def _sorted(self, proposals: Iterable[ProposalRecord]) -> List[ProposalRecord]:
        return [p.model_copy() for p in sorted(proposals, key=lambda p: (p.created_at, p.id))]

    def list_by_author(self, author_id: int) -> List[ProposalRecord]:
        with self._lock:
            return self._sorted(p for p in self._proposals.values() if p.author_id == author_id)

    def list_by_statuses(self, statuses: Iterable[ProposalStatus]) -> List[ProposalRecord]:
        wanted = set(statuses)
        with self._lock:
            return self._sorted(p for p in self._proposals.values() if p.status in wanted)

    def replace_content(
        self,
        proposal_id: int,
        content: ProposalContent,
        allowed_statuses: Iterable[ProposalStatus],
    ) -> Optional[ProposalRecord]:
        allowed = set(allowed_statuses)
        with self._lock:
            current = self._proposals.get(proposal_id)
            if current is None or current.status not in allowed:
                return None
            updated = current.model_copy(update={**content.model_dump(), "updated_at": utcnow()})
            self._proposals[proposal_id] = updated
            return updated.model_copy()

    def compare_and_set_status(
        self,
        proposal_id: int,
        expected: ProposalStatus,
        new: ProposalStatus,
        review_notes: Optional[str] = None,
        reviewer_id: Optional[int] = None,
    ) -> Optional[ProposalRecord]:
        changes = {"status": new, "updated_at": utcnow()}
        if review_notes is not None:
            changes["review_notes"] = review_notes
        if reviewer_id is not None:
            changes["reviewer_id"] = reviewer_id

        with self._lock:
            current = self._proposals.get(proposal_id)
            if current is None or current.status != expected:
                return None
            updated = current.model_copy(update=changes)
            self._proposals[proposal_id] = updated
            return updated.model_copy()

    def delete_if_status(self, proposal_id: int, expected: ProposalStatus) -> bool:
        with self._lock:
            current = self._proposals.get(proposal_id)
            if current is None or current.status != expected:
                return False
            del self._proposals[proposal_id]
            return True


class InMemoryCourseRepository(CourseRepository):
    """Course store; the lock makes check-and-insert atomic per process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._courses: Dict[int, CourseRecord] = {}
        self._by_proposal: Dict[int, int] = {}

    def get(self, course_id: int) -> Optional[CourseRecord]:
        with self._lock:
            course = self._courses.get(course_id)
            return course.model_copy() if course else None

    def get_by_proposal(self, proposal_id: int) -> Optional[CourseRecord]:
        with self._lock:
            course_id = self._by_proposal.get(proposal_id)
            return self._courses[course_id].model_copy() if course_id is not None else None

    def create_if_absent(
        self,
        proposal_id: int,
        instructor_id: int,
        content: CourseContent,
    ) -> Tuple[CourseRecord, bool]:
        with self._lock:
            course_id = self._by_proposal.get(proposal_id)
            if course_id is not None:
                return self._courses[course_id].model_copy(), True

            now = utcnow()
            course = CourseRecord(
                id=next(self._ids),
                proposal_id=proposal_id,
                instructor_id=instructor_id,
                status=CourseStatus.DRAFT,
                created_at=now,
                updated_at=now,
                **content.model_dump(),
            )
            self._courses[course.id] = course
            self._by_proposal[proposal_id] = course.id
            return course.model_copy(), False

    def replace_content(self, course_id: int, content: CourseContent) -> Optional[CourseRecord]:
        with self._lock:
            current = self._courses.get(course_id)
            if current is None:
                return None
            updated = current.model_copy(update={**content.model_dump(), "updated_at": utcnow()})
            self._courses[course_id] = updated
            return updated.model_copy()

    def publish(self, course_id: int) -> Optional[CourseRecord]:
        with self._lock:
            current = self._courses.get(course_id)
            if current is None or current.status != CourseStatus.DRAFT:
                return None
            updated = current.model_copy(
                update={"status": CourseStatus.PUBLISHED, "updated_at": utcnow()}
            )
            self._courses[course_id] = updated
            return updated.model_copy()

    def list_published(self) -> List[CourseRecord]:
        with self._lock:
            published = [c for c in self._courses.values() if c.status == CourseStatus.PUBLISHED]
            published.sort(key=lambda c: (c.created_at, c.id), reverse=True)
            return [c.model_copy() for c in published]
