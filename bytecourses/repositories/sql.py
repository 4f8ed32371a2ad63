"""
SQLAlchemy-backed repositories.

Status changes are single ``UPDATE ... WHERE id = :id AND status = :expected``
statements, so the database serializes concurrent writers on a row. Course
uniqueness per proposal rests on the unique index on ``courses.proposal_id``.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.base import utcnow
from ..models.orm import Course, Proposal
from ..models.schemas import (
    CourseContent,
    CourseRecord,
    CourseStatus,
    ProposalContent,
    ProposalRecord,
    ProposalStatus,
)
from .base import CourseRepository, ProposalRepository

logger = logging.getLogger(__name__)


class SqlProposalRepository(ProposalRepository):
    """Proposal store on a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _load(self, proposal_id: int) -> Optional[Proposal]:
        stmt = (
            select(Proposal)
            .where(Proposal.id == proposal_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _guarded_update(self, proposal_id: int, guard, values: dict) -> Optional[ProposalRecord]:
        stmt = (
            update(Proposal)
            .where(Proposal.id == proposal_id, guard)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                return None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get(proposal_id)

    def create(self, author_id: int, content: ProposalContent) -> ProposalRecord:
        proposal = Proposal(
            author_id=author_id,
            status=ProposalStatus.DRAFT,
            review_notes="",
            **content.model_dump(),
        )
        self.db.add(proposal)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get(proposal.id)

    def get(self, proposal_id: int) -> Optional[ProposalRecord]:
        proposal = self._load(proposal_id)
        if proposal is None:
            return None
        return ProposalRecord.model_validate(proposal)

    def list_by_author(self, author_id: int) -> List[ProposalRecord]:
        stmt = (
            select(Proposal)
            .where(Proposal.author_id == author_id)
            .order_by(Proposal.created_at, Proposal.id)
            .execution_options(populate_existing=True)
        )
        return [ProposalRecord.model_validate(p) for p in self.db.execute(stmt).scalars()]

    def list_by_statuses(self, statuses: Iterable[ProposalStatus]) -> List[ProposalRecord]:
        stmt = (
            select(Proposal)
            .where(Proposal.status.in_(list(statuses)))
            .order_by(Proposal.created_at, Proposal.id)
            .execution_options(populate_existing=True)
        )
        return [ProposalRecord.model_validate(p) for p in self.db.execute(stmt).scalars()]

    def replace_content(
        self,
        proposal_id: int,
        content: ProposalContent,
        allowed_statuses: Iterable[ProposalStatus],
    ) -> Optional[ProposalRecord]:
        return self._guarded_update(
            proposal_id,
            Proposal.status.in_(list(allowed_statuses)),
            content.model_dump(),
        )

    def compare_and_set_status(
        self,
        proposal_id: int,
        expected: ProposalStatus,
        new: ProposalStatus,
        review_notes: Optional[str] = None,
        reviewer_id: Optional[int] = None,
    ) -> Optional[ProposalRecord]:
        values = {"status": new}
        if review_notes is not None:
            values["review_notes"] = review_notes
        if reviewer_id is not None:
            values["reviewer_id"] = reviewer_id

        return self._guarded_update(proposal_id, Proposal.status == expected, values)

    def delete_if_status(self, proposal_id: int, expected: ProposalStatus) -> bool:
        stmt = (
            delete(Proposal)
            .where(Proposal.id == proposal_id, Proposal.status == expected)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            deleted = result.rowcount == 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return deleted


class SqlCourseRepository(CourseRepository):
    """Course store on a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _select(self):
        return select(Course).execution_options(populate_existing=True)

    def get(self, course_id: int) -> Optional[CourseRecord]:
        course = self.db.execute(self._select().where(Course.id == course_id)).scalar_one_or_none()
        return CourseRecord.model_validate(course) if course else None

    def get_by_proposal(self, proposal_id: int) -> Optional[CourseRecord]:
        course = self.db.execute(
            self._select().where(Course.proposal_id == proposal_id)
        ).scalar_one_or_none()
        return CourseRecord.model_validate(course) if course else None

    def create_if_absent(
        self,
        proposal_id: int,
        instructor_id: int,
        content: CourseContent,
    ) -> Tuple[CourseRecord, bool]:
        existing = self.get_by_proposal(proposal_id)
        if existing is not None:
            return existing, True

        course = Course(
            proposal_id=proposal_id,
            instructor_id=instructor_id,
            status=CourseStatus.DRAFT,
            **content.model_dump(),
        )
        self.db.add(course)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request inserted the course between our read and insert
            self.db.rollback()
            existing = self.get_by_proposal(proposal_id)
            if existing is None:
                raise
            logger.info(f"Course for proposal {proposal_id} created concurrently")
            return existing, True
        except Exception:
            self.db.rollback()
            raise

        return self.get(course.id), False

    def replace_content(self, course_id: int, content: CourseContent) -> Optional[CourseRecord]:
        stmt = (
            update(Course)
            .where(Course.id == course_id)
            .values(updated_at=utcnow(), **content.model_dump())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                return None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get(course_id)

    def publish(self, course_id: int) -> Optional[CourseRecord]:
        stmt = (
            update(Course)
            .where(Course.id == course_id, Course.status == CourseStatus.DRAFT)
            .values(status=CourseStatus.PUBLISHED, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount != 1:
                self.db.rollback()
                return None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.get(course_id)

    def list_published(self) -> List[CourseRecord]:
        stmt = (
            self._select()
            .where(Course.status == CourseStatus.PUBLISHED)
            .order_by(Course.created_at.desc(), Course.id.desc())
        )
        return [CourseRecord.model_validate(c) for c in self.db.execute(stmt).scalars()]
