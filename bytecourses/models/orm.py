"""
SQLAlchemy ORM models for the database.
"""

from sqlalchemy import Column, Enum, ForeignKey, Index, Integer, String, Text

from .base import BaseModel
from .schemas import CourseStatus, ProposalStatus


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Proposal(BaseModel):
    """Course proposal drafted by an author and reviewed by an admin."""

    __tablename__ = "proposals"

    author_id = Column(Integer, nullable=False, index=True)

    # Content
    title = Column(String(128), nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    target_audience = Column(Text, nullable=False, default="")
    learning_objectives = Column(Text, nullable=False, default="")
    outline = Column(Text, nullable=False, default="")
    assumed_prerequisites = Column(Text, nullable=False, default="")
    qualifications = Column(Text, nullable=False, default="")

    # Review workflow
    status = Column(
        Enum(ProposalStatus, native_enum=False, length=32, values_callable=_enum_values),
        nullable=False,
        default=ProposalStatus.DRAFT,
        index=True,
    )
    review_notes = Column(Text, nullable=False, default="")
    reviewer_id = Column(Integer)

    def __repr__(self) -> str:
        return f"<Proposal(id={self.id}, title='{self.title}', status='{self.status}')>"


class Course(BaseModel):
    """Publishable course, usually materialized from an approved proposal."""

    __tablename__ = "courses"

    # One course per proposal
    proposal_id = Column(Integer, ForeignKey("proposals.id"), unique=True)
    instructor_id = Column(Integer, nullable=False, index=True)

    title = Column(String(128), nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    target_audience = Column(Text, nullable=False, default="")
    learning_objectives = Column(Text, nullable=False, default="")
    assumed_prerequisites = Column(Text, nullable=False, default="")

    status = Column(
        Enum(CourseStatus, native_enum=False, length=32, values_callable=_enum_values),
        nullable=False,
        default=CourseStatus.DRAFT,
        index=True,
    )

    __table_args__ = (
        Index("ix_courses_status_created_at", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title='{self.title}', status='{self.status}')>"
