"""Models package."""

from .base import Base, BaseModel, TimestampMixin
from .orm import Course, Proposal
from .schemas import (
    Actor,
    CourseContent,
    CourseRecord,
    CourseStatus,
    ProposalContent,
    ProposalRecord,
    ProposalStatus,
    UserRole,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "Proposal",
    "Course",
    "Actor",
    "UserRole",
    "ProposalStatus",
    "CourseStatus",
    "ProposalContent",
    "ProposalRecord",
    "CourseContent",
    "CourseRecord",
]
