"""Repositories package."""

from .base import CourseRepository, ProposalRepository
from .memory import InMemoryCourseRepository, InMemoryProposalRepository
from .sql import SqlCourseRepository, SqlProposalRepository

__all__ = [
    "ProposalRepository",
    "CourseRepository",
    "SqlProposalRepository",
    "SqlCourseRepository",
    "InMemoryProposalRepository",
    "InMemoryCourseRepository",
]
