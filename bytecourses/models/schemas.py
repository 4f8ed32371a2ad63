"""
Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field


# Enums
class UserRole(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


class ProposalStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    CHANGES_REQUESTED = "changes_requested"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class CourseStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


# Copied from the proposal when a course is materialized
COURSE_CONTENT_FIELDS = (
    "title",
    "summary",
    "target_audience",
    "learning_objectives",
    "assumed_prerequisites",
)


# Actor
class Actor(BaseModel):
    """Identity and role performing an operation."""

    id: int
    role: UserRole = UserRole.STUDENT

    class Config:
        frozen = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


# Proposal Schemas
class ProposalContent(BaseModel):
    """Proposal content fields. Used for create and full-replace update."""

    title: str = Field(..., min_length=1, max_length=128)
    summary: str = Field(..., min_length=1, max_length=2048)
    target_audience: str = Field("", max_length=2048)
    learning_objectives: str = Field("", max_length=2048)
    outline: str = Field("", max_length=2048)
    assumed_prerequisites: str = Field("", max_length=2048)
    qualifications: str = Field("", max_length=2048)

    class Config:
        str_strip_whitespace = True


class ReviewRequest(BaseModel):
    # Stored verbatim, so no whitespace stripping here
    review_notes: Optional[str] = Field(
        None,
        max_length=4096,
        validation_alias=AliasChoices("review_notes", "notes"),
    )


class ProposalRecord(BaseModel):
    id: int
    author_id: int
    title: str
    summary: str
    target_audience: str
    learning_objectives: str
    outline: str
    assumed_prerequisites: str
    qualifications: str
    status: ProposalStatus
    review_notes: str = ""
    reviewer_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Course Schemas
class CourseContent(BaseModel):
    title: str = Field(..., min_length=1, max_length=128)
    summary: str = Field(..., min_length=1, max_length=2048)
    target_audience: str = Field("", max_length=2048)
    learning_objectives: str = Field("", max_length=2048)
    assumed_prerequisites: str = Field("", max_length=2048)

    class Config:
        str_strip_whitespace = True


class CourseRecord(BaseModel):
    id: int
    proposal_id: Optional[int] = None
    instructor_id: int
    title: str
    summary: str
    target_audience: str
    learning_objectives: str
    assumed_prerequisites: str
    status: CourseStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CourseListResponse(BaseModel):
    items: List[CourseRecord]
    total: int


# Error Response
class ErrorResponse(BaseModel):
    detail: str
    error_code: Optional[str] = None
    status: Optional[str] = None
    course_id: Optional[int] = None
    timestamp: datetime
