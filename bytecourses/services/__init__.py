"""Services package."""

from .course_service import CourseService
from .materializer import CourseMaterializer
from .proposal_service import ProposalService
from .state_machine import ProposalAction

__all__ = [
    "ProposalService",
    "CourseService",
    "CourseMaterializer",
    "ProposalAction",
]
