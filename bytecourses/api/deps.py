"""
Service dependencies for the API routers.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..database.connection import get_db
from ..repositories.sql import SqlCourseRepository, SqlProposalRepository
from ..services.course_service import CourseService
from ..services.proposal_service import ProposalService


def get_proposal_service(db: Session = Depends(get_db)) -> ProposalService:
    return ProposalService(SqlProposalRepository(db), SqlCourseRepository(db))


def get_course_service(db: Session = Depends(get_db)) -> CourseService:
    return CourseService(SqlCourseRepository(db))
