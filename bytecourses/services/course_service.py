"""
Service for reading, editing and publishing courses.
"""

from typing import List, Optional

from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError
from ..core.logging import log_course_event
from ..models.schemas import Actor, CourseContent, CourseRecord, CourseStatus
from ..repositories.base import CourseRepository
from .visibility import can_view_course, is_instructor


class CourseService:
    """Course operations. Course ids are not sensitive, so ownership failures are 403s."""

    def __init__(self, courses: CourseRepository):
        self.courses = courses

    def get(self, course_id: int, actor: Optional[Actor]) -> CourseRecord:
        course = self.courses.get(course_id)
        if course is None or not can_view_course(actor, course):
            raise NotFoundError("Course not found")
        return course

    def list_published(self) -> List[CourseRecord]:
        return self.courses.list_published()

    def _get_taught(self, course_id: int, actor: Actor) -> CourseRecord:
        course = self.get(course_id, actor)
        if not is_instructor(actor, course):
            raise ForbiddenError("Only the course instructor may change this course")
        return course

    def update(self, course_id: int, actor: Actor, content: CourseContent) -> CourseRecord:
        """Replace the course content fields."""
        self._get_taught(course_id, actor)

        updated = self.courses.replace_content(course_id, content)
        if updated is None:
            raise NotFoundError("Course not found")

        log_course_event(
            "course.updated",
            course_id=course_id,
            actor_id=actor.id,
            proposal_id=updated.proposal_id,
        )
        return updated

    def publish(self, course_id: int, actor: Actor) -> CourseRecord:
        """
        Publish a draft course. A second publish is a conflict.

        Raises:
            NotFoundError: Course missing or not visible
            ForbiddenError: Caller is not the instructor
            ConflictError: Course already published
        """
        course = self._get_taught(course_id, actor)
        if course.status == CourseStatus.PUBLISHED:
            raise ConflictError("Course is already published")

        published = self.courses.publish(course_id)
        if published is None:
            raise ConflictError("Course is already published")

        log_course_event(
            "course.published",
            course_id=course_id,
            actor_id=actor.id,
            proposal_id=published.proposal_id,
        )
        return published
