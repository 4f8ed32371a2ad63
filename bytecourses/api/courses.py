"""
Course API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ..models.schemas import Actor, CourseContent, CourseListResponse, CourseRecord, ErrorResponse
from ..services.course_service import CourseService
from ..utils.auth import get_current_actor, get_optional_actor
from .deps import get_course_service

router = APIRouter(
    prefix="/courses",
    tags=["Courses"],
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)


@router.get("", response_model=CourseListResponse)
def list_courses(service: CourseService = Depends(get_course_service)):
    """List published courses. No authentication required."""
    items = service.list_published()
    return CourseListResponse(items=items, total=len(items))


@router.get("/{course_id}", response_model=CourseRecord)
def get_course(
    course_id: int,
    service: CourseService = Depends(get_course_service),
    actor: Optional[Actor] = Depends(get_optional_actor),
):
    """Get a course visible to the caller."""
    return service.get(course_id, actor)


@router.patch("/{course_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_course(
    course_id: int,
    content: CourseContent,
    service: CourseService = Depends(get_course_service),
    actor: Actor = Depends(get_current_actor),
):
    """Replace the course content fields. Instructor only."""
    service.update(course_id, actor, content)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{course_id}/publish", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def publish_course(
    course_id: int,
    service: CourseService = Depends(get_course_service),
    actor: Actor = Depends(get_current_actor),
):
    """Publish a draft course. Publishing twice answers 409."""
    service.publish(course_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
