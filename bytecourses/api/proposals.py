"""
Proposal API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from ..models.schemas import (
    Actor,
    CourseRecord,
    ErrorResponse,
    ProposalContent,
    ProposalRecord,
    ReviewRequest,
)
from ..services.proposal_service import ProposalService
from ..utils.auth import get_current_actor
from .deps import get_proposal_service

router = APIRouter(
    prefix="/proposals",
    tags=["Proposals"],
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)


@router.post("", response_model=ProposalRecord, status_code=status.HTTP_201_CREATED)
def create_proposal(
    content: ProposalContent,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Create a draft proposal authored by the caller.

    Args:
        content: Proposal content fields
        service: Proposal service
        actor: Authenticated caller

    Returns:
        The new proposal, including ``id``, ``status`` and ``author_id``
    """
    return service.create(actor, content)


@router.get("", response_model=List[ProposalRecord])
def list_proposals(
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """List every reviewable proposal across authors. Admin only."""
    return service.list_reviewable(actor)


@router.get("/mine", response_model=List[ProposalRecord])
def list_my_proposals(
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """List all of the caller's proposals in any status."""
    return service.list_mine(actor)


@router.get("/{proposal_id}", response_model=ProposalRecord)
def get_proposal(
    proposal_id: int,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Get proposal details.

    Raises:
        NotFoundError: If the proposal does not exist or is not visible
    """
    return service.get(proposal_id, actor)


@router.patch("/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def update_proposal(
    proposal_id: int,
    content: ProposalContent,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """Replace all content fields; omitted optional fields become empty."""
    service.update(proposal_id, actor, content)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_proposal(
    proposal_id: int,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """Delete a draft proposal owned by the caller."""
    service.delete(proposal_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{proposal_id}/actions/create-course",
    response_model=CourseRecord,
    status_code=status.HTTP_201_CREATED,
)
def create_course_from_proposal(
    proposal_id: int,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Create the course for an approved proposal.

    A repeated call answers 409 with the ``course_id`` of the first course.
    """
    return service.create_course(proposal_id, actor)


@router.post(
    "/{proposal_id}/actions/{action}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def proposal_action(
    proposal_id: int,
    action: str,
    review: Optional[ReviewRequest] = None,
    service: ProposalService = Depends(get_proposal_service),
    actor: Actor = Depends(get_current_actor),
):
    """
    Apply a lifecycle action: submit, approve, reject, request-changes or withdraw.

    Review actions accept an optional ``{"review_notes": "..."}`` body.
    """
    review_notes = review.review_notes if review else None
    service.transition(proposal_id, actor, action, review_notes=review_notes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
