"""
Service orchestrating the proposal review lifecycle.
"""

import logging
from typing import List, Optional

from ..core.config import settings
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError
from ..core.logging import log_proposal_event, log_transition
from ..core.monitoring import record_proposal_transition, record_transition_conflict
from ..models.schemas import (
    Actor,
    CourseRecord,
    ProposalContent,
    ProposalRecord,
    ProposalStatus,
)
from ..repositories.base import CourseRepository, ProposalRepository
from . import state_machine
from .materializer import CourseMaterializer
from .state_machine import ProposalAction
from .visibility import REVIEWABLE_STATUSES, can_view_proposal, is_author

logger = logging.getLogger(__name__)


class ProposalService:
    """Applies visibility, the state machine and storage for each proposal operation."""

    def __init__(
        self,
        proposals: ProposalRepository,
        courses: CourseRepository,
        max_attempts: Optional[int] = None,
    ):
        self.proposals = proposals
        self.materializer = CourseMaterializer(proposals, courses)
        self.max_attempts = max_attempts or settings.TRANSITION_MAX_ATTEMPTS

    def _get_visible(self, proposal_id: int, actor: Actor) -> ProposalRecord:
        proposal = self.proposals.get(proposal_id)
        if proposal is None or not can_view_proposal(actor, proposal):
            raise NotFoundError("Proposal not found")
        return proposal

    def _get_owned(self, proposal_id: int, actor: Actor) -> ProposalRecord:
        proposal = self._get_visible(proposal_id, actor)
        if not is_author(actor, proposal):
            raise NotFoundError("Proposal not found")
        return proposal

    def _current_status_conflict(self, proposal_id: int, message: str) -> ConflictError:
        """Build the conflict for a guard that lost to a concurrent writer."""
        current = self.proposals.get(proposal_id)
        if current is None:
            raise NotFoundError("Proposal not found")
        return ConflictError(message, payload={"status": current.status.value})

    def create(self, actor: Actor, content: ProposalContent) -> ProposalRecord:
        """Create a draft proposal authored by ``actor``."""
        proposal = self.proposals.create(actor.id, content)

        log_proposal_event(
            "proposal.created",
            proposal_id=proposal.id,
            actor_id=actor.id,
            title=proposal.title,
            status=proposal.status.value,
        )
        return proposal

    def get(self, proposal_id: int, actor: Actor) -> ProposalRecord:
        return self._get_visible(proposal_id, actor)

    def list_mine(self, actor: Actor) -> List[ProposalRecord]:
        return self.proposals.list_by_author(actor.id)

    def list_reviewable(self, actor: Actor) -> List[ProposalRecord]:
        """Every proposal an admin can review, across authors."""
        if not actor.is_admin:
            raise ForbiddenError("Only administrators may list all proposals")
        return self.proposals.list_by_statuses(REVIEWABLE_STATUSES)

    def update(self, proposal_id: int, actor: Actor, content: ProposalContent) -> ProposalRecord:
        """
        Replace every content field of an editable proposal.

        Raises:
            NotFoundError: Proposal missing, invisible, or not the caller's
            ConflictError: Status does not allow edits
        """
        proposal = self._get_owned(proposal_id, actor)

        if not state_machine.can_edit(proposal.status):
            raise ConflictError(
                f"Proposal in status '{proposal.status.value}' cannot be edited",
                payload={"status": proposal.status.value},
            )

        updated = self.proposals.replace_content(
            proposal_id, content, state_machine.EDITABLE_STATUSES
        )
        if updated is None:
            raise self._current_status_conflict(proposal_id, "Proposal is no longer editable")

        log_proposal_event(
            "proposal.updated",
            proposal_id=proposal_id,
            actor_id=actor.id,
            status=updated.status.value,
        )
        return updated

    def delete(self, proposal_id: int, actor: Actor) -> None:
        """Hard-delete a draft proposal owned by ``actor``."""
        proposal = self._get_owned(proposal_id, actor)

        if not state_machine.can_delete(proposal.status):
            raise ConflictError(
                "Only draft proposals can be deleted",
                payload={"status": proposal.status.value},
            )

        if not self.proposals.delete_if_status(proposal_id, ProposalStatus.DRAFT):
            raise self._current_status_conflict(proposal_id, "Only draft proposals can be deleted")

        log_proposal_event(
            "proposal.deleted",
            proposal_id=proposal_id,
            actor_id=actor.id,
            title=proposal.title,
        )

    def transition(
        self,
        proposal_id: int,
        actor: Actor,
        action_name: str,
        review_notes: Optional[str] = None,
    ) -> ProposalRecord:
        """
        Apply a named action to a proposal.

        The decision is re-made from a fresh read whenever the
        compare-and-set loses, so a caller racing another writer sees the
        winner's status and fails against it.

        Args:
            proposal_id: Target proposal
            actor: Caller
            action_name: One of submit, approve, reject, request-changes, withdraw
            review_notes: Stored verbatim by review actions; ignored otherwise

        Returns:
            The proposal after the transition

        Raises:
            NotFoundError: Proposal missing or not visible
            ValidationError: Unknown action name
            ForbiddenError: Review action by a non-admin
            ConflictError: Action not applicable in the current status
        """
        proposal = self._get_visible(proposal_id, actor)
        action = ProposalAction.parse(action_name)

        notes = None
        reviewer_id = None
        if action.is_review:
            notes = review_notes if review_notes is not None else ""
            reviewer_id = actor.id

        for attempt in range(self.max_attempts):
            if attempt:
                proposal = self._get_visible(proposal_id, actor)

            try:
                new_status = state_machine.decide(
                    proposal.status,
                    action,
                    is_admin=actor.is_admin,
                    is_owner=is_author(actor, proposal),
                )
            except ConflictError:
                record_transition_conflict(action.value)
                raise

            updated = self.proposals.compare_and_set_status(
                proposal_id,
                expected=proposal.status,
                new=new_status,
                review_notes=notes,
                reviewer_id=reviewer_id,
            )
            if updated is not None:
                record_proposal_transition(proposal.status.value, new_status.value)
                log_transition(
                    proposal_id=proposal_id,
                    actor_id=actor.id,
                    action=action.value,
                    from_status=proposal.status.value,
                    to_status=new_status.value,
                    has_notes=bool(notes),
                )
                return updated

            logger.debug(
                f"Lost status race on proposal {proposal_id}, retrying",
                extra={"proposal_id": proposal_id, "attempt": attempt + 1},
            )

        record_transition_conflict(action.value)
        raise self._current_status_conflict(
            proposal_id, "Proposal was modified concurrently, try again"
        )

    def create_course(self, proposal_id: int, actor: Actor) -> CourseRecord:
        """Materialize the course for an approved proposal."""
        return self.materializer.materialize(proposal_id, actor)
