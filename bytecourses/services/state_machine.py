"""
Proposal review state machine.

The transition table is the only place a proposal status is allowed to
change. ``decide`` is a pure function: it never touches storage, so callers
apply its result with a compare-and-set keyed on the status it was given.
"""

from enum import Enum
from typing import Dict, FrozenSet, Tuple

from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..models.schemas import ProposalStatus


class ProposalAction(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request-changes"
    WITHDRAW = "withdraw"

    @classmethod
    def parse(cls, name: str) -> "ProposalAction":
        """Resolve an action name, rejecting unknown names as bad input."""
        try:
            return cls(name)
        except ValueError:
            raise ValidationError(f"Unknown proposal action: {name!r}")

    @property
    def is_review(self) -> bool:
        """Review actions are performed by admins and may carry notes."""
        return self in REVIEW_ACTIONS


REVIEW_ACTIONS: FrozenSet[ProposalAction] = frozenset({
    ProposalAction.APPROVE,
    ProposalAction.REJECT,
    ProposalAction.REQUEST_CHANGES,
})

TRANSITIONS: Dict[Tuple[ProposalStatus, ProposalAction], ProposalStatus] = {
    (ProposalStatus.DRAFT, ProposalAction.SUBMIT): ProposalStatus.SUBMITTED,
    (ProposalStatus.CHANGES_REQUESTED, ProposalAction.SUBMIT): ProposalStatus.SUBMITTED,
    (ProposalStatus.SUBMITTED, ProposalAction.APPROVE): ProposalStatus.APPROVED,
    (ProposalStatus.SUBMITTED, ProposalAction.REJECT): ProposalStatus.REJECTED,
    (ProposalStatus.SUBMITTED, ProposalAction.REQUEST_CHANGES): ProposalStatus.CHANGES_REQUESTED,
    (ProposalStatus.SUBMITTED, ProposalAction.WITHDRAW): ProposalStatus.WITHDRAWN,
    (ProposalStatus.CHANGES_REQUESTED, ProposalAction.WITHDRAW): ProposalStatus.WITHDRAWN,
}

EDITABLE_STATUSES: FrozenSet[ProposalStatus] = frozenset({
    ProposalStatus.DRAFT,
    ProposalStatus.CHANGES_REQUESTED,
})

DELETABLE_STATUSES: FrozenSet[ProposalStatus] = frozenset({ProposalStatus.DRAFT})


def can_edit(status: ProposalStatus) -> bool:
    return status in EDITABLE_STATUSES


def can_delete(status: ProposalStatus) -> bool:
    return status in DELETABLE_STATUSES


def authorize(action: ProposalAction, *, is_admin: bool, is_owner: bool) -> None:
    """
    Check the actor may perform ``action`` on a proposal they can already see.

    Review actions need the admin role. Author actions need ownership; a
    non-owner gets the same answer as for a missing proposal.

    Raises:
        ForbiddenError: Non-admin attempting a review action
        NotFoundError: Non-owner attempting an author action
    """
    if action.is_review:
        if not is_admin:
            raise ForbiddenError(f"Only administrators may {action.value} proposals")
    elif not is_owner:
        raise NotFoundError("Proposal not found")


def next_status(status: ProposalStatus, action: ProposalAction) -> ProposalStatus:
    """
    Look up the target status for ``action`` taken from ``status``.

    Raises:
        ConflictError: The table has no entry for this pair
    """
    target = TRANSITIONS.get((status, action))
    if target is None:
        raise ConflictError(
            f"Cannot {action.value} a proposal in status '{status.value}'",
            payload={"status": status.value},
        )
    return target


def decide(
    status: ProposalStatus,
    action: ProposalAction,
    *,
    is_admin: bool,
    is_owner: bool,
) -> ProposalStatus:
    """Authorize and resolve a transition in one step."""
    authorize(action, is_admin=is_admin, is_owner=is_owner)
    return next_status(status, action)

