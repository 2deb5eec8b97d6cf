"""Access policy for case actions.

Every authorization decision about a case goes through authorize(), keyed
by the caller's role, the action, and the caller's relationship to the
case (filing client, assigned judge, or unrelated). Route dependencies
call it without a case for the role-only check; services call it again
with the loaded case.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from caseflow.core.exceptions import AuthorizationError
from caseflow.models.domain import Actor, CaseAction, Role

if TYPE_CHECKING:
    from caseflow.models.database import CaseRow

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class Relationship(StrEnum):
    """How the caller relates to a specific case."""

    OWNER = "owner"
    ASSIGNED_JUDGE = "assigned_judge"
    UNRELATED = "unrelated"


_ROLE_RULES: dict[CaseAction, tuple[frozenset[Role], str]] = {
    CaseAction.FILE: (frozenset({Role.CLIENT}), "Only clients can file cases"),
    CaseAction.CHECK_DUPLICATES: (
        frozenset({Role.CLIENT}),
        "Only clients can check for duplicate cases",
    ),
    CaseAction.VIEW: (frozenset(Role), "Access denied"),
    CaseAction.ASSIGN_JUDGE: (frozenset({Role.ADMIN}), "Only admins can assign cases"),
    CaseAction.UPDATE_STATUS: (
        frozenset({Role.ADMIN, Role.JUDGE}),
        "Only admins or the assigned judge can update case status",
    ),
    CaseAction.DELETE: (frozenset({Role.ADMIN}), "Only admins can delete cases"),
    CaseAction.MANAGE_HEARINGS: (frozenset({Role.JUDGE}), "Only judges can manage hearings"),
}

# (action, role) pairs that additionally require a relationship to the case.
# Pairs absent from this table need no relationship (e.g. Admin on anything).
_RELATION_RULES: dict[tuple[CaseAction, Role], tuple[frozenset[Relationship], str]] = {
    (CaseAction.VIEW, Role.CLIENT): (frozenset({Relationship.OWNER}), "Access denied"),
    (CaseAction.VIEW, Role.JUDGE): (frozenset({Relationship.ASSIGNED_JUDGE}), "Access denied"),
    (CaseAction.UPDATE_STATUS, Role.JUDGE): (
        frozenset({Relationship.ASSIGNED_JUDGE}),
        "Unauthorized to update case status: you are not the judge assigned to this case",
    ),
    (CaseAction.MANAGE_HEARINGS, Role.JUDGE): (
        frozenset({Relationship.ASSIGNED_JUDGE}),
        "You are not assigned to this case",
    ),
}


def relationship_to(actor: Actor, case: CaseRow) -> Relationship:
    if actor.role is Role.CLIENT and case.client_id == actor.id:
        return Relationship.OWNER
    if actor.role is Role.JUDGE and case.judge_id is not None and case.judge_id == actor.id:
        return Relationship.ASSIGNED_JUDGE
    return Relationship.UNRELATED


def authorize(actor: Actor, action: CaseAction, case: CaseRow | None = None) -> None:
    """Raise AuthorizationError unless the actor may perform action.

    Without a case only the role is checked.
    """
    allowed_roles, message = _ROLE_RULES[action]
    if actor.role not in allowed_roles:
        _deny(actor, action, message)

    if case is None:
        return

    rule = _RELATION_RULES.get((action, actor.role))
    if rule is None:
        return

    required, message = rule
    if relationship_to(actor, case) not in required:
        _deny(actor, action, message, case_id=case.id)


def _deny(actor: Actor, action: CaseAction, message: str, *, case_id: str | None = None) -> None:
    logger.info(
        "access_denied",
        user_id=actor.id,
        role=str(actor.role),
        action=str(action),
        case_id=case_id,
    )
    raise AuthorizationError(message, details={"role": str(actor.role), "action": str(action)})
