"""Case filing and lifecycle transitions.

CaseService owns every write to a case: filing (with the inline
duplicate pre-check), judge assignment, status transitions and deletion.
Status only moves forward, Open -> In Progress -> Closed, and Closed is
final for every caller. Guard and write happen in one conditional UPDATE
so two concurrent transitions cannot both pass the "not Closed" check.

Each successful write commits before the service returns. Notifications
are recorded in the request's NotificationOutbox and delivered after the
response; they never affect the outcome of the write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from caseflow.core.exceptions import (
    DuplicateCaseError,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
)
from caseflow.db.repositories import CaseRepo, UserRepo
from caseflow.models.domain import (
    Actor,
    CaseAction,
    CaseStatus,
    Compliance,
    DuplicateMatch,
    NotificationEvent,
    NotificationType,
    Party,
    Role,
)
from caseflow.models.database import CaseRow
from caseflow.services.cases.duplicates import DuplicateDetector
from caseflow.services.cases.policy import authorize

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from caseflow.models.requests import DuplicateCheckRequest, FileCaseRequest
    from caseflow.services.notifications.dispatcher import NotificationOutbox

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


def _closed_error(case: CaseRow, attempted: str) -> InvalidTransitionError:
    return InvalidTransitionError(
        f'Case "{case.title}" is closed; {attempted}. Closed cases are final.',
        details={"case_id": case.id, "status": str(CaseStatus.CLOSED)},
    )


def _status_notification(case: CaseRow, target: CaseStatus) -> NotificationEvent:
    if target is CaseStatus.CLOSED:
        return NotificationEvent(
            user_id=case.client_id,
            title="Case Closed",
            message=f'Your case "{case.title}" has been closed.',
            type=NotificationType.CASE_CLOSED,
        )
    if target is CaseStatus.IN_PROGRESS:
        return NotificationEvent(
            user_id=case.client_id,
            title="Case In Progress",
            message=f'Your case "{case.title}" is now in progress.',
            type=NotificationType.CASE_STATUS_UPDATED,
        )
    return NotificationEvent(
        user_id=case.client_id,
        title="Case Status Updated",
        message=f'Your case "{case.title}" is open.',
        type=NotificationType.CASE_STATUS_UPDATED,
    )


class CaseService:
    """Files cases and moves them through their lifecycle."""

    def __init__(self, session: AsyncSession, outbox: NotificationOutbox) -> None:
        self._session = session
        self._cases = CaseRepo(session)
        self._users = UserRepo(session)
        self._detector = DuplicateDetector(session)
        self._outbox = outbox

    # ------------------------------------------------------------------
    # Filing
    # ------------------------------------------------------------------

    async def check_duplicates(
        self,
        actor: Actor,
        request: DuplicateCheckRequest,
    ) -> list[DuplicateMatch]:
        """Read-only duplicate check for a prospective filing."""
        authorize(actor, CaseAction.CHECK_DUPLICATES)
        return await self._detector.find_duplicates(actor.id, request.to_candidate())

    async def file_case(self, actor: Actor, request: FileCaseRequest) -> CaseRow:
        """Create a case owned by the calling client, status Open.

        Raises DuplicateCaseError when similar open cases exist and the
        request did not set confirm_duplicate.
        """
        authorize(actor, CaseAction.FILE)
        defendant, compliance = _validate_filing(request)

        if not request.confirm_duplicate:
            duplicates = await self._detector.precheck(actor.id, request.to_candidate())
            if duplicates:
                logger.info(
                    "case_filing_blocked_by_duplicates",
                    client_id=actor.id,
                    duplicates_found=len(duplicates),
                )
                raise DuplicateCaseError(
                    "Potential duplicate cases found",
                    duplicates=duplicates,
                    details={"requires_confirmation": True},
                )

        case = await self._cases.create(
            CaseRow(
                title=request.title,
                description=request.description,
                defendant=defendant.model_dump(mode="json"),
                plaintiff=request.plaintiff.model_dump(mode="json") if request.plaintiff else None,
                case_type=request.case_type,
                court=request.court,
                priority=request.priority,
                urgency_reason=request.urgency_reason,
                report_date=request.report_date,
                evidence=request.evidence,
                representation=(
                    request.representation.model_dump(mode="json")
                    if request.representation
                    else None
                ),
                relief_sought=(
                    request.relief_sought.model_dump(mode="json") if request.relief_sought else None
                ),
                compliance=compliance.model_dump(mode="json"),
                status=CaseStatus.OPEN,
                client_id=actor.id,
            )
        )
        await self._session.commit()

        logger.info(
            "case_filed",
            case_id=case.id,
            client_id=actor.id,
            confirmed_duplicate=request.confirm_duplicate,
        )
        self._outbox.emit(
            NotificationEvent(
                user_id=actor.id,
                title="Case Filed Successfully",
                message=f'Your case "{case.title}" has been filed and is awaiting review.',
                type=NotificationType.CASE_FILED,
            )
        )
        return case

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_case(self, actor: Actor, case_id: str) -> CaseRow:
        case = await self._require_case(case_id)
        authorize(actor, CaseAction.VIEW, case)
        return case

    async def list_cases(self, actor: Actor, *, limit: int = 200, offset: int = 0) -> list[CaseRow]:
        """Cases visible to the caller: all for Admin, own for Client, assigned for Judge."""
        if actor.role is Role.CLIENT:
            return await self._cases.list_cases(client_id=actor.id, limit=limit, offset=offset)
        if actor.role is Role.JUDGE:
            return await self._cases.list_cases(judge_id=actor.id, limit=limit, offset=offset)
        return await self._cases.list_cases(limit=limit, offset=offset)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def assign_judge(self, actor: Actor, case_id: str, judge_id: str) -> CaseRow:
        """Assign a judge and move the case to In Progress."""
        authorize(actor, CaseAction.ASSIGN_JUDGE)

        case = await self._require_case(case_id)
        if CaseStatus(case.status).is_terminal:
            raise _closed_error(case, "a judge cannot be assigned")

        judge = await self._users.get_by_id_and_role(judge_id, Role.JUDGE)
        if judge is None:
            raise NotFoundError("Judge not found", details={"judge_id": judge_id})

        if not await self._cases.assign_judge(case_id, judge_id):
            # Lost a race with a concurrent close or delete.
            case = await self._require_case(case_id, refresh=True)
            raise _closed_error(case, "a judge cannot be assigned")

        case = await self._require_case(case_id, refresh=True)
        await self._session.commit()

        logger.info("judge_assigned", case_id=case_id, judge_id=judge_id, admin_id=actor.id)
        self._outbox.emit(
            NotificationEvent(
                user_id=case.client_id,
                title="Judge Assigned",
                message=(
                    f'Judge {judge.display_name} has been assigned to your case "{case.title}". '
                    "The case is now in progress."
                ),
                type=NotificationType.CASE_ASSIGNED,
            )
        )
        return case

    async def update_status(self, actor: Actor, case_id: str, target: CaseStatus) -> CaseRow:
        """Move a case forward to target.

        Closed cases reject every update. Backward moves are rejected.
        Judges may only update cases assigned to them.
        """
        authorize(actor, CaseAction.UPDATE_STATUS)

        case = await self._require_case(case_id)
        current = CaseStatus(case.status)
        if current.is_terminal:
            raise _closed_error(case, "its status cannot be changed")
        authorize(actor, CaseAction.UPDATE_STATUS, case)
        if target.rank < current.rank:
            raise InvalidTransitionError(
                f'Case "{case.title}" cannot move from {current} back to {target}',
                details={"case_id": case.id, "from": str(current), "to": str(target)},
            )

        allowed_from = [s for s in CaseStatus if not s.is_terminal and s.rank <= target.rank]
        judge_id = actor.id if actor.role is Role.JUDGE else None
        updated = await self._cases.transition_status(
            case_id, target, allowed_from=allowed_from, judge_id=judge_id
        )
        if not updated:
            await self._explain_lost_transition(actor, case_id, target)

        case = await self._require_case(case_id, refresh=True)
        await self._session.commit()

        logger.info(
            "case_status_updated",
            case_id=case_id,
            from_status=str(current),
            to_status=str(target),
            actor_id=actor.id,
        )
        self._outbox.emit(_status_notification(case, target))
        return case

    async def delete_case(self, actor: Actor, case_id: str) -> None:
        authorize(actor, CaseAction.DELETE)
        if not await self._cases.delete(case_id):
            raise NotFoundError("Case not found", details={"case_id": case_id})
        await self._session.commit()
        logger.info("case_deleted", case_id=case_id, admin_id=actor.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_case(self, case_id: str, *, refresh: bool = False) -> CaseRow:
        case = await self._cases.get_by_id(case_id, refresh=refresh)
        if case is None:
            raise NotFoundError("Case not found", details={"case_id": case_id})
        return case

    async def _explain_lost_transition(
        self,
        actor: Actor,
        case_id: str,
        target: CaseStatus,
    ) -> None:
        """Raise the error for a conditional update that matched no row."""
        case = await self._require_case(case_id, refresh=True)
        current = CaseStatus(case.status)
        if current.is_terminal:
            raise _closed_error(case, "its status cannot be changed")
        authorize(actor, CaseAction.UPDATE_STATUS, case)
        raise InvalidTransitionError(
            f'Case "{case.title}" cannot move from {current} back to {target}',
            details={"case_id": case.id, "from": str(current), "to": str(target)},
        )


def _validate_filing(request: FileCaseRequest) -> tuple[Party, Compliance]:
    """Reject filings missing the fields a case cannot exist without."""
    defendant = request.defendant
    if defendant is None or not defendant.name or not defendant.phone:
        raise InvalidRequestError(
            "Defendant information is required",
            details={"required": ["defendant.name", "defendant.phone"]},
        )

    if request.compliance is None or not request.compliance.fully_acknowledged:
        raise InvalidRequestError(
            "All compliance acknowledgments are required",
            details={
                "required": [
                    "compliance.verificationStatement",
                    "compliance.perjuryAcknowledgment",
                    "compliance.courtRulesAcknowledgment",
                ]
            },
        )
    return defendant, request.compliance
