"""Hearing scheduling.

A hearing books one court for one date and start time. Only the judge
assigned to a case schedules, reschedules or cancels its hearings, and
never once the case is Closed. Double booking is rejected up front with
a conflict check and, for concurrent requests, by the unique
(court, date, time) index.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError

from caseflow.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    SchedulingConflictError,
)
from caseflow.db.repositories import CaseRepo, CourtRepo, HearingRepo
from caseflow.models.database import HearingRow
from caseflow.models.domain import (
    Actor,
    CaseAction,
    CaseStatus,
    NotificationEvent,
    NotificationType,
    Role,
)
from caseflow.services.cases.policy import authorize

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from caseflow.models.database import CaseRow, CourtRow
    from caseflow.models.requests import ScheduleHearingRequest, UpdateHearingRequest
    from caseflow.services.notifications.dispatcher import NotificationOutbox

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

# Half-hour slots from 09:00 through 17:00.
STANDARD_SLOTS: tuple[str, ...] = tuple(
    f"{hour:02d}:{minute:02d}" for hour in range(9, 18) for minute in (0, 30)
)[:-1]


def _today() -> date:
    return datetime.now(UTC).date()


def _conflict(court: CourtRow, on: date, at: str, booking: HearingRow) -> SchedulingConflictError:
    return SchedulingConflictError(
        "Scheduling conflict detected",
        details={
            "reason": (
                f'{court.name} is already booked at {at} on {on.isoformat()} for case '
                f'"{booking.case.title}" by Judge {booking.judge.username}. '
                "Please choose a different time or courtroom."
            ),
            "court_id": court.id,
            "date": on.isoformat(),
            "time": at,
        },
    )


class HearingScheduler:
    """Schedules, reschedules and cancels hearings for assigned judges."""

    def __init__(self, session: AsyncSession, outbox: NotificationOutbox) -> None:
        self._session = session
        self._cases = CaseRepo(session)
        self._courts = CourtRepo(session)
        self._hearings = HearingRepo(session)
        self._outbox = outbox

    async def schedule(
        self,
        actor: Actor,
        case_id: str,
        request: ScheduleHearingRequest,
    ) -> HearingRow:
        authorize(actor, CaseAction.MANAGE_HEARINGS)
        court = await self._require_court(request.court_id)
        case = await self._require_case(case_id)
        authorize(actor, CaseAction.MANAGE_HEARINGS, case)
        _ensure_open(case, "cannot have new hearings scheduled")

        on, at = request.hearing_date, request.hearing_time
        booking = await self._hearings.find_booking(court.id, on, at)
        if booking is not None:
            raise _conflict(court, on, at, booking)

        try:
            hearing = await self._hearings.create(
                HearingRow(
                    case_id=case.id,
                    court_id=court.id,
                    judge_id=actor.id,
                    hearing_date=on,
                    hearing_time=at,
                    notes=request.notes,
                )
            )
        except IntegrityError:
            await self._session.rollback()
            raise SchedulingConflictError(
                "Scheduling conflict detected",
                details={"court_id": court.id, "date": on.isoformat(), "time": at},
            ) from None
        await self._session.commit()

        logger.info(
            "hearing_scheduled",
            hearing_id=hearing.id,
            case_id=case.id,
            court_id=court.id,
            slot=f"{on.isoformat()} {at}",
        )
        self._outbox.emit(
            NotificationEvent(
                user_id=case.client_id,
                title="Hearing Scheduled",
                message=(
                    f'A hearing has been scheduled for your case "{case.title}" on '
                    f"{on.isoformat()} at {at} in {court.name} - {court.location}. "
                    "Please make sure to attend on time."
                ),
                type=NotificationType.HEARING_SCHEDULED,
            )
        )
        return hearing

    async def reschedule(
        self,
        actor: Actor,
        hearing_id: str,
        request: UpdateHearingRequest,
    ) -> HearingRow:
        """Change a hearing's slot, court or notes. Omitted fields are kept."""
        authorize(actor, CaseAction.MANAGE_HEARINGS)
        new_court = await self._require_court(request.court_id) if request.court_id else None
        hearing = await self._require_hearing(hearing_id)
        case = hearing.case
        authorize(actor, CaseAction.MANAGE_HEARINGS, case)
        _ensure_open(case, "its hearings cannot be modified")

        court = new_court or hearing.court
        on = request.hearing_date or hearing.hearing_date
        at = request.hearing_time or hearing.hearing_time
        moved = (court.id, on, at) != (hearing.court_id, hearing.hearing_date, hearing.hearing_time)

        if moved:
            booking = await self._hearings.find_booking(
                court.id, on, at, exclude_hearing_id=hearing.id
            )
            if booking is not None:
                raise _conflict(court, on, at, booking)

        hearing.court_id = court.id
        hearing.judge_id = actor.id
        hearing.hearing_date = on
        hearing.hearing_time = at
        if request.notes is not None:
            hearing.notes = request.notes

        try:
            hearing = await self._hearings.save(hearing)
        except IntegrityError:
            await self._session.rollback()
            raise SchedulingConflictError(
                "Scheduling conflict detected",
                details={"court_id": court.id, "date": on.isoformat(), "time": at},
            ) from None
        await self._session.commit()

        logger.info("hearing_rescheduled", hearing_id=hearing.id, moved=moved)
        self._outbox.emit(
            NotificationEvent(
                user_id=case.client_id,
                title="Hearing Updated",
                message=(
                    f'Your hearing for case "{case.title}" has been updated. New details: '
                    f"{on.isoformat()} at {at} in {court.name} - {court.location}. "
                    "Please note the changes."
                ),
                type=NotificationType.HEARING_UPDATED,
            )
        )
        return hearing

    async def cancel(self, actor: Actor, hearing_id: str) -> None:
        authorize(actor, CaseAction.MANAGE_HEARINGS)
        hearing = await self._require_hearing(hearing_id)
        case = hearing.case
        authorize(actor, CaseAction.MANAGE_HEARINGS, case)
        _ensure_open(case, "its hearings cannot be cancelled")

        await self._hearings.delete(hearing.id)
        await self._session.commit()

        logger.info("hearing_cancelled", hearing_id=hearing_id, case_id=case.id)
        self._outbox.emit(
            NotificationEvent(
                user_id=case.client_id,
                title="Hearing Cancelled",
                message=(
                    f'The hearing scheduled for your case "{case.title}" has been cancelled. '
                    "You will be notified when a new hearing is scheduled."
                ),
                type=NotificationType.HEARING_CANCELLED,
            )
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_for(self, actor: Actor, *, client_limit: int) -> list[HearingRow]:
        """Hearings visible to the caller, soonest first.

        Judges see the hearings of cases assigned to them, admins see all,
        clients see up to client_limit upcoming hearings of their cases.
        """
        if actor.role is Role.JUDGE:
            return await self._hearings.list_hearings(judge_id=actor.id)
        if actor.role is Role.ADMIN:
            return await self._hearings.list_hearings()

        case_ids = await self._cases.list_ids_for_client(actor.id)
        if not case_ids:
            return []
        return await self._hearings.list_hearings(
            case_ids=case_ids, date_from=_today(), limit=client_limit
        )

    async def get(self, actor: Actor, hearing_id: str) -> HearingRow:
        """A hearing is visible to whoever may view its case."""
        hearing = await self._require_hearing(hearing_id)
        authorize(actor, CaseAction.VIEW, hearing.case)
        return hearing

    async def available_slots(
        self,
        actor: Actor,
        court_id: str,
        on: date,
    ) -> tuple[list[str], list[str]]:
        """Return (available, booked) standard slots for a court on a day."""
        authorize(actor, CaseAction.MANAGE_HEARINGS)
        await self._require_court(court_id)

        booked = await self._hearings.booked_times(court_id, on)
        taken = set(booked)
        available = [slot for slot in STANDARD_SLOTS if slot not in taken]
        return available, booked

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require_court(self, court_id: str) -> CourtRow:
        court = await self._courts.get_by_id(court_id)
        if court is None:
            raise NotFoundError("Court not found", details={"court_id": court_id})
        return court

    async def _require_case(self, case_id: str) -> CaseRow:
        case = await self._cases.get_by_id(case_id)
        if case is None:
            raise NotFoundError("Case not found", details={"case_id": case_id})
        return case

    async def _require_hearing(self, hearing_id: str) -> HearingRow:
        hearing = await self._hearings.get_by_id(hearing_id)
        if hearing is None:
            raise NotFoundError("Hearing not found", details={"hearing_id": hearing_id})
        return hearing


def _ensure_open(case: CaseRow, consequence: str) -> None:
    if CaseStatus(case.status).is_terminal:
        raise InvalidTransitionError(
            f'Case "{case.title}" is closed and {consequence}. '
            "Only open or in-progress cases can have hearings managed.",
            details={"case_id": case.id, "status": str(CaseStatus.CLOSED)},
        )
