"""Hearing endpoints.

POST   /hearings/{case_id}                            - assigned Judge schedules
PUT    /hearings/{hearing_id}                         - assigned Judge reschedules
DELETE /hearings/{hearing_id}                         - assigned Judge cancels
GET    /hearings                                      - hearings visible to the caller
GET    /hearings/available-slots/{court_id}/{date}    - free slots of a court (Judge)
GET    /hearings/{hearing_id}                         - one hearing
"""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends

from caseflow.api.dependencies import (
    get_current_actor,
    get_hearing_scheduler,
    get_notification_dispatcher,
    get_notification_outbox,
    get_settings_from_app,
    require_action,
)
from caseflow.core.config import Settings
from caseflow.models.domain import Actor, CaseAction
from caseflow.models.requests import ScheduleHearingRequest, UpdateHearingRequest
from caseflow.models.responses import AvailableSlotsResponse, HearingResponse, MessageResponse
from caseflow.services.hearings.scheduler import STANDARD_SLOTS, HearingScheduler
from caseflow.services.notifications.dispatcher import NotificationDispatcher, NotificationOutbox

router = APIRouter(prefix="/hearings", tags=["hearings"])

_judge_only = require_action(CaseAction.MANAGE_HEARINGS)


@router.get("", response_model=list[HearingResponse])
async def list_hearings(
    actor: Actor = Depends(get_current_actor),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
    settings: Settings = Depends(get_settings_from_app),
) -> list[HearingResponse]:
    hearings = await scheduler.list_for(
        actor, client_limit=settings.client_upcoming_hearings_limit
    )
    return [HearingResponse.from_row(h) for h in hearings]


@router.get("/available-slots/{court_id}/{slot_date}", response_model=AvailableSlotsResponse)
async def available_slots(
    court_id: str,
    slot_date: date,
    actor: Actor = Depends(_judge_only),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
) -> AvailableSlotsResponse:
    available, booked = await scheduler.available_slots(actor, court_id, slot_date)
    return AvailableSlotsResponse(
        court_id=court_id,
        slot_date=slot_date,
        available_slots=available,
        booked_slots=booked,
        total_slots=len(STANDARD_SLOTS),
    )


@router.get("/{hearing_id}", response_model=HearingResponse)
async def get_hearing(
    hearing_id: str,
    actor: Actor = Depends(get_current_actor),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
) -> HearingResponse:
    hearing = await scheduler.get(actor, hearing_id)
    return HearingResponse.from_row(hearing)


@router.post("/{case_id}", response_model=HearingResponse, status_code=201)
async def schedule_hearing(
    case_id: str,
    body: ScheduleHearingRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(_judge_only),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> HearingResponse:
    hearing = await scheduler.schedule(actor, case_id, body)
    dispatcher.schedule(background_tasks, outbox)
    return HearingResponse.from_row(hearing)


@router.put("/{hearing_id}", response_model=HearingResponse)
async def reschedule_hearing(
    hearing_id: str,
    body: UpdateHearingRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(_judge_only),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> HearingResponse:
    hearing = await scheduler.reschedule(actor, hearing_id, body)
    dispatcher.schedule(background_tasks, outbox)
    return HearingResponse.from_row(hearing)


@router.delete("/{hearing_id}", response_model=MessageResponse)
async def cancel_hearing(
    hearing_id: str,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(_judge_only),
    scheduler: HearingScheduler = Depends(get_hearing_scheduler),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> MessageResponse:
    await scheduler.cancel(actor, hearing_id)
    dispatcher.schedule(background_tasks, outbox)
    return MessageResponse(message="Hearing deleted successfully")
