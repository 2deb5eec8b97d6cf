"""Case endpoints: duplicate check, filing, assignment, status, reads.

POST /case/check-duplicates   - compare a prospective filing (read-only)
POST /case/file               - file a case (409 on unconfirmed duplicates)
PUT  /case/assign/{case_id}   - Admin assigns a judge
PUT  /case/status/{case_id}   - Admin or assigned Judge moves the status forward
GET  /case                    - cases visible to the caller
GET  /case/{case_id}          - one case
DELETE /case/{case_id}        - Admin deletes a case
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from caseflow.api.dependencies import (
    get_case_service,
    get_current_actor,
    get_notification_dispatcher,
    get_notification_outbox,
    require_action,
)
from caseflow.models.domain import Actor, CaseAction
from caseflow.models.requests import (
    AssignJudgeRequest,
    DuplicateCheckRequest,
    FileCaseRequest,
    UpdateStatusRequest,
)
from caseflow.models.responses import CaseResponse, DuplicateCheckResponse, MessageResponse
from caseflow.services.cases.duplicates import summarize
from caseflow.services.cases.lifecycle import CaseService
from caseflow.services.notifications.dispatcher import NotificationDispatcher, NotificationOutbox

router = APIRouter(prefix="/case", tags=["cases"])


@router.post("/check-duplicates", response_model=DuplicateCheckResponse)
async def check_duplicates(
    body: DuplicateCheckRequest,
    actor: Actor = Depends(require_action(CaseAction.CHECK_DUPLICATES)),
    service: CaseService = Depends(get_case_service),
) -> DuplicateCheckResponse:
    """Report the caller's open cases that resemble the described filing."""
    duplicates = await service.check_duplicates(actor, body)
    return DuplicateCheckResponse(
        has_duplicates=bool(duplicates),
        duplicates=duplicates,
        message=summarize(duplicates),
    )


@router.post("/file", response_model=CaseResponse, status_code=201)
async def file_case(
    body: FileCaseRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(require_action(CaseAction.FILE)),
    service: CaseService = Depends(get_case_service),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> CaseResponse:
    """File a new case.

    Returns 409 with the duplicate list when similar open cases exist,
    unless confirmDuplicate is set.
    """
    case = await service.file_case(actor, body)
    dispatcher.schedule(background_tasks, outbox)
    return CaseResponse.from_row(case)


@router.put("/assign/{case_id}", response_model=CaseResponse)
async def assign_judge(
    case_id: str,
    body: AssignJudgeRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(require_action(CaseAction.ASSIGN_JUDGE)),
    service: CaseService = Depends(get_case_service),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> CaseResponse:
    case = await service.assign_judge(actor, case_id, body.judge_id)
    dispatcher.schedule(background_tasks, outbox)
    return CaseResponse.from_row(case)


@router.put("/status/{case_id}", response_model=CaseResponse)
async def update_status(
    case_id: str,
    body: UpdateStatusRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(require_action(CaseAction.UPDATE_STATUS)),
    service: CaseService = Depends(get_case_service),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> CaseResponse:
    case = await service.update_status(actor, case_id, body.status)
    dispatcher.schedule(background_tasks, outbox)
    return CaseResponse.from_row(case)


@router.get("", response_model=list[CaseResponse])
async def list_cases(
    limit: int = Query(default=200, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    actor: Actor = Depends(get_current_actor),
    service: CaseService = Depends(get_case_service),
) -> list[CaseResponse]:
    cases = await service.list_cases(actor, limit=limit, offset=offset)
    return [CaseResponse.from_row(case) for case in cases]


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(
    case_id: str,
    actor: Actor = Depends(get_current_actor),
    service: CaseService = Depends(get_case_service),
) -> CaseResponse:
    case = await service.get_case(actor, case_id)
    return CaseResponse.from_row(case)


@router.delete("/{case_id}", response_model=MessageResponse)
async def delete_case(
    case_id: str,
    actor: Actor = Depends(require_action(CaseAction.DELETE)),
    service: CaseService = Depends(get_case_service),
) -> MessageResponse:
    await service.delete_case(actor, case_id)
    return MessageResponse(message="Case deleted successfully")
