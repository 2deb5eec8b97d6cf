"""Admin report endpoints.

POST   /report/create        - Admin writes a report
GET    /report/reports       - Admin lists reports, newest first
GET    /report/report/{id}   - Admin reads one report
DELETE /report/delete/{id}   - Admin deletes a report
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.api.dependencies import get_db_session, get_report_repo, require_roles
from caseflow.core.exceptions import NotFoundError
from caseflow.db.repositories import ReportRepo
from caseflow.models.database import ReportRow
from caseflow.models.domain import Actor, Role
from caseflow.models.requests import CreateReportRequest
from caseflow.models.responses import MessageResponse, ReportResponse

router = APIRouter(prefix="/report", tags=["reports"])
logger: structlog.stdlib.BoundLogger = structlog.get_logger()

_admin_writes = require_roles(Role.ADMIN, message="You have no authorization for this action!")
_admin_reads = require_roles(Role.ADMIN, message="Only admins can view reports")
_admin_deletes = require_roles(Role.ADMIN, message="Only admins can delete reports")


@router.post("/create", response_model=ReportResponse, status_code=201)
async def create_report(
    body: CreateReportRequest,
    actor: Actor = Depends(_admin_writes),
    repo: ReportRepo = Depends(get_report_repo),
    session: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    report = await repo.create(
        ReportRow(
            title=body.title,
            description=body.description,
            data=body.data,
            created_by=actor.id,
        )
    )
    await session.commit()
    logger.info("report_created", report_id=report.id, admin_id=actor.id)
    return ReportResponse.from_row(report)


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    actor: Actor = Depends(_admin_reads),
    repo: ReportRepo = Depends(get_report_repo),
) -> list[ReportResponse]:
    return [ReportResponse.from_row(report) for report in await repo.list_all()]


@router.get("/report/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: str,
    actor: Actor = Depends(_admin_reads),
    repo: ReportRepo = Depends(get_report_repo),
) -> ReportResponse:
    report = await repo.get_by_id(report_id)
    if report is None:
        raise NotFoundError("Report not found", details={"report_id": report_id})
    return ReportResponse.from_row(report)


@router.delete("/delete/{report_id}", response_model=MessageResponse)
async def delete_report(
    report_id: str,
    actor: Actor = Depends(_admin_deletes),
    repo: ReportRepo = Depends(get_report_repo),
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if not await repo.delete(report_id):
        raise NotFoundError("Report not found", details={"report_id": report_id})
    await session.commit()
    logger.info("report_deleted", report_id=report_id, admin_id=actor.id)
    return MessageResponse(message="Report deleted")
