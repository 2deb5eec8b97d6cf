"""Court registry endpoints.

POST   /court        - Admin registers a court
GET    /court        - Admin or Judge lists courts
DELETE /court/{id}   - Admin removes a court and its bookings
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.api.dependencies import get_court_repo, get_db_session, require_roles
from caseflow.core.exceptions import NotFoundError
from caseflow.db.repositories import CourtRepo
from caseflow.models.database import CourtRow
from caseflow.models.domain import Actor, Role
from caseflow.models.requests import CreateCourtRequest
from caseflow.models.responses import CourtResponse, MessageResponse

router = APIRouter(prefix="/court", tags=["courts"])
logger: structlog.stdlib.BoundLogger = structlog.get_logger()

_admin_only = require_roles(Role.ADMIN, message="Only admins can manage courts")


@router.post("", response_model=CourtResponse, status_code=201)
async def create_court(
    body: CreateCourtRequest,
    actor: Actor = Depends(_admin_only),
    repo: CourtRepo = Depends(get_court_repo),
    session: AsyncSession = Depends(get_db_session),
) -> CourtResponse:
    court = await repo.create(
        CourtRow(
            name=body.name,
            location=body.location,
            type=body.type,
            capacity=body.capacity,
        )
    )
    await session.commit()
    logger.info("court_created", court_id=court.id, admin_id=actor.id)
    return CourtResponse.from_row(court)


@router.get("", response_model=list[CourtResponse])
async def list_courts(
    actor: Actor = Depends(require_roles(Role.ADMIN, Role.JUDGE)),
    repo: CourtRepo = Depends(get_court_repo),
) -> list[CourtResponse]:
    courts = await repo.list_all()
    return [CourtResponse.from_row(court) for court in courts]


@router.delete("/{court_id}", response_model=MessageResponse)
async def delete_court(
    court_id: str,
    actor: Actor = Depends(_admin_only),
    repo: CourtRepo = Depends(get_court_repo),
    session: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    if not await repo.delete(court_id):
        raise NotFoundError("Court not found", details={"court_id": court_id})
    await session.commit()
    logger.info("court_deleted", court_id=court_id, admin_id=actor.id)
    return MessageResponse(message="Court deleted successfully")
