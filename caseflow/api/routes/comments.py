"""Client feedback endpoints.

POST /comments/submit        - Client sends feedback (subject, message, optional 1-5 rating)
GET  /comments               - Admin pages through feedback, optionally by status
GET  /comments/stats         - Admin summary: totals per status and average rating
PUT  /comments/status/{id}   - Admin marks feedback Reviewed/Resolved and adds notes
"""

import math

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.api.dependencies import get_comment_repo, get_db_session, require_roles
from caseflow.core.exceptions import NotFoundError
from caseflow.db.repositories import CommentRepo
from caseflow.models.database import CommentRow
from caseflow.models.domain import Actor, FeedbackStatus, Role
from caseflow.models.requests import SubmitCommentRequest, UpdateCommentStatusRequest
from caseflow.models.responses import (
    CommentPageResponse,
    CommentResponse,
    CommentStatsResponse,
    Pagination,
)

router = APIRouter(prefix="/comments", tags=["comments"])
logger: structlog.stdlib.BoundLogger = structlog.get_logger()

_clients_only = require_roles(Role.CLIENT, message="Only clients can submit feedback")
_admin_only = require_roles(Role.ADMIN, message="Only admins can manage feedback")


@router.post("/submit", response_model=CommentResponse, status_code=201)
async def submit_comment(
    body: SubmitCommentRequest,
    actor: Actor = Depends(_clients_only),
    repo: CommentRepo = Depends(get_comment_repo),
    session: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    comment = await repo.create(
        CommentRow(
            user_id=actor.id,
            subject=body.subject,
            message=body.message,
            rating=body.rating,
        )
    )
    await session.commit()
    logger.info("feedback_submitted", comment_id=comment.id, rating=body.rating)
    return CommentResponse.from_row(comment)


@router.get("", response_model=CommentPageResponse)
async def list_comments(
    status: FeedbackStatus | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(_admin_only),
    repo: CommentRepo = Depends(get_comment_repo),
) -> CommentPageResponse:
    offset = (page - 1) * limit
    comments = await repo.list_comments(status=status, limit=limit, offset=offset)
    total = await repo.count(status=status)

    return CommentPageResponse(
        comments=[CommentResponse.from_row(c) for c in comments],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_comments=total,
            has_next=offset + len(comments) < total,
            has_prev=page > 1,
        ),
    )


@router.get("/stats", response_model=CommentStatsResponse)
async def comment_stats(
    actor: Actor = Depends(_admin_only),
    repo: CommentRepo = Depends(get_comment_repo),
) -> CommentStatsResponse:
    by_status = await repo.count_by_status()
    return CommentStatsResponse(
        total=await repo.count(),
        by_status={str(status): by_status.get(status, 0) for status in FeedbackStatus},
        average_rating=await repo.average_rating(),
    )


@router.put("/status/{comment_id}", response_model=CommentResponse)
async def update_comment_status(
    comment_id: str,
    body: UpdateCommentStatusRequest,
    actor: Actor = Depends(_admin_only),
    repo: CommentRepo = Depends(get_comment_repo),
    session: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    comment = await repo.get_by_id(comment_id)
    if comment is None:
        raise NotFoundError("Comment not found", details={"comment_id": comment_id})

    comment.status = body.status
    if body.admin_notes:
        comment.admin_notes = body.admin_notes
    comment = await repo.save(comment)
    await session.commit()

    logger.info(
        "feedback_status_updated",
        comment_id=comment_id,
        status=str(body.status),
        admin_id=actor.id,
    )
    return CommentResponse.from_row(comment)
