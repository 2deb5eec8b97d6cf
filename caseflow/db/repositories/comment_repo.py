"""Repository for client feedback comments.

Besides CRUD it answers the admin's summary questions: how many comments
sit in each status and what the average rating is.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import CommentRow
from caseflow.models.domain import FeedbackStatus


class CommentRepo:
    """Async repository for feedback comments."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, comment: CommentRow) -> CommentRow:
        """Insert a comment and return it with its author loaded."""
        self._session.add(comment)
        await self._session.flush()
        await self._session.refresh(comment, attribute_names=["user"])
        return comment

    async def get_by_id(self, comment_id: str) -> CommentRow | None:
        stmt = select(CommentRow).where(CommentRow.id == comment_id)
        result = await self._session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def save(self, comment: CommentRow) -> CommentRow:
        """Flush pending changes and reload server-side timestamps."""
        await self._session.flush()
        await self._session.refresh(comment)
        return comment

    async def list_comments(
        self,
        *,
        status: FeedbackStatus | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[CommentRow]:
        """A page of comments, newest first, optionally in one status."""
        stmt = select(CommentRow)
        if status is not None:
            stmt = stmt.where(CommentRow.status == status)

        stmt = (
            stmt.order_by(CommentRow.created_at.desc(), CommentRow.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.unique().scalars().all())

    async def count(self, *, status: FeedbackStatus | None = None) -> int:
        stmt = select(func.count(CommentRow.id))
        if status is not None:
            stmt = stmt.where(CommentRow.status == status)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(CommentRow.status, func.count(CommentRow.id)).group_by(CommentRow.status)
        result = await self._session.execute(stmt)
        return {status: count for status, count in result.all()}

    async def average_rating(self) -> float:
        """Mean of the ratings given, 0.0 when nobody rated."""
        stmt = select(func.avg(CommentRow.rating)).where(CommentRow.rating.is_not(None))
        result = await self._session.execute(stmt)
        average = result.scalar_one()
        return float(average) if average is not None else 0.0
