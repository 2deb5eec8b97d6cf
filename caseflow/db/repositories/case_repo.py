"""Repository for case CRUD operations.

All database access for the cases table is encapsulated here. Lifecycle
writes are conditional UPDATEs predicated on the current status, so the
"not already Closed" guard and the write happen in one statement.
"""

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import CursorResult, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import CaseRow, HearingRow
from caseflow.models.domain import CaseStatus


class CaseRepo:
    """Async repository for cases."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, case: CaseRow) -> CaseRow:
        """Insert a case and return it with client/judge loaded."""
        self._session.add(case)
        await self._session.flush()
        await self._session.refresh(case, attribute_names=["client", "judge"])
        return case

    async def get_by_id(self, case_id: str, *, refresh: bool = False) -> CaseRow | None:
        """Fetch a case by primary key.

        refresh=True re-reads columns already present in the identity map,
        which is needed after a bulk UPDATE statement touched the row.
        """
        stmt = select(CaseRow).where(CaseRow.id == case_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def list_open_for_client(self, client_id: str) -> list[CaseRow]:
        """Cases owned by the client whose status is not Closed, in filing order."""
        stmt = (
            select(CaseRow)
            .where(CaseRow.client_id == client_id)
            .where(CaseRow.status != CaseStatus.CLOSED)
            .order_by(CaseRow.created_at.asc(), CaseRow.id.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.unique().scalars().all())

    async def list_cases(
        self,
        *,
        client_id: str | None = None,
        judge_id: str | None = None,
        limit: int = 200,
        offset: int = 0,
    ) -> list[CaseRow]:
        """List cases newest first, optionally restricted to a client or judge."""
        stmt = select(CaseRow)
        if client_id is not None:
            stmt = stmt.where(CaseRow.client_id == client_id)
        if judge_id is not None:
            stmt = stmt.where(CaseRow.judge_id == judge_id)

        stmt = stmt.order_by(CaseRow.created_at.desc()).limit(limit).offset(offset)
        result = await self._session.execute(stmt)
        return list(result.unique().scalars().all())

    async def list_ids_for_client(self, client_id: str) -> list[str]:
        stmt = select(CaseRow.id).where(CaseRow.client_id == client_id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def assign_judge(self, case_id: str, judge_id: str) -> bool:
        """Set the judge and move the case to In Progress unless it is Closed.

        The case's hearings move to the new judge with it. Returns True if
        the case was updated.
        """
        stmt = (
            update(CaseRow)
            .where(CaseRow.id == case_id)
            .where(CaseRow.status != CaseStatus.CLOSED)
            .values(judge_id=judge_id, status=CaseStatus.IN_PROGRESS)
        )
        cursor: CursorResult[tuple[()]] = await self._session.execute(stmt)  # type: ignore[assignment]
        if cursor.rowcount == 0:
            return False

        await self._session.execute(
            update(HearingRow).where(HearingRow.case_id == case_id).values(judge_id=judge_id)
        )
        return True

    async def transition_status(
        self,
        case_id: str,
        target: CaseStatus,
        *,
        allowed_from: Collection[CaseStatus],
        judge_id: str | None = None,
    ) -> bool:
        """Move a case to target only if its current status is in allowed_from.

        When judge_id is given, the update also requires that judge to still
        be assigned. Returns True if a row was updated.
        """
        stmt = (
            update(CaseRow)
            .where(CaseRow.id == case_id)
            .where(CaseRow.status.in_([str(s) for s in allowed_from]))
            .values(status=target)
        )
        if judge_id is not None:
            stmt = stmt.where(CaseRow.judge_id == judge_id)

        cursor: CursorResult[tuple[()]] = await self._session.execute(stmt)  # type: ignore[assignment]
        return cursor.rowcount > 0

    async def delete(self, case_id: str) -> bool:
        """Delete a case and its hearings. Returns True if the case existed."""
        await self._session.execute(delete(HearingRow).where(HearingRow.case_id == case_id))
        cursor: CursorResult[tuple[()]] = await self._session.execute(  # type: ignore[assignment]
            delete(CaseRow).where(CaseRow.id == case_id)
        )
        return cursor.rowcount > 0

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(CaseRow.status, func.count(CaseRow.id)).group_by(CaseRow.status)
        result = await self._session.execute(stmt)
        return {status: count for status, count in result.all()}

    async def list_status_and_created(
        self,
        start: datetime,
        end: datetime,
    ) -> list[tuple[str, datetime]]:
        """(status, created_at) of cases filed in [start, end)."""
        stmt = (
            select(CaseRow.status, CaseRow.created_at)
            .where(CaseRow.created_at >= start)
            .where(CaseRow.created_at < end)
        )
        result = await self._session.execute(stmt)
        return [(status, created_at) for status, created_at in result.all()]

    async def count_open_since(self, since: datetime) -> int:
        stmt = (
            select(func.count(CaseRow.id))
            .where(CaseRow.status == CaseStatus.OPEN)
            .where(CaseRow.created_at > since)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()
