"""Repository for hearing CRUD operations.

Also answers the scheduling questions the hearing service asks: is a
court already booked for a slot, and which slots on a day are taken.
"""

from datetime import date

from sqlalchemy import CursorResult, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import HearingRow


class HearingRepo:
    """Async repository for hearings."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, hearing: HearingRow) -> HearingRow:
        """Insert a hearing and return it with case, court and judge loaded."""
        self._session.add(hearing)
        await self._session.flush()
        await self._session.refresh(hearing, attribute_names=["case", "court", "judge"])
        return hearing

    async def get_by_id(self, hearing_id: str, *, refresh: bool = False) -> HearingRow | None:
        stmt = select(HearingRow).where(HearingRow.id == hearing_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def find_booking(
        self,
        court_id: str,
        on: date,
        at: str,
        *,
        exclude_hearing_id: str | None = None,
    ) -> HearingRow | None:
        """Return a hearing already holding this court slot, if any."""
        stmt = (
            select(HearingRow)
            .where(HearingRow.court_id == court_id)
            .where(HearingRow.hearing_date == on)
            .where(HearingRow.hearing_time == at)
        )
        if exclude_hearing_id is not None:
            stmt = stmt.where(HearingRow.id != exclude_hearing_id)

        result = await self._session.execute(stmt.limit(1))
        return result.unique().scalar_one_or_none()

    async def booked_times(self, court_id: str, on: date) -> list[str]:
        stmt = (
            select(HearingRow.hearing_time)
            .where(HearingRow.court_id == court_id)
            .where(HearingRow.hearing_date == on)
            .order_by(HearingRow.hearing_time.asc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_hearings(
        self,
        *,
        judge_id: str | None = None,
        case_ids: list[str] | None = None,
        date_from: date | None = None,
        limit: int | None = None,
    ) -> list[HearingRow]:
        """List hearings by ascending date, with optional filters."""
        stmt = select(HearingRow)
        if judge_id is not None:
            stmt = stmt.where(HearingRow.judge_id == judge_id)
        if case_ids is not None:
            stmt = stmt.where(HearingRow.case_id.in_(case_ids))
        if date_from is not None:
            stmt = stmt.where(HearingRow.hearing_date >= date_from)

        stmt = stmt.order_by(HearingRow.hearing_date.asc(), HearingRow.hearing_time.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.unique().scalars().all())

    async def count_upcoming(self, today: date) -> int:
        stmt = select(func.count(HearingRow.id)).where(HearingRow.hearing_date >= today)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete(self, hearing_id: str) -> bool:
        cursor: CursorResult[tuple[()]] = await self._session.execute(  # type: ignore[assignment]
            delete(HearingRow).where(HearingRow.id == hearing_id)
        )
        return cursor.rowcount > 0

    async def save(self, hearing: HearingRow) -> HearingRow:
        """Flush pending changes to a hearing and reload its court and judge."""
        await self._session.flush()
        await self._session.refresh(hearing, attribute_names=["court", "judge"])
        return hearing
