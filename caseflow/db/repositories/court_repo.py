"""Repository for court CRUD operations."""

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import CourtRow, HearingRow


class CourtRepo:
    """Async repository for courts."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, court: CourtRow) -> CourtRow:
        self._session.add(court)
        await self._session.flush()
        return court

    async def get_by_id(self, court_id: str) -> CourtRow | None:
        stmt = select(CourtRow).where(CourtRow.id == court_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[CourtRow]:
        stmt = select(CourtRow).order_by(CourtRow.name.asc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, court_id: str) -> bool:
        """Delete a court and the hearings booked into it."""
        await self._session.execute(delete(HearingRow).where(HearingRow.court_id == court_id))
        cursor: CursorResult[tuple[()]] = await self._session.execute(  # type: ignore[assignment]
            delete(CourtRow).where(CourtRow.id == court_id)
        )
        return cursor.rowcount > 0
