"""Repository for admin reports."""

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import ReportRow


class ReportRepo:
    """Async repository for reports."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, report: ReportRow) -> ReportRow:
        self._session.add(report)
        await self._session.flush()
        return report

    async def get_by_id(self, report_id: str) -> ReportRow | None:
        stmt = select(ReportRow).where(ReportRow.id == report_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[ReportRow]:
        """All reports, newest first."""
        stmt = select(ReportRow).order_by(ReportRow.created_at.desc(), ReportRow.id.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, report_id: str) -> bool:
        cursor: CursorResult[tuple[()]] = await self._session.execute(  # type: ignore[assignment]
            delete(ReportRow).where(ReportRow.id == report_id)
        )
        return cursor.rowcount > 0
