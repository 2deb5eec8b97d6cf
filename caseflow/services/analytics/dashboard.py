"""Admin dashboard figures and case trends."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from caseflow.core.exceptions import AuthorizationError
from caseflow.db.repositories import CaseRepo, HearingRepo, UserRepo
from caseflow.models.domain import Actor, CaseStatus, Role
from caseflow.models.responses import (
    CaseTrendsResponse,
    DashboardAnalyticsResponse,
    MonthlyCaseStats,
    MonthlyCaseTrend,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

URGENT_WINDOW = timedelta(days=7)

# English abbreviations whatever the server locale.
MONTH_NAMES = tuple("Jan Feb Mar Apr May Jun Jul Aug Sep Oct Nov Dec".split())


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def monthly_stats(rows: list[tuple[str, datetime]]) -> list[MonthlyCaseStats]:
    """Bucket (status, created_at) pairs into twelve calendar months.

    Active means Open or In Progress; pending means Open.
    """
    totals = [0] * 12
    active = [0] * 12
    pending = [0] * 12
    for status, created_at in rows:
        month = _as_utc(created_at).month - 1
        totals[month] += 1
        if status != CaseStatus.CLOSED:
            active[month] += 1
        if status == CaseStatus.OPEN:
            pending[month] += 1

    return [
        MonthlyCaseStats(
            month=month,
            total_cases=totals[month],
            active_cases=active[month],
            pending_cases=pending[month],
        )
        for month in range(12)
    ]


def monthly_trends(rows: list[tuple[str, datetime]]) -> list[MonthlyCaseTrend]:
    """Count new cases per calendar month, split by their current status."""
    counts = [dict.fromkeys(CaseStatus, 0) for _ in range(12)]
    for status, created_at in rows:
        counts[_as_utc(created_at).month - 1][CaseStatus(status)] += 1

    return [
        MonthlyCaseTrend(
            month=month,
            month_name=MONTH_NAMES[month],
            new_cases=sum(by_status.values()),
            open_cases=by_status[CaseStatus.OPEN],
            in_progress_cases=by_status[CaseStatus.IN_PROGRESS],
            closed_cases=by_status[CaseStatus.CLOSED],
        )
        for month, by_status in enumerate(counts)
    ]


class DashboardAnalytics:
    def __init__(self, session: AsyncSession) -> None:
        self._cases = CaseRepo(session)
        self._users = UserRepo(session)
        self._hearings = HearingRepo(session)

    async def build(
        self,
        actor: Actor,
        *,
        now: datetime | None = None,
    ) -> DashboardAnalyticsResponse:
        if actor.role is not Role.ADMIN:
            raise AuthorizationError("Only admins can access analytics")

        now = now or datetime.now(UTC)
        year_start = datetime(now.year, 1, 1, tzinfo=UTC)
        next_year_start = datetime(now.year + 1, 1, 1, tzinfo=UTC)

        this_year = await self._cases.list_status_and_created(year_start, next_year_start)
        by_status = await self._cases.count_by_status()
        status_distribution = {str(status): by_status.get(status, 0) for status in CaseStatus}
        urgent = await self._cases.count_open_since(now - URGENT_WINDOW)
        users_by_role = await self._users.count_by_role()
        upcoming = await self._hearings.count_upcoming(now.date())

        logger.debug("dashboard_built", year=now.year, cases_this_year=len(this_year))
        return DashboardAnalyticsResponse(
            monthly_stats=monthly_stats(this_year),
            status_distribution=status_distribution,
            urgent_cases=urgent,
            total_users=sum(users_by_role.values()),
            users_by_role=users_by_role,
            upcoming_hearings=upcoming,
            total_cases=sum(by_status.values()),
        )

    async def case_trends(self, actor: Actor, year: int | None = None) -> CaseTrendsResponse:
        """Monthly filing counts for year (default: the current year)."""
        if actor.role is not Role.ADMIN:
            raise AuthorizationError("Only admins can access analytics")

        year = year or datetime.now(UTC).year
        rows = await self._cases.list_status_and_created(
            datetime(year, 1, 1, tzinfo=UTC),
            datetime(year + 1, 1, 1, tzinfo=UTC),
        )
        return CaseTrendsResponse(year=year, trends=monthly_trends(rows))
