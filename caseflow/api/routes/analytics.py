"""Admin analytics endpoints."""

from fastapi import APIRouter, Depends, Query

from caseflow.api.dependencies import get_dashboard_analytics, require_roles
from caseflow.models.domain import Actor, Role
from caseflow.models.responses import CaseTrendsResponse, DashboardAnalyticsResponse
from caseflow.services.analytics.dashboard import DashboardAnalytics

router = APIRouter(prefix="/analytics", tags=["analytics"])

_admin_only = require_roles(Role.ADMIN, message="Only admins can access analytics")


@router.get("/dashboard", response_model=DashboardAnalyticsResponse)
async def dashboard(
    actor: Actor = Depends(_admin_only),
    analytics: DashboardAnalytics = Depends(get_dashboard_analytics),
) -> DashboardAnalyticsResponse:
    """Monthly case stats for the current year plus system-wide totals."""
    return await analytics.build(actor)


@router.get("/case-trends", response_model=CaseTrendsResponse)
async def case_trends(
    year: int | None = Query(default=None, ge=1, le=9998),
    actor: Actor = Depends(_admin_only),
    analytics: DashboardAnalytics = Depends(get_dashboard_analytics),
) -> CaseTrendsResponse:
    """New, open, in-progress and closed cases per month of the given year."""
    return await analytics.case_trends(actor, year)
