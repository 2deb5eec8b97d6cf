"""API route aggregation.

All sub-routers are collected into a single api_router that the
app factory mounts under the configured prefix.
"""

from fastapi import APIRouter

from caseflow.api.routes import (
    analytics,
    cases,
    comments,
    courts,
    health,
    hearings,
    notifications,
    reports,
)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(cases.router)
api_router.include_router(notifications.router)
api_router.include_router(courts.router)
api_router.include_router(hearings.router)
api_router.include_router(analytics.router)
api_router.include_router(reports.router)
api_router.include_router(comments.router)
