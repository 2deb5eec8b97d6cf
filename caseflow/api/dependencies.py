"""FastAPI dependency injection providers.

Every external resource the API layer needs is accessed through a
Depends() callable defined here. The engine, session factory and
notification dispatcher live on app.state, set up by create_app().
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.core.config import Settings
from caseflow.core.exceptions import AuthenticationError, AuthorizationError
from caseflow.core.logging import bind_actor
from caseflow.core.security import decode_access_token
from caseflow.db.repositories import CommentRepo, CourtRepo, ReportRepo, UserRepo
from caseflow.models.domain import Actor, CaseAction, Role
from caseflow.services.analytics.dashboard import DashboardAnalytics
from caseflow.services.cases.lifecycle import CaseService
from caseflow.services.cases.policy import authorize
from caseflow.services.hearings.scheduler import HearingScheduler
from caseflow.services.notifications.dispatcher import NotificationDispatcher, NotificationOutbox
from caseflow.services.notifications.inbox import NotificationInbox

_bearer = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()


def get_settings_from_app(request: Request) -> Settings:
    """Retrieve settings stored on the running app instance.

    Preferred over the cached version inside route handlers since
    it respects the settings the app was actually started with
    (important for tests that override config).
    """
    settings: Settings = request.app.state.settings
    return settings


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async DB session scoped to the request lifecycle.

    Services commit their own writes; anything left uncommitted when the
    request fails is rolled back. Always closes.
    """
    factory = request.app.state.session_factory
    session: AsyncSession = factory()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings_from_app),
    session: AsyncSession = Depends(get_db_session),
) -> Actor:
    """Resolve the bearer token to an existing user."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Not authorized, no token")

    user_id = decode_access_token(credentials.credentials, settings)
    user = await UserRepo(session).get_by_id(user_id)
    if user is None:
        raise AuthenticationError("Not authorized, user not found")

    actor = Actor(id=user.id, role=Role(user.role), username=user.username)
    bind_actor(actor)
    return actor


def require_action(action: CaseAction) -> Callable[..., Awaitable[Actor]]:
    """Route-level role check for a case action.

    Runs before the request body is processed, so a caller in the wrong
    role gets 403 regardless of what they sent.
    """

    async def _dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        authorize(actor, action)
        return actor

    return _dependency


def require_roles(
    *roles: Role,
    message: str = "Access denied",
) -> Callable[..., Awaitable[Actor]]:
    """Route-level role check for resources outside the case policy."""
    allowed = frozenset(roles)

    async def _dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed:
            raise AuthorizationError(message, details={"role": str(actor.role)})
        return actor

    return _dependency


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def get_notification_outbox() -> NotificationOutbox:
    """A fresh outbox per request."""
    return NotificationOutbox()


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    """Retrieve the shared dispatcher from app state."""
    dispatcher: NotificationDispatcher = request.app.state.notification_dispatcher
    return dispatcher


def get_case_service(
    session: AsyncSession = Depends(get_db_session),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> CaseService:
    return CaseService(session, outbox)


def get_hearing_scheduler(
    session: AsyncSession = Depends(get_db_session),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
) -> HearingScheduler:
    return HearingScheduler(session, outbox)


def get_notification_inbox(
    session: AsyncSession = Depends(get_db_session),
) -> NotificationInbox:
    return NotificationInbox(session)


def get_court_repo(
    session: AsyncSession = Depends(get_db_session),
) -> CourtRepo:
    """Provide a CourtRepo bound to the current request session."""
    return CourtRepo(session)


def get_report_repo(
    session: AsyncSession = Depends(get_db_session),
) -> ReportRepo:
    return ReportRepo(session)


def get_comment_repo(
    session: AsyncSession = Depends(get_db_session),
) -> CommentRepo:
    return CommentRepo(session)


def get_dashboard_analytics(
    session: AsyncSession = Depends(get_db_session),
) -> DashboardAnalytics:
    return DashboardAnalytics(session)
