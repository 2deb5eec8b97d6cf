"""API response schemas.

Every outbound response is serialized through one of these models.
Structured error responses are included; the API never leaks raw
stack traces.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from caseflow.models.domain import (
    CaseStatus,
    Compliance,
    CourtType,
    DuplicateMatch,
    FeedbackStatus,
    NotificationType,
    Party,
    Priority,
    ReliefSought,
    Representation,
    Role,
    WireModel,
)

if TYPE_CHECKING:
    from caseflow.models.database import (
        CaseRow,
        CommentRow,
        CourtRow,
        HearingRow,
        NotificationRow,
        ReportRow,
        UserRow,
    )

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class DependencyHealth(BaseModel):
    """Health status of a single infrastructure dependency."""

    model_config = ConfigDict(frozen=True)

    name: str
    status: str = Field(..., description="'healthy' or 'unhealthy'")
    latency_ms: float | None = None
    details: str | None = None


class HealthResponse(BaseModel):
    """Aggregate health check response."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(..., description="'healthy' or 'unhealthy'")
    version: str
    uptime_seconds: float
    dependencies: list[DependencyHealth]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserSummary(WireModel):
    """The public face of a user embedded in other resources."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    role: Role
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def from_row(cls, row: UserRow) -> UserSummary:
        return cls(
            id=row.id,
            username=row.username,
            email=row.email,
            role=Role(row.role),
            first_name=row.first_name,
            last_name=row.last_name,
        )


# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------


class CaseResponse(WireModel):
    """A case with its parties, filing details and assignment."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    defendant: Party
    plaintiff: Party | None = None
    case_type: str | None = None
    court: str | None = None
    priority: Priority
    urgency_reason: str | None = None
    report_date: date | None = None
    evidence: str | None = None
    representation: Representation | None = None
    relief_sought: ReliefSought | None = None
    compliance: Compliance
    status: CaseStatus
    client: UserSummary
    judge: UserSummary | None = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: CaseRow) -> CaseResponse:
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            defendant=Party.model_validate(row.defendant),
            plaintiff=_maybe(Party, row.plaintiff),
            case_type=row.case_type,
            court=row.court,
            priority=Priority(row.priority),
            urgency_reason=row.urgency_reason,
            report_date=row.report_date,
            evidence=row.evidence,
            representation=_maybe(Representation, row.representation),
            relief_sought=_maybe(ReliefSought, row.relief_sought),
            compliance=Compliance.model_validate(row.compliance),
            status=CaseStatus(row.status),
            client=UserSummary.from_row(row.client),
            judge=UserSummary.from_row(row.judge) if row.judge is not None else None,
            created_at=row.created_at,
        )


def _maybe(model: type[WireModel], data: dict[str, Any] | None) -> Any:
    return model.model_validate(data) if data is not None else None


class DuplicateCheckResponse(WireModel):
    """Result of POST /case/check-duplicates."""

    model_config = ConfigDict(frozen=True)

    has_duplicates: bool
    duplicates: list[DuplicateMatch]
    message: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime

    @classmethod
    def from_row(cls, row: NotificationRow) -> NotificationResponse:
        return cls(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            message=row.message,
            type=NotificationType(row.type),
            is_read=row.is_read,
            created_at=row.created_at,
        )


class BulkDeleteResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    message: str
    deleted_count: int = Field(..., ge=0)


# ---------------------------------------------------------------------------
# Courts and hearings
# ---------------------------------------------------------------------------


class CourtResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    location: str
    type: CourtType
    capacity: int | None = None

    @classmethod
    def from_row(cls, row: CourtRow) -> CourtResponse:
        return cls(
            id=row.id,
            name=row.name,
            location=row.location,
            type=CourtType(row.type),
            capacity=row.capacity,
        )


class HearingResponse(WireModel):
    """A scheduled hearing with its case, court and judge."""

    model_config = ConfigDict(frozen=True)

    id: str
    case_id: str
    case_title: str
    court: CourtResponse
    judge: UserSummary
    hearing_date: date = Field(..., alias="date")
    hearing_time: str = Field(..., alias="time")
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: HearingRow) -> HearingResponse:
        return cls(
            id=row.id,
            case_id=row.case_id,
            case_title=row.case.title,
            court=CourtResponse.from_row(row.court),
            judge=UserSummary.from_row(row.judge),
            hearing_date=row.hearing_date,
            hearing_time=row.hearing_time,
            notes=row.notes,
            created_at=row.created_at,
        )


class AvailableSlotsResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    court_id: str
    slot_date: date = Field(..., alias="date")
    available_slots: list[str]
    booked_slots: list[str]
    total_slots: int


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


class MonthlyCaseStats(WireModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11, description="0 = January")
    total_cases: int
    active_cases: int
    pending_cases: int


class DashboardAnalyticsResponse(WireModel):
    """Admin dashboard figures (GET /analytics/dashboard)."""

    model_config = ConfigDict(frozen=True)

    monthly_stats: list[MonthlyCaseStats]
    status_distribution: dict[str, int]
    urgent_cases: int
    total_users: int
    users_by_role: dict[str, int]
    upcoming_hearings: int
    total_cases: int


class MonthlyCaseTrend(WireModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11, description="0 = January")
    month_name: str
    new_cases: int
    open_cases: int
    in_progress_cases: int
    closed_cases: int


class CaseTrendsResponse(WireModel):
    """Cases filed per month of one year, by current status (GET /analytics/case-trends)."""

    model_config = ConfigDict(frozen=True)

    year: int
    trends: list[MonthlyCaseTrend]


# ---------------------------------------------------------------------------
# Reports and feedback
# ---------------------------------------------------------------------------


class ReportResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    data: dict[str, Any] | None = None
    created_by: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: ReportRow) -> ReportResponse:
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            data=row.data,
            created_by=row.created_by,
            created_at=row.created_at,
        )


class CommentResponse(WireModel):
    """A piece of client feedback with its review state."""

    model_config = ConfigDict(frozen=True)

    id: str
    user: UserSummary
    subject: str
    message: str
    rating: int | None = None
    status: FeedbackStatus
    admin_notes: str = ""
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: CommentRow) -> CommentResponse:
        return cls(
            id=row.id,
            user=UserSummary.from_row(row.user),
            subject=row.subject,
            message=row.message,
            rating=row.rating,
            status=FeedbackStatus(row.status),
            admin_notes=row.admin_notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class Pagination(WireModel):
    model_config = ConfigDict(frozen=True)

    current_page: int
    total_pages: int
    total_comments: int
    has_next: bool
    has_prev: bool


class CommentPageResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    comments: list[CommentResponse]
    pagination: Pagination


class CommentStatsResponse(WireModel):
    model_config = ConfigDict(frozen=True)

    total: int
    by_status: dict[str, int]
    average_rating: float


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    model_config = ConfigDict(frozen=True)

    error: str
    details: dict[str, Any] = Field(default_factory=dict)
    request_id: str | None = None
