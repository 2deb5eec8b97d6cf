"""API request schemas.

Every inbound request body is validated through one of these models.
No raw dicts ever reach the service layer. Field names are camelCase on
the wire; snake_case is accepted too.
"""

from datetime import date
from typing import Any

from pydantic import ConfigDict, Field

from caseflow.models.domain import (
    CaseStatus,
    Compliance,
    CourtType,
    DuplicateCandidate,
    FeedbackStatus,
    Party,
    Priority,
    ReliefSought,
    Representation,
    WireModel,
)

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------


class DuplicateCheckRequest(WireModel):
    """Fields of a prospective filing to compare against the client's open cases."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    defendant: Party | None = None
    case_type: str | None = Field(
        default=None,
        description="Free-form tag, e.g. 'civil', 'family', 'smallClaims'",
    )
    court: str | None = Field(default=None, description="Requested court, e.g. 'district'")

    def to_candidate(self) -> DuplicateCandidate:
        return DuplicateCandidate(
            title=self.title,
            description=self.description,
            defendant_name=self.defendant.name if self.defendant else None,
            case_type=self.case_type,
            court=self.court,
        )


class FileCaseRequest(DuplicateCheckRequest):
    """A new case filing submitted by a client."""

    plaintiff: Party | None = None
    priority: Priority = Priority.MEDIUM
    urgency_reason: str | None = None
    report_date: date | None = None
    evidence: str | None = None
    representation: Representation | None = None
    relief_sought: ReliefSought | None = None
    compliance: Compliance | None = None
    confirm_duplicate: bool = Field(
        default=False,
        description="File even if similar open cases exist",
    )


class AssignJudgeRequest(WireModel):
    model_config = ConfigDict(frozen=True)

    judge_id: str = Field(..., min_length=1)


class UpdateStatusRequest(WireModel):
    model_config = ConfigDict(frozen=True)

    status: CaseStatus


# ---------------------------------------------------------------------------
# Courts
# ---------------------------------------------------------------------------


class CreateCourtRequest(WireModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=255)
    type: CourtType
    capacity: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Hearings
# ---------------------------------------------------------------------------


class ScheduleHearingRequest(WireModel):
    """Book a court for a hearing on a case."""

    model_config = ConfigDict(frozen=True)

    hearing_date: date = Field(..., alias="date")
    hearing_time: str = Field(
        ..., alias="time", pattern=_TIME_PATTERN, description="24h clock, e.g. '09:00'"
    )
    court_id: str = Field(..., min_length=1)
    notes: str | None = None


class UpdateHearingRequest(WireModel):
    """Reschedule a hearing; omitted fields keep their current value."""

    model_config = ConfigDict(frozen=True)

    hearing_date: date | None = Field(default=None, alias="date")
    hearing_time: str | None = Field(default=None, alias="time", pattern=_TIME_PATTERN)
    court_id: str | None = Field(default=None, min_length=1)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class BulkDeleteNotificationsRequest(WireModel):
    model_config = ConfigDict(frozen=True)

    ids: list[str] = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Reports and feedback
# ---------------------------------------------------------------------------


class CreateReportRequest(WireModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    data: dict[str, Any] | None = Field(
        default=None,
        description="Free-form payload, e.g. figures copied from the dashboard",
    )


class SubmitCommentRequest(WireModel):
    """Feedback a client sends to the court administration."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1000)
    rating: int | None = Field(default=None, ge=1, le=5)


class UpdateCommentStatusRequest(WireModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    status: FeedbackStatus
    admin_notes: str | None = None
