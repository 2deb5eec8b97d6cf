"""Core domain models and enumerations.

These are the canonical data shapes for case management. Every service
produces or consumes these types, never raw dicts. Frozen models are
used for value objects that should be immutable once created.

Models that cross the HTTP boundary derive from WireModel, which
serializes field names as camelCase while accepting either spelling on
input.
"""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Role(StrEnum):
    """The three kinds of account the API serves."""

    ADMIN = "Admin"
    JUDGE = "Judge"
    CLIENT = "Client"


class CaseStatus(StrEnum):
    """Case lifecycle states, ordered Open → In Progress → Closed."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    @property
    def is_terminal(self) -> bool:
        return self is CaseStatus.CLOSED


_STATUS_ORDER: tuple[CaseStatus, ...] = (
    CaseStatus.OPEN,
    CaseStatus.IN_PROGRESS,
    CaseStatus.CLOSED,
)


class Priority(StrEnum):
    """Filing priority chosen by the client."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class CourtType(StrEnum):
    """Court hierarchy tiers."""

    DISTRICT = "District"
    HIGH = "High"
    SUPREME = "Supreme"


class NotificationType(StrEnum):
    """What a notification is about."""

    CASE_FILED = "case_filed"
    CASE_ASSIGNED = "case_assigned"
    CASE_STATUS_UPDATED = "case_status_updated"
    CASE_CLOSED = "case_closed"
    HEARING_SCHEDULED = "hearing_scheduled"
    HEARING_UPDATED = "hearing_updated"
    HEARING_CANCELLED = "hearing_cancelled"
    GENERAL = "general"


class FeedbackStatus(StrEnum):
    """Where an admin is with a piece of client feedback."""

    NEW = "New"
    REVIEWED = "Reviewed"
    RESOLVED = "Resolved"


class CaseAction(StrEnum):
    """Actions subject to the case access policy."""

    FILE = "file"
    CHECK_DUPLICATES = "check_duplicates"
    VIEW = "view"
    ASSIGN_JUDGE = "assign_judge"
    UPDATE_STATUS = "update_status"
    DELETE = "delete"
    MANAGE_HEARINGS = "manage_hearings"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class WireModel(BaseModel):
    """Base for models serialized over HTTP with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Value objects stored on a case
# ---------------------------------------------------------------------------


class Party(WireModel):
    """Contact details of a party to the case."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class LawyerContact(WireModel):
    model_config = ConfigDict(frozen=True)

    email: str | None = None
    phone: str | None = None
    address: str | None = None


class Representation(WireModel):
    """Whether the client is represented, and by whom."""

    model_config = ConfigDict(frozen=True)

    has_lawyer: bool = False
    lawyer_name: str | None = None
    lawyer_bar_number: str | None = None
    lawyer_contact: LawyerContact | None = None
    self_represented: bool = True


class ReliefSought(WireModel):
    model_config = ConfigDict(frozen=True)

    monetary_damages: bool = False
    injunctive_relief: bool = False
    declaratory_judgment: bool = False
    specific_performance: bool = False
    other: str | None = None
    detailed_request: str | None = None


class Compliance(WireModel):
    """Sworn acknowledgments the client makes when filing."""

    model_config = ConfigDict(frozen=True)

    verification_statement: bool
    perjury_acknowledgment: bool
    court_rules_acknowledgment: bool
    signature_date: date | None = None
    electronic_signature: str | None = None

    @property
    def fully_acknowledged(self) -> bool:
        return (
            self.verification_statement
            and self.perjury_acknowledgment
            and self.court_rules_acknowledgment
        )


# ---------------------------------------------------------------------------
# Duplicate detection
# ---------------------------------------------------------------------------


class DuplicateCandidate(BaseModel):
    """The fields of an in-flight filing compared against existing cases."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    defendant_name: str | None = None
    case_type: str | None = None
    court: str | None = None


class DuplicateMatch(WireModel):
    """An existing case judged similar to an in-flight filing. Never persisted."""

    model_config = ConfigDict(frozen=True)

    case_id: str
    title: str
    status: CaseStatus
    created_at: datetime
    similarity_score: int = Field(..., ge=0, le=100, description="Composite score as a percentage")
    matching_factors: list[str] = Field(
        ...,
        description="Ordered: title, description, defendant, case type, court",
    )


# ---------------------------------------------------------------------------
# Identity and side effects
# ---------------------------------------------------------------------------


class Actor(BaseModel):
    """The authenticated caller of a request."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    username: str = ""


class NotificationEvent(BaseModel):
    """A notification to deliver once the triggering write has committed."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.GENERAL
