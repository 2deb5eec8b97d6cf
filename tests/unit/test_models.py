"""Tests for domain models, enumerations, and request/response schemas.

Covers: enum values and ordering, camelCase wire names, request
validation, frozen immutability, and response construction from rows.
"""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from caseflow.models.database import UserRow
from caseflow.models.domain import (
    CaseStatus,
    Compliance,
    DuplicateMatch,
    NotificationEvent,
    Priority,
    Role,
)
from caseflow.models.requests import (
    DuplicateCheckRequest,
    FileCaseRequest,
    ScheduleHearingRequest,
    UpdateHearingRequest,
    UpdateStatusRequest,
)
from caseflow.models.responses import CaseResponse
from caseflow.services.hearings.scheduler import STANDARD_SLOTS
from tests.conftest import make_case_row, make_filing_payload

# ===================================================================
# Enumerations
# ===================================================================


class TestCaseStatus:
    def test_canonical_values(self):
        assert [s.value for s in CaseStatus] == ["Open", "In Progress", "Closed"]

    def test_ranks_follow_lifecycle(self):
        assert CaseStatus.OPEN.rank < CaseStatus.IN_PROGRESS.rank < CaseStatus.CLOSED.rank

    def test_only_closed_is_terminal(self):
        assert [s for s in CaseStatus if s.is_terminal] == [CaseStatus.CLOSED]

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            UpdateStatusRequest.model_validate({"status": "Archived"})

    def test_legacy_hyphenated_status_rejected(self):
        with pytest.raises(ValidationError):
            UpdateStatusRequest.model_validate({"status": "In-progress"})


class TestRole:
    def test_values(self):
        assert {r.value for r in Role} == {"Admin", "Judge", "Client"}


# ===================================================================
# Value objects
# ===================================================================


class TestCompliance:
    def test_fully_acknowledged(self):
        compliance = Compliance(
            verification_statement=True,
            perjury_acknowledgment=True,
            court_rules_acknowledgment=True,
        )
        assert compliance.fully_acknowledged

    def test_any_missing_acknowledgment(self):
        compliance = Compliance(
            verification_statement=True,
            perjury_acknowledgment=False,
            court_rules_acknowledgment=True,
        )
        assert not compliance.fully_acknowledged

    def test_accepts_camel_case(self):
        compliance = Compliance.model_validate(
            {
                "verificationStatement": True,
                "perjuryAcknowledgment": True,
                "courtRulesAcknowledgment": True,
                "signatureDate": "2026-10-01",
            }
        )
        assert compliance.signature_date == date(2026, 10, 1)

    def test_frozen(self):
        compliance = Compliance(
            verification_statement=True,
            perjury_acknowledgment=True,
            court_rules_acknowledgment=True,
        )
        with pytest.raises(ValidationError):
            compliance.verification_statement = False  # type: ignore[misc]


class TestDuplicateMatch:
    def test_serializes_camel_case(self):
        match = DuplicateMatch(
            case_id="c1",
            title="Smith vs Jones",
            status=CaseStatus.OPEN,
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
            similarity_score=77,
            matching_factors=["Similar title (67% match)"],
        )
        data = match.model_dump(mode="json", by_alias=True)
        assert data["caseId"] == "c1"
        assert data["similarityScore"] == 77
        assert data["matchingFactors"] == ["Similar title (67% match)"]
        assert data["status"] == "Open"

    @pytest.mark.parametrize("score", [-1, 101])
    def test_score_bounds(self, score):
        with pytest.raises(ValidationError):
            DuplicateMatch(
                case_id="c1",
                title="t",
                status=CaseStatus.OPEN,
                created_at=datetime(2026, 1, 1, tzinfo=UTC),
                similarity_score=score,
                matching_factors=[],
            )


class TestNotificationEvent:
    def test_requires_title_and_message(self):
        with pytest.raises(ValidationError):
            NotificationEvent(user_id="u1", title="", message="hello")


# ===================================================================
# Requests
# ===================================================================


class TestDuplicateCheckRequest:
    def test_missing_title_rejected(self):
        with pytest.raises(ValidationError):
            DuplicateCheckRequest.model_validate({"description": "boundary dispute"})

    def test_blank_description_rejected(self):
        with pytest.raises(ValidationError):
            DuplicateCheckRequest.model_validate({"title": "Smith vs Jones", "description": "   "})

    def test_to_candidate(self):
        request = DuplicateCheckRequest.model_validate(
            {
                "title": " Smith vs Jones ",
                "description": "boundary dispute",
                "defendant": {"name": "Robert Jones"},
                "caseType": "civil",
            }
        )
        candidate = request.to_candidate()
        assert candidate.title == "Smith vs Jones"
        assert candidate.defendant_name == "Robert Jones"
        assert candidate.case_type == "civil"
        assert candidate.court is None


class TestFileCaseRequest:
    def test_full_payload(self):
        request = FileCaseRequest.model_validate(make_filing_payload(confirmDuplicate=True))
        assert request.confirm_duplicate is True
        assert request.priority is Priority.MEDIUM
        assert request.compliance is not None
        assert request.compliance.fully_acknowledged

    def test_confirm_duplicate_defaults_false(self):
        request = FileCaseRequest.model_validate(make_filing_payload())
        assert request.confirm_duplicate is False

    def test_snake_case_accepted(self):
        payload = make_filing_payload()
        payload["case_type"] = payload.pop("caseType")
        payload["confirm_duplicate"] = True
        request = FileCaseRequest.model_validate(payload)
        assert request.case_type == "civil"
        assert request.confirm_duplicate is True

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError):
            FileCaseRequest.model_validate(make_filing_payload(priority="Whenever"))


class TestHearingRequests:
    def test_wire_names_date_and_time(self):
        request = ScheduleHearingRequest.model_validate(
            {"date": "2026-11-02", "time": "09:30", "courtId": "court-1"}
        )
        assert request.hearing_date == date(2026, 11, 2)
        assert request.hearing_time == "09:30"

    @pytest.mark.parametrize("time", ["9:30", "24:00", "09:60", "noon"])
    def test_bad_time_rejected(self, time):
        with pytest.raises(ValidationError):
            ScheduleHearingRequest.model_validate(
                {"date": "2026-11-02", "time": time, "courtId": "court-1"}
            )

    def test_update_fields_optional(self):
        request = UpdateHearingRequest.model_validate({"notes": "bring exhibits"})
        assert request.hearing_date is None
        assert request.hearing_time is None
        assert request.court_id is None


class TestStandardSlots:
    def test_half_hourly_from_nine_to_five(self):
        assert STANDARD_SLOTS[0] == "09:00"
        assert STANDARD_SLOTS[-1] == "17:00"
        assert len(STANDARD_SLOTS) == 17
        assert "12:30" in STANDARD_SLOTS


# ===================================================================
# Responses
# ===================================================================


class TestCaseResponse:
    def test_from_row(self):
        row = make_case_row(
            id="case-1",
            plaintiff={"name": "Alice Smith"},
            status=CaseStatus.IN_PROGRESS,
            priority="High",
        )
        row.client = UserRow(
            id="client-1",
            username="alice",
            email="alice@example.com",
            role=Role.CLIENT,
            first_name="Alice",
            last_name="Smith",
        )
        row.judge = None

        response = CaseResponse.from_row(row)
        data = response.model_dump(mode="json", by_alias=True)

        assert data["id"] == "case-1"
        assert data["status"] == "In Progress"
        assert data["priority"] == "High"
        assert data["caseType"] == "civil"
        assert data["defendant"]["name"] == "Robert Jones"
        assert data["plaintiff"]["name"] == "Alice Smith"
        assert data["client"]["username"] == "alice"
        assert data["judge"] is None
        assert data["compliance"]["verificationStatement"] is True
