"""Detect probable duplicate filings.

Compares an in-flight filing against the filing client's cases that are
not yet Closed. Each existing case gets a weighted composite score built
from title, description and defendant-name similarity plus flat bonuses
for matching case type and court. Cases scoring at least 0.70 with at
least one recorded factor are reported, with human-readable factors in a
fixed order (title, description, defendant, case type, court).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from caseflow.db.repositories import CaseRepo
from caseflow.models.domain import CaseStatus, DuplicateCandidate, DuplicateMatch
from caseflow.utils.similarity import similarity

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from caseflow.models.database import CaseRow

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

TITLE_WEIGHT = 0.4
TITLE_THRESHOLD = 0.6
DESCRIPTION_WEIGHT = 0.3
DESCRIPTION_THRESHOLD = 0.5
DEFENDANT_WEIGHT = 0.2
DEFENDANT_THRESHOLD = 0.8
CASE_TYPE_BONUS = 0.1
COURT_BONUS = 0.05
DUPLICATE_THRESHOLD = 0.70


def _percent(score: float) -> int:
    # Half-up rounding, capped: all bonuses together can exceed 1.0.
    return min(100, math.floor(score * 100 + 0.5))


def score_case(candidate: DuplicateCandidate, existing: CaseRow) -> DuplicateMatch | None:
    """Score one existing case against the candidate.

    Returns a DuplicateMatch when the composite score reaches the
    duplicate threshold and at least one factor matched, else None.
    """
    score = 0.0
    factors: list[str] = []

    title_sim = similarity(candidate.title, existing.title)
    if title_sim > TITLE_THRESHOLD:
        score += title_sim * TITLE_WEIGHT
        factors.append(f"Similar title ({_percent(title_sim)}% match)")

    description_sim = similarity(candidate.description, existing.description)
    if description_sim > DESCRIPTION_THRESHOLD:
        score += description_sim * DESCRIPTION_WEIGHT
        factors.append(f"Similar description ({_percent(description_sim)}% match)")

    existing_defendant = (existing.defendant or {}).get("name")
    if candidate.defendant_name and existing_defendant:
        defendant_sim = similarity(candidate.defendant_name, existing_defendant)
        if defendant_sim > DEFENDANT_THRESHOLD:
            score += defendant_sim * DEFENDANT_WEIGHT
            factors.append(f"Same defendant ({_percent(defendant_sim)}% match)")

    if candidate.case_type and candidate.case_type == existing.case_type:
        score += CASE_TYPE_BONUS
        factors.append("Same case type")

    if candidate.court and existing.court and candidate.court == existing.court:
        score += COURT_BONUS
        factors.append("Same court")

    if score < DUPLICATE_THRESHOLD or not factors:
        return None

    return DuplicateMatch(
        case_id=existing.id,
        title=existing.title,
        status=CaseStatus(existing.status),
        created_at=existing.created_at,
        similarity_score=_percent(score),
        matching_factors=factors,
    )


class DuplicateDetector:
    """Finds a client's open cases that an in-flight filing probably duplicates."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._cases = CaseRepo(session)

    async def find_duplicates(
        self,
        client_id: str,
        candidate: DuplicateCandidate,
    ) -> list[DuplicateMatch]:
        """Return matches among the client's non-Closed cases, in query order."""
        existing_cases = await self._cases.list_open_for_client(client_id)

        matches: list[DuplicateMatch] = []
        for existing in existing_cases:
            match = score_case(candidate, existing)
            if match is not None:
                matches.append(match)

        logger.info(
            "duplicate_check_completed",
            client_id=client_id,
            cases_scanned=len(existing_cases),
            duplicates_found=len(matches),
        )
        return matches

    async def precheck(
        self,
        client_id: str,
        candidate: DuplicateCandidate,
    ) -> list[DuplicateMatch]:
        """Like find_duplicates, but any failure counts as "no duplicates".

        Used inline during filing so a broken check never blocks a filing.
        The scan runs in a savepoint so a failed statement rolls back only
        the scan, leaving the transaction usable for the filing itself.
        """
        try:
            async with self._session.begin_nested():
                return await self.find_duplicates(client_id, candidate)
        except Exception:
            logger.exception("duplicate_check_failed", client_id=client_id)
            return []


def summarize(matches: list[DuplicateMatch]) -> str:
    """Human-readable summary of a duplicate check."""
    if not matches:
        return "No duplicate cases found."
    noun = "case" if len(matches) == 1 else "cases"
    return (
        f"Found {len(matches)} potential duplicate {noun}. "
        "Please review them before filing a new case."
    )
