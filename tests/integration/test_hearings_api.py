"""Integration tests for the /api/hearings endpoints.

Covers scheduling by the assigned judge, double-booking rejection,
the closed-case guard, available slots, role-scoped listing,
rescheduling and cancellation.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from caseflow.models.database import HearingRow, NotificationRow
from caseflow.models.domain import CaseStatus, Role
from tests.conftest import persist_case, persist_court

if TYPE_CHECKING:
    from httpx import AsyncClient

pytestmark = pytest.mark.integration

NEXT_WEEK = (datetime.now(UTC).date() + timedelta(days=7)).isoformat()
LAST_WEEK = (datetime.now(UTC).date() - timedelta(days=7)).isoformat()


@pytest.fixture
async def judge(make_user):
    return await make_user(Role.JUDGE, username="judge_judy")


@pytest.fixture
async def client_user(make_user):
    return await make_user(Role.CLIENT)


@pytest.fixture
async def court(session_factory):
    return await persist_court(session_factory, name="Courtroom 3", location="Annex")


@pytest.fixture
async def case(session_factory, client_user, judge):
    return await persist_case(
        session_factory,
        client_user,
        title="Smith vs Jones",
        judge_id=judge.id,
        status=CaseStatus.IN_PROGRESS,
    )


async def _schedule(client, headers, case_id, court_id, *, on=NEXT_WEEK, at="10:00"):
    return await client.post(
        f"/api/hearings/{case_id}",
        json={"date": on, "time": at, "courtId": court_id, "notes": "first appearance"},
        headers=headers,
    )


# ===================================================================
# POST /hearings/{case_id}
# ===================================================================


class TestScheduleHearing:
    async def test_assigned_judge_schedules(
        self, client: AsyncClient, auth_headers, judge, client_user, case, court, session_factory
    ):
        resp = await _schedule(client, auth_headers(judge), case.id, court.id)

        assert resp.status_code == 201
        body = resp.json()
        assert body["caseId"] == case.id
        assert body["caseTitle"] == "Smith vs Jones"
        assert body["court"]["id"] == court.id
        assert body["judge"]["id"] == judge.id
        assert body["date"] == NEXT_WEEK
        assert body["time"] == "10:00"

        async with session_factory() as session:
            result = await session.execute(
                select(NotificationRow).where(NotificationRow.user_id == client_user.id)
            )
            notifications = list(result.scalars().all())
        assert [n.title for n in notifications] == ["Hearing Scheduled"]
        assert "Courtroom 3 - Annex" in notifications[0].message

    async def test_double_booking_is_409(
        self, client: AsyncClient, auth_headers, judge, client_user, case, court, session_factory
    ):
        other_case = await persist_case(
            session_factory,
            client_user,
            title="Estate of Brown",
            judge_id=judge.id,
            status=CaseStatus.IN_PROGRESS,
        )
        headers = auth_headers(judge)
        first = await _schedule(client, headers, case.id, court.id)
        assert first.status_code == 201

        resp = await _schedule(client, headers, other_case.id, court.id)

        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "Scheduling conflict detected"
        assert "Courtroom 3 is already booked at 10:00" in body["details"]["reason"]
        assert '"Smith vs Jones"' in body["details"]["reason"]
        assert "judge_judy" in body["details"]["reason"]

    async def test_same_slot_in_another_court_is_fine(
        self, client: AsyncClient, auth_headers, judge, case, court, session_factory
    ):
        other_court = await persist_court(session_factory, name="Courtroom 4")
        headers = auth_headers(judge)

        assert (await _schedule(client, headers, case.id, court.id)).status_code == 201
        assert (await _schedule(client, headers, case.id, other_court.id)).status_code == 201

    async def test_closed_case_rejected(
        self, client: AsyncClient, auth_headers, judge, client_user, court, session_factory
    ):
        closed = await persist_case(
            session_factory,
            client_user,
            title="Estate of Brown",
            judge_id=judge.id,
            status=CaseStatus.CLOSED,
        )

        resp = await _schedule(client, auth_headers(judge), closed.id, court.id)

        assert resp.status_code == 400
        assert 'Case "Estate of Brown" is closed' in resp.json()["error"]

    async def test_unassigned_judge_forbidden(
        self, client: AsyncClient, auth_headers, make_user, case, court
    ):
        other_judge = await make_user(Role.JUDGE)
        resp = await _schedule(client, auth_headers(other_judge), case.id, court.id)
        assert resp.status_code == 403
        assert resp.json()["error"] == "You are not assigned to this case"

    async def test_client_forbidden(
        self, client: AsyncClient, auth_headers, client_user, case, court
    ):
        resp = await _schedule(client, auth_headers(client_user), case.id, court.id)
        assert resp.status_code == 403
        assert resp.json()["error"] == "Only judges can manage hearings"

    async def test_unknown_court(self, client: AsyncClient, auth_headers, judge, case):
        resp = await _schedule(client, auth_headers(judge), case.id, "missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Court not found"

    async def test_unknown_case(self, client: AsyncClient, auth_headers, judge, court):
        resp = await _schedule(client, auth_headers(judge), "missing", court.id)
        assert resp.status_code == 404
        assert resp.json()["error"] == "Case not found"

    async def test_bad_time_is_400(self, client: AsyncClient, auth_headers, judge, case, court):
        resp = await _schedule(client, auth_headers(judge), case.id, court.id, at="10am")
        assert resp.status_code == 400


# ===================================================================
# GET /hearings/available-slots/{court_id}/{date}
# ===================================================================


class TestAvailableSlots:
    async def test_booked_slots_are_excluded(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        await _schedule(client, headers, case.id, court.id, at="09:30")
        await _schedule(client, headers, case.id, court.id, at="14:00")

        resp = await client.get(
            f"/api/hearings/available-slots/{court.id}/{NEXT_WEEK}", headers=headers
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["courtId"] == court.id
        assert body["date"] == NEXT_WEEK
        assert body["bookedSlots"] == ["09:30", "14:00"]
        assert body["totalSlots"] == 17
        assert len(body["availableSlots"]) == 15
        assert "09:30" not in body["availableSlots"]
        assert body["availableSlots"][0] == "09:00"

    async def test_admin_forbidden(self, client: AsyncClient, auth_headers, make_user, court):
        admin = await make_user(Role.ADMIN)
        resp = await client.get(
            f"/api/hearings/available-slots/{court.id}/{NEXT_WEEK}", headers=auth_headers(admin)
        )
        assert resp.status_code == 403

    async def test_unknown_court(self, client: AsyncClient, auth_headers, judge):
        resp = await client.get(
            f"/api/hearings/available-slots/missing/{NEXT_WEEK}", headers=auth_headers(judge)
        )
        assert resp.status_code == 404


# ===================================================================
# GET /hearings, GET /hearings/{id}
# ===================================================================


class TestListHearings:
    async def test_client_sees_only_upcoming_hearings_of_own_cases(
        self, client: AsyncClient, auth_headers, judge, client_user, case, court, session_factory
    ):
        headers = auth_headers(judge)
        upcoming = await _schedule(client, headers, case.id, court.id)
        past = await _schedule(client, headers, case.id, court.id, on=LAST_WEEK)
        assert past.status_code == 201

        resp = await client.get("/api/hearings", headers=auth_headers(client_user))

        assert resp.status_code == 200
        assert [h["id"] for h in resp.json()] == [upcoming.json()["id"]]

    async def test_judge_sees_own_hearings(
        self, client: AsyncClient, auth_headers, make_user, judge, case, court
    ):
        other_judge = await make_user(Role.JUDGE)
        await _schedule(client, auth_headers(judge), case.id, court.id)

        own = await client.get("/api/hearings", headers=auth_headers(judge))
        others = await client.get("/api/hearings", headers=auth_headers(other_judge))

        assert len(own.json()) == 1
        assert others.json() == []

    async def test_hearings_are_ordered_by_date(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        await _schedule(client, headers, case.id, court.id, at="15:00")
        await _schedule(client, headers, case.id, court.id, on=LAST_WEEK, at="11:00")

        resp = await client.get("/api/hearings", headers=headers)

        assert [(h["date"], h["time"]) for h in resp.json()] == [
            (LAST_WEEK, "11:00"),
            (NEXT_WEEK, "15:00"),
        ]

    async def test_other_client_cannot_read_hearing(
        self, client: AsyncClient, auth_headers, make_user, judge, case, court
    ):
        created = await _schedule(client, auth_headers(judge), case.id, court.id)
        stranger = await make_user(Role.CLIENT)

        resp = await client.get(
            f"/api/hearings/{created.json()['id']}", headers=auth_headers(stranger)
        )
        assert resp.status_code == 403
        assert resp.json()["error"] == "Access denied"

    async def test_owning_client_reads_hearing(
        self, client: AsyncClient, auth_headers, judge, client_user, case, court
    ):
        created = await _schedule(client, auth_headers(judge), case.id, court.id)

        resp = await client.get(
            f"/api/hearings/{created.json()['id']}", headers=auth_headers(client_user)
        )
        assert resp.status_code == 200
        assert resp.json()["notes"] == "first appearance"

    async def test_missing_hearing(self, client: AsyncClient, auth_headers, judge):
        resp = await client.get("/api/hearings/missing", headers=auth_headers(judge))
        assert resp.status_code == 404


# ===================================================================
# PUT /hearings/{id}, DELETE /hearings/{id}
# ===================================================================


class TestRescheduleAndCancel:
    async def test_reschedule_keeps_omitted_fields(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        created = (await _schedule(client, headers, case.id, court.id)).json()

        resp = await client.put(
            f"/api/hearings/{created['id']}", json={"time": "11:30"}, headers=headers
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["time"] == "11:30"
        assert body["date"] == NEXT_WEEK
        assert body["court"]["id"] == court.id
        assert body["notes"] == "first appearance"

    async def test_reschedule_into_booked_slot_is_409(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        await _schedule(client, headers, case.id, court.id, at="10:00")
        second = (await _schedule(client, headers, case.id, court.id, at="11:00")).json()

        resp = await client.put(
            f"/api/hearings/{second['id']}", json={"time": "10:00"}, headers=headers
        )
        assert resp.status_code == 409

    async def test_reschedule_notes_only_keeps_slot(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        created = (await _schedule(client, headers, case.id, court.id)).json()

        resp = await client.put(
            f"/api/hearings/{created['id']}", json={"notes": "bring exhibits"}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["notes"] == "bring exhibits"
        assert resp.json()["time"] == "10:00"

    async def test_cancel(
        self, client: AsyncClient, auth_headers, judge, client_user, case, court, session_factory
    ):
        headers = auth_headers(judge)
        created = (await _schedule(client, headers, case.id, court.id)).json()

        resp = await client.delete(f"/api/hearings/{created['id']}", headers=headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Hearing deleted successfully"}
        async with session_factory() as session:
            remaining = (await session.execute(select(HearingRow.id))).all()
            result = await session.execute(
                select(NotificationRow.title)
                .where(NotificationRow.user_id == client_user.id)
                .order_by(NotificationRow.created_at.asc())
            )
            titles = list(result.scalars().all())
        assert remaining == []
        assert titles == ["Hearing Scheduled", "Hearing Cancelled"]

    async def test_cancel_on_closed_case_rejected(
        self, client: AsyncClient, auth_headers, judge, case, court
    ):
        headers = auth_headers(judge)
        created = (await _schedule(client, headers, case.id, court.id)).json()
        closed = await client.put(
            f"/api/case/status/{case.id}", json={"status": "Closed"}, headers=headers
        )
        assert closed.status_code == 200

        resp = await client.delete(f"/api/hearings/{created['id']}", headers=headers)
        assert resp.status_code == 400


# ===================================================================
# Reassigned cases
# ===================================================================


class TestReassignedCase:
    @pytest.fixture
    async def reassigned(self, client: AsyncClient, auth_headers, make_user, judge, case, court):
        """Judge schedules a hearing, then an admin hands the case to a new judge."""
        new_judge = await make_user(Role.JUDGE)
        admin = await make_user(Role.ADMIN)
        hearing = (await _schedule(client, auth_headers(judge), case.id, court.id)).json()

        resp = await client.put(
            f"/api/case/assign/{case.id}",
            json={"judgeId": new_judge.id},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200
        return new_judge, hearing["id"]

    async def test_new_judge_sees_the_hearing(
        self, client: AsyncClient, auth_headers, reassigned
    ):
        new_judge, hearing_id = reassigned
        headers = auth_headers(new_judge)

        detail = await client.get(f"/api/hearings/{hearing_id}", headers=headers)
        listed = await client.get("/api/hearings", headers=headers)

        assert detail.status_code == 200
        assert detail.json()["judge"]["id"] == new_judge.id
        assert [h["id"] for h in listed.json()] == [hearing_id]

    async def test_previous_judge_loses_access(
        self, client: AsyncClient, auth_headers, judge, reassigned
    ):
        _, hearing_id = reassigned
        headers = auth_headers(judge)

        detail = await client.get(f"/api/hearings/{hearing_id}", headers=headers)
        listed = await client.get("/api/hearings", headers=headers)

        assert detail.status_code == 403
        assert listed.json() == []

    async def test_new_judge_reschedules(self, client: AsyncClient, auth_headers, reassigned):
        new_judge, hearing_id = reassigned

        resp = await client.put(
            f"/api/hearings/{hearing_id}", json={"time": "14:00"}, headers=auth_headers(new_judge)
        )

        assert resp.status_code == 200
        assert resp.json()["judge"]["id"] == new_judge.id
        assert resp.json()["time"] == "14:00"
