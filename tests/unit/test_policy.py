"""Tests for the case access policy.

Covers: role-only checks, relationship checks for clients and judges,
admin access without a relationship, and denial messages.
"""

import pytest

from caseflow.core.exceptions import AuthorizationError
from caseflow.models.domain import Actor, CaseAction, Role
from caseflow.services.cases.policy import Relationship, authorize, relationship_to
from tests.conftest import make_case_row

ADMIN = Actor(id="admin-1", role=Role.ADMIN)
JUDGE = Actor(id="judge-1", role=Role.JUDGE)
OTHER_JUDGE = Actor(id="judge-2", role=Role.JUDGE)
CLIENT = Actor(id="client-1", role=Role.CLIENT)
OTHER_CLIENT = Actor(id="client-2", role=Role.CLIENT)


@pytest.fixture
def case():
    return make_case_row(client_id="client-1", judge_id="judge-1")


class TestRelationship:
    def test_owner(self, case):
        assert relationship_to(CLIENT, case) is Relationship.OWNER

    def test_assigned_judge(self, case):
        assert relationship_to(JUDGE, case) is Relationship.ASSIGNED_JUDGE

    def test_unrelated(self, case):
        assert relationship_to(OTHER_JUDGE, case) is Relationship.UNRELATED
        assert relationship_to(OTHER_CLIENT, case) is Relationship.UNRELATED
        assert relationship_to(ADMIN, case) is Relationship.UNRELATED

    def test_unassigned_case_has_no_judge_relationship(self):
        case = make_case_row(judge_id=None)
        assert relationship_to(JUDGE, case) is Relationship.UNRELATED


class TestRoleChecks:
    @pytest.mark.parametrize(
        ("actor", "action", "message"),
        [
            (ADMIN, CaseAction.FILE, "Only clients can file cases"),
            (JUDGE, CaseAction.FILE, "Only clients can file cases"),
            (ADMIN, CaseAction.CHECK_DUPLICATES, "Only clients can check for duplicate cases"),
            (CLIENT, CaseAction.ASSIGN_JUDGE, "Only admins can assign cases"),
            (JUDGE, CaseAction.ASSIGN_JUDGE, "Only admins can assign cases"),
            (
                CLIENT,
                CaseAction.UPDATE_STATUS,
                "Only admins or the assigned judge can update case status",
            ),
            (JUDGE, CaseAction.DELETE, "Only admins can delete cases"),
            (ADMIN, CaseAction.MANAGE_HEARINGS, "Only judges can manage hearings"),
        ],
    )
    def test_wrong_role_denied(self, actor, action, message):
        with pytest.raises(AuthorizationError, match=message) as exc_info:
            authorize(actor, action)
        assert exc_info.value.details["action"] == action.value

    @pytest.mark.parametrize(
        ("actor", "action"),
        [
            (CLIENT, CaseAction.FILE),
            (CLIENT, CaseAction.CHECK_DUPLICATES),
            (ADMIN, CaseAction.ASSIGN_JUDGE),
            (ADMIN, CaseAction.UPDATE_STATUS),
            (JUDGE, CaseAction.UPDATE_STATUS),
            (ADMIN, CaseAction.DELETE),
            (JUDGE, CaseAction.MANAGE_HEARINGS),
        ],
    )
    def test_right_role_allowed(self, actor, action):
        authorize(actor, action)


class TestRelationshipChecks:
    def test_assigned_judge_may_update_status(self, case):
        authorize(JUDGE, CaseAction.UPDATE_STATUS, case)

    def test_other_judge_may_not_update_status(self, case):
        with pytest.raises(AuthorizationError, match="not the judge assigned"):
            authorize(OTHER_JUDGE, CaseAction.UPDATE_STATUS, case)

    def test_admin_needs_no_relationship(self, case):
        authorize(ADMIN, CaseAction.UPDATE_STATUS, case)
        authorize(ADMIN, CaseAction.VIEW, case)

    def test_owner_may_view(self, case):
        authorize(CLIENT, CaseAction.VIEW, case)

    def test_other_client_may_not_view(self, case):
        with pytest.raises(AuthorizationError, match="Access denied"):
            authorize(OTHER_CLIENT, CaseAction.VIEW, case)

    def test_unassigned_judge_may_not_view(self, case):
        with pytest.raises(AuthorizationError, match="Access denied"):
            authorize(OTHER_JUDGE, CaseAction.VIEW, case)

    def test_only_assigned_judge_manages_hearings(self, case):
        authorize(JUDGE, CaseAction.MANAGE_HEARINGS, case)
        with pytest.raises(AuthorizationError, match="You are not assigned to this case"):
            authorize(OTHER_JUDGE, CaseAction.MANAGE_HEARINGS, case)
