"""Tests for the logging helpers: credential redaction and actor binding."""

import structlog

from caseflow.core.logging import REDACTED, bind_actor, redact_secrets
from caseflow.models.domain import Actor, Role


class TestRedactSecrets:
    def test_masks_credential_keys(self):
        event = {"event": "auth_failed", "token": "eyJhbGciOi", "Authorization": "x"}

        result = redact_secrets(None, "info", dict(event))

        assert result["token"] == REDACTED
        # keys are matched exactly, as logged
        assert result["Authorization"] == "x"

    def test_leaves_other_keys_alone(self):
        event = {"event": "case_filed", "case_id": "c1", "client_id": "u1"}
        assert redact_secrets(None, "info", dict(event)) == event


class TestBindActor:
    def test_binds_user_and_role(self):
        structlog.contextvars.clear_contextvars()
        try:
            bind_actor(Actor(id="judge-1", role=Role.JUDGE))
            ctx = structlog.contextvars.get_contextvars()
        finally:
            structlog.contextvars.clear_contextvars()

        assert ctx == {"user_id": "judge-1", "role": "Judge"}
