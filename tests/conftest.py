"""Shared test fixtures and factory functions.

Factories return valid objects with sensible defaults. Override any
field via keyword arguments to create specific test scenarios without
repeating boilerplate.

API tests run against a throwaway SQLite file per test unless
TEST_DATABASE_URL points somewhere else (e.g. a PostgreSQL database).
"""

import os
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from caseflow.api.app import create_app
from caseflow.core.config import Settings
from caseflow.core.security import create_access_token
from caseflow.models.database import Base, CaseRow, CourtRow, UserRow
from caseflow.models.domain import CaseStatus, Role

# ---------------------------------------------------------------------------
# Settings / App / Client
# ---------------------------------------------------------------------------

TEST_JWT_SECRET = "test-secret-with-enough-bytes-for-hs256"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'caseflow.db'}")


@pytest.fixture
def test_settings(database_url: str) -> Settings:
    """Settings configured for testing, console logs, debug enabled."""
    return Settings(
        debug=True,
        database_url=database_url,
        jwt_secret=TEST_JWT_SECRET,
        log_format="console",
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def app(test_settings: Settings) -> AsyncIterator[FastAPI]:
    """FastAPI application wired with test settings and a fresh schema."""
    application = create_app(test_settings)
    engine = application.state.engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield application

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def session_factory(app: FastAPI) -> async_sessionmaker[AsyncSession]:
    factory: async_sessionmaker[AsyncSession] = app.state.session_factory
    return factory


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """A session on the app's database for arranging and inspecting state."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Users and auth
# ---------------------------------------------------------------------------

MakeUser = Callable[..., Awaitable[UserRow]]


@pytest.fixture
def make_user(session_factory: async_sessionmaker[AsyncSession]) -> MakeUser:
    """Persist a user. Usernames are unique per test by default."""
    counter = {"n": 0}

    async def _make(role: Role = Role.CLIENT, **overrides: Any) -> UserRow:
        counter["n"] += 1
        username = overrides.pop("username", f"{role.lower()}{counter['n']}")
        defaults: dict[str, Any] = {
            "username": username,
            "email": f"{username}@example.com",
            "role": role,
            "first_name": role.value,
            "last_name": f"User{counter['n']}",
        }
        defaults.update(overrides)
        async with session_factory() as session:
            user = UserRow(**defaults)
            session.add(user)
            await session.commit()
            return user

    return _make


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[[UserRow], dict[str, str]]:
    def _headers(user: UserRow) -> dict[str, str]:
        token = create_access_token(user.id, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ---------------------------------------------------------------------------
# Request payload factories
# ---------------------------------------------------------------------------


def make_filing_payload(**overrides: Any) -> dict[str, Any]:
    """A complete, valid POST /case/file body (camelCase)."""
    payload: dict[str, Any] = {
        "title": "Smith vs Jones",
        "description": "boundary dispute",
        "defendant": {
            "name": "Robert Jones",
            "phone": "555-0100",
            "email": "rjones@example.com",
            "address": "12 Elm Street",
        },
        "plaintiff": {"name": "Alice Smith", "phone": "555-0199"},
        "caseType": "civil",
        "court": "district",
        "priority": "Medium",
        "compliance": {
            "verificationStatement": True,
            "perjuryAcknowledgment": True,
            "courtRulesAcknowledgment": True,
            "electronicSignature": "Alice Smith",
        },
    }
    payload.update(overrides)
    return payload


def make_court_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": "Courtroom 1",
        "location": "Main Courthouse, Floor 2",
        "type": "District",
        "capacity": 40,
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------


def make_case_row(**overrides: Any) -> CaseRow:
    """An unsaved CaseRow with sensible defaults."""
    defaults: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "title": "Smith vs Jones",
        "description": "boundary dispute",
        "defendant": {"name": "Robert Jones", "phone": "555-0100"},
        "case_type": "civil",
        "court": "district",
        "priority": "Medium",
        "compliance": {
            "verification_statement": True,
            "perjury_acknowledgment": True,
            "court_rules_acknowledgment": True,
        },
        "status": CaseStatus.OPEN,
        "client_id": "client-1",
        "created_at": datetime(2026, 3, 1, 9, 30, tzinfo=UTC),
    }
    defaults.update(overrides)
    return CaseRow(**defaults)


async def persist_case(
    session_factory: async_sessionmaker[AsyncSession],
    client: UserRow,
    **overrides: Any,
) -> CaseRow:
    """Insert a case owned by client directly, bypassing the API."""
    row = make_case_row(client_id=client.id, **overrides)
    async with session_factory() as session:
        session.add(row)
        await session.commit()
        return row


async def persist_court(
    session_factory: async_sessionmaker[AsyncSession],
    **overrides: Any,
) -> CourtRow:
    defaults: dict[str, Any] = {
        "name": "Courtroom 1",
        "location": "Main Courthouse",
        "type": "District",
        "capacity": 40,
    }
    defaults.update(overrides)
    async with session_factory() as session:
        court = CourtRow(**defaults)
        session.add(court)
        await session.commit()
        return court
