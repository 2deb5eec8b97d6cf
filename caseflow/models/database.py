"""SQLAlchemy 2.0 ORM models for all database tables.

Domain enums are stored as VARCHAR via their StrEnum string values.
Nested value objects (parties, compliance block, representation) are
stored as JSON documents on the case row. Primary keys are opaque UUID
strings generated client-side.
"""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Shared base for all ORM models."""


# ---------------------------------------------------------------------------
# users
# ---------------------------------------------------------------------------


class UserRow(Base):
    """An account provisioned by the auth service."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default="", server_default=""
    )
    last_name: Mapped[str] = mapped_column(
        String(100), nullable=False, default="", server_default=""
    )
    phone: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", server_default=""
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.username

    def __repr__(self) -> str:
        return f"<UserRow id={self.id!r} username={self.username!r} role={self.role!r}>"


# ---------------------------------------------------------------------------
# cases
# ---------------------------------------------------------------------------


class CaseRow(Base):
    """A filed legal matter."""

    __tablename__ = "cases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    defendant: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    plaintiff: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    case_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    court: Mapped[str | None] = mapped_column(String(100), nullable=True)
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Medium", server_default="Medium"
    )
    urgency_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    report_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    evidence: Mapped[str | None] = mapped_column(Text, nullable=True)
    representation: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    relief_sought: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    compliance: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Open", server_default="Open", index=True
    )
    client_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    judge_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    client: Mapped["UserRow"] = relationship(foreign_keys=[client_id], lazy="joined")
    judge: Mapped["UserRow | None"] = relationship(foreign_keys=[judge_id], lazy="joined")

    __table_args__ = (Index("ix_cases_client_status", "client_id", "status"),)

    def __repr__(self) -> str:
        return f"<CaseRow id={self.id!r} status={self.status!r} title={self.title!r}>"


# ---------------------------------------------------------------------------
# courts
# ---------------------------------------------------------------------------


class CourtRow(Base):
    """A courtroom hearings can be booked into."""

    __tablename__ = "courts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<CourtRow id={self.id!r} name={self.name!r}>"


# ---------------------------------------------------------------------------
# hearings
# ---------------------------------------------------------------------------


class HearingRow(Base):
    """A scheduled hearing for a case, booked into a court at a date and time."""

    __tablename__ = "hearings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    case_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True
    )
    court_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courts.id", ondelete="CASCADE"), nullable=False
    )
    judge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hearing_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    hearing_time: Mapped[str] = mapped_column("time", String(5), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    case: Mapped["CaseRow"] = relationship(lazy="joined")
    court: Mapped["CourtRow"] = relationship(lazy="joined")
    judge: Mapped["UserRow"] = relationship(lazy="joined")

    __table_args__ = (Index("ix_hearings_court_slot", "court_id", "date", "time", unique=True),)

    def __repr__(self) -> str:
        return (
            f"<HearingRow id={self.id!r} case_id={self.case_id!r} "
            f"slot={self.hearing_date} {self.hearing_time}>"
        )


# ---------------------------------------------------------------------------
# notifications
# ---------------------------------------------------------------------------


class NotificationRow(Base):
    """A message shown to a user in their notification feed."""

    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(40), nullable=False, default="general", server_default="general"
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<NotificationRow id={self.id!r} user_id={self.user_id!r} type={self.type!r}>"


# ---------------------------------------------------------------------------
# reports
# ---------------------------------------------------------------------------


class ReportRow(Base):
    """An admin-authored report with a free-form data payload."""

    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<ReportRow id={self.id!r} title={self.title!r}>"


# ---------------------------------------------------------------------------
# comments
# ---------------------------------------------------------------------------


class CommentRow(Base):
    """Feedback a client sent to the court administration."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="New", server_default="New", index=True
    )
    admin_notes: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )

    user: Mapped["UserRow"] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"<CommentRow id={self.id!r} status={self.status!r} subject={self.subject!r}>"
