"""Repository for user lookups.

Accounts are provisioned by the auth service; the API reads them to
resolve the caller and to validate judge assignment.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import UserRow
from caseflow.models.domain import Role


class UserRepo:
    """Async repository for users."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: UserRow) -> UserRow:
        """Insert a user and return it with generated fields populated."""
        self._session.add(user)
        await self._session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserRow | None:
        stmt = select(UserRow).where(UserRow.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id_and_role(self, user_id: str, role: Role) -> UserRow | None:
        """Fetch a user only if they hold the given role."""
        stmt = select(UserRow).where(UserRow.id == user_id).where(UserRow.role == role)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_role(self) -> dict[str, int]:
        stmt = select(UserRow.role, func.count(UserRow.id)).group_by(UserRow.role)
        result = await self._session.execute(stmt)
        return {role: count for role, count in result.all()}
