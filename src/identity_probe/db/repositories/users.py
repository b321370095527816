"""
identity_probe.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Insert users and look them up by id, normalized email or normalized user name.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from identity_probe.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_normalized_email(self, normalized_email: str) -> User | None:
        # Emails are not unique when the policy allows duplicates; return the oldest match.
        stmt = (
            select(User)
            .where(User.normalized_email == normalized_email)
            .order_by(User.created_at, User.id)
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_normalized_user_name(self, normalized_user_name: str) -> User | None:
        stmt = select(User).where(User.normalized_user_name == normalized_user_name)
        return (await self._session.execute(stmt)).scalar_one_or_none()
