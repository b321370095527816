"""
identity_probe.identity.manager

User manager (store façade).

Responsibilities:
- Create, find and update users through the async session path only.
- Enforce password and user policy, normalization and optimistic concurrency.
- Report business failures as `UserResult` values; infrastructure errors propagate.

Each public operation runs in its own session, so it opens exactly one connection.
"""

from __future__ import annotations

import unicodedata
import uuid

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from identity_probe.db.models import User
from identity_probe.db.repositories.users import UserRepo
from identity_probe.identity import results
from identity_probe.identity.passwords import PasswordHasher, validate_password
from identity_probe.identity.results import UserResult
from identity_probe.identity.validators import validate_user
from identity_probe.observability.logging import get_logger
from identity_probe.settings import Settings

log = get_logger(__name__)


def _new_stamp() -> str:
    return str(uuid.uuid4())


class UserManager:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        hasher: PasswordHasher | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._hasher = hasher or PasswordHasher(rounds=settings.password_hash_rounds)

    @staticmethod
    def normalize(value: str | None) -> str | None:
        if value is None:
            return None
        return unicodedata.normalize("NFC", value).upper()

    async def create(self, user: User, password: str) -> UserResult:
        if inspect(user).has_identity:
            # Already loaded from or written to the store; create never overwrites a row.
            log.warning("user_create_rejected", codes=["UserAlreadyExists"], user_id=user.id)
            return UserResult.failed(results.user_already_exists(user.id))

        password_errors = validate_password(password, self._settings)
        if password_errors:
            log.warning("user_create_rejected", codes=[e.code for e in password_errors])
            return UserResult.failed(*password_errors)

        normalized_user_name = self.normalize(user.user_name)
        normalized_email = self.normalize(user.email)

        async with self._session_factory() as session:
            repo = UserRepo(session)
            if user.id is not None and await repo.get(user.id) is not None:
                log.warning("user_create_rejected", codes=["UserAlreadyExists"], user_id=user.id)
                return UserResult.failed(results.user_already_exists(user.id))

            errors = await validate_user(
                repo=repo,
                user=user,
                normalized_user_name=normalized_user_name or "",
                normalized_email=normalized_email,
                settings=self._settings,
            )
            if errors:
                log.warning("user_create_rejected", codes=[e.code for e in errors])
                return UserResult.failed(*errors)

            # Insert a separate row; the caller's object only changes once the insert commits.
            row = User(
                id=user.id or str(uuid.uuid4()),
                user_name=user.user_name,
                normalized_user_name=normalized_user_name,
                email=user.email,
                normalized_email=normalized_email,
                password_hash=await self._hasher.hash_password(password),
                security_stamp=_new_stamp(),
                concurrency_stamp=_new_stamp(),
                phone_number=user.phone_number,
            )
            try:
                await repo.add(row)
                await session.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent insert of the same id or user name.
                await session.rollback()
                log.warning("user_create_conflict", user_id=row.id, user_name=user.user_name)
                if "users.id" in str(e.orig):
                    return UserResult.failed(results.user_already_exists(row.id))
                return UserResult.failed(results.duplicate_user_name(user.user_name))

        user.id = row.id
        user.normalized_user_name = row.normalized_user_name
        user.normalized_email = row.normalized_email
        user.password_hash = row.password_hash
        user.security_stamp = row.security_stamp
        user.concurrency_stamp = row.concurrency_stamp
        user.created_at = row.created_at
        user.updated_at = row.updated_at
        log.info("user_created", user_id=user.id)
        return UserResult.success()

    async def find_by_email(self, email: str) -> User | None:
        async with self._session_factory() as session:
            return await UserRepo(session).get_by_normalized_email(self.normalize(email) or "")

    async def find_by_name(self, user_name: str) -> User | None:
        async with self._session_factory() as session:
            return await UserRepo(session).get_by_normalized_user_name(
                self.normalize(user_name) or ""
            )

    async def find_by_id(self, user_id: str) -> User | None:
        async with self._session_factory() as session:
            return await UserRepo(session).get(user_id)

    async def update(self, user: User) -> UserResult:
        normalized_user_name = self.normalize(user.user_name)
        normalized_email = self.normalize(user.email)

        async with self._session_factory() as session:
            repo = UserRepo(session)
            stored = await repo.get(user.id)
            if stored is None:
                return UserResult.failed(results.user_not_found(user.id))
            if stored.concurrency_stamp != user.concurrency_stamp:
                log.warning("user_update_conflict", user_id=user.id)
                return UserResult.failed(results.concurrency_failure())

            errors = await validate_user(
                repo=repo,
                user=user,
                normalized_user_name=normalized_user_name or "",
                normalized_email=normalized_email,
                settings=self._settings,
                exclude_self=True,
            )
            if errors:
                log.warning("user_update_rejected", codes=[e.code for e in errors])
                return UserResult.failed(*errors)

            stored.user_name = user.user_name
            stored.normalized_user_name = normalized_user_name or ""
            stored.email = user.email
            stored.normalized_email = normalized_email
            stored.phone_number = user.phone_number
            stored.password_hash = user.password_hash
            stored.security_stamp = user.security_stamp
            stored.concurrency_stamp = _new_stamp()
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                log.warning("user_update_conflict", user_id=user.id)
                return UserResult.failed(results.duplicate_user_name(user.user_name))

        # Hand the caller the new stamp so a follow-up update is not seen as stale.
        user.normalized_user_name = stored.normalized_user_name
        user.normalized_email = stored.normalized_email
        user.concurrency_stamp = stored.concurrency_stamp
        log.info("user_updated", user_id=user.id)
        return UserResult.success()

    async def check_password(self, user: User, password: str) -> bool:
        if not user.password_hash:
            return False
        return await self._hasher.verify_password(password, user.password_hash)


# --- Module Notes -----------------------------------------------------------
# The manager never touches the blocking engine; all I/O goes through AsyncSession,
# which acquires connections via `ConnectionFactory.open_async`.
