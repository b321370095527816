"""
identity_probe.container

Composition root for the identity store.

Responsibilities:
- Wire settings, the intercepted connection factory, the async engine, the
  sessionmaker and the user manager into one scope.
- Own the lifetime of that scope (engine disposal on every exit path).
- Allocate a fresh, uniquely named database file per scope.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType

import structlog
from sqlalchemy import Engine

from identity_probe.db.init_db import ensure_created
from identity_probe.db.interceptors import ConnectionFactory, ConnectionInterceptor
from identity_probe.db.session import create_blocking_engine, create_engine, create_sessionmaker
from identity_probe.identity.manager import UserManager
from identity_probe.observability.logging import get_logger
from identity_probe.settings import Settings

log = get_logger(__name__)


class IdentityScope:
    def __init__(
        self,
        *,
        settings: Settings,
        database_path: Path,
        interceptors: Sequence[ConnectionInterceptor] = (),
    ) -> None:
        self.settings = settings
        self.connections = ConnectionFactory(
            database_path=database_path,
            interceptors=interceptors,
            timeout=settings.connect_timeout,
        )
        self.engine = create_engine(self.connections)
        self.sessionmaker = create_sessionmaker(self.engine)
        self.users = UserManager(session_factory=self.sessionmaker, settings=settings)
        self._closed = False

    @classmethod
    def for_new_database(
        cls,
        settings: Settings,
        interceptors: Sequence[ConnectionInterceptor] = (),
    ) -> IdentityScope:
        # Unique file name per scope keeps concurrently running scopes apart.
        database_path = Path(settings.data_dir) / f"{uuid.uuid4()}.db"
        return cls(settings=settings, database_path=database_path, interceptors=interceptors)

    @property
    def database_path(self) -> Path:
        return self.connections.database_path

    async def ensure_deleted(self) -> bool:
        return self.connections.ensure_deleted()

    async def ensure_created(self) -> None:
        await ensure_created(self.engine)
        log.info("database_created", path=str(self.database_path))

    def blocking_engine(self) -> Engine:
        # Sync entry point on the same factory; the user manager never uses it.
        return create_blocking_engine(self.connections)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.engine.dispose()

    async def __aenter__(self) -> IdentityScope:
        structlog.contextvars.bind_contextvars(database=str(self.database_path))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            await self.close()
        finally:
            structlog.contextvars.unbind_contextvars("database")


# --- Module Notes -----------------------------------------------------------
# Explicit construction replaces a reflection-based DI container: everything a scope
# needs is passed in, nothing is looked up globally.
