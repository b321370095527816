"""
identity_probe.db.interceptors

Intercepted SQLite connection factory.

Responsibilities:
- Define the interception point (`ConnectionInterceptor`) with a blocking and a
  non-blocking connection-opening hook.
- Open driver connections for SQLAlchemy through either entry point, running every
  registered interceptor first.
- Own the lifetime of the backing database file (ensure deleted).
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiosqlite

from identity_probe.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(slots=True)
class ConnectionOpening:
    """
    Event data handed to interceptors right before a driver connection is created.

    Hooks may amend `connect_args`; the factory passes them to the driver unchanged.
    """

    database_path: Path
    is_async: bool
    connect_args: dict[str, Any] = field(default_factory=dict)


class ConnectionInterceptor:
    """
    Base class for connection-opening hooks.

    Both hooks default to doing nothing, which lets the open proceed unmodified.
    Real deployments override `connection_opening_async` to attach an access token
    obtained from an async-only token provider.
    """

    def connection_opening(self, event: ConnectionOpening) -> None:
        return None

    async def connection_opening_async(self, event: ConnectionOpening) -> None:
        return None


class ConnectionFactory:
    def __init__(
        self,
        *,
        database_path: Path,
        interceptors: Sequence[ConnectionInterceptor] = (),
        timeout: float = 5.0,
    ) -> None:
        self.database_path = database_path
        self._interceptors = tuple(interceptors)
        self._timeout = timeout

    def _opening(self, *, is_async: bool) -> ConnectionOpening:
        return ConnectionOpening(
            database_path=self.database_path,
            is_async=is_async,
            connect_args={"timeout": self._timeout},
        )

    async def open_async(self) -> aiosqlite.Connection:
        """
        Non-blocking entry point; used as SQLAlchemy's `async_creator`.
        Every async hook is awaited before the driver connection is created.
        """

        event = self._opening(is_async=True)
        for interceptor in self._interceptors:
            await interceptor.connection_opening_async(event)
        log.debug("connection_opening", path=str(event.database_path), mode="async")
        return await aiosqlite.connect(event.database_path, **event.connect_args)

    def open_blocking(self) -> sqlite3.Connection:
        """
        Blocking entry point; used as SQLAlchemy's `creator` for sync engines.
        """

        event = self._opening(is_async=False)
        for interceptor in self._interceptors:
            interceptor.connection_opening(event)
        log.debug("connection_opening", path=str(event.database_path), mode="sync")
        return sqlite3.connect(event.database_path, **event.connect_args)

    def ensure_deleted(self) -> bool:
        """
        Remove the backing database file (and a leftover rollback journal).
        Returns True when the database existed.
        """

        existed = self.database_path.exists()
        self.database_path.unlink(missing_ok=True)
        journal = self.database_path.with_name(self.database_path.name + "-journal")
        journal.unlink(missing_ok=True)
        if existed:
            log.info("database_deleted", path=str(self.database_path))
        return existed


# --- Module Notes -----------------------------------------------------------
# Engines built on this factory use NullPool (see `identity_probe.db.session`), so each
# unit of work opens exactly one fresh connection and fires the hooks once.
