"""
tests.test_probe

Connection-path probe and intercepted connection factory.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import text

from identity_probe.container import IdentityScope
from identity_probe.db.interceptors import (
    ConnectionFactory,
    ConnectionInterceptor,
    ConnectionOpening,
)
from identity_probe.probe import ConnectionPathProbe


class _Recorder(ConnectionInterceptor):
    def __init__(self, name: str, calls: list[str]) -> None:
        self._name = name
        self._calls = calls
        self.seen: list[ConnectionOpening] = []

    async def connection_opening_async(self, event: ConnectionOpening) -> None:
        self._calls.append(self._name)
        self.seen.append(event)


class _TokenInterceptor(ConnectionInterceptor):
    async def connection_opening_async(self, event: ConnectionOpening) -> None:
        event.connect_args["timeout"] = 1.5


@pytest.mark.asyncio
async def test_blocking_engine_fires_only_sync_hook(
    scope: IdentityScope, probe: ConnectionPathProbe
) -> None:
    probe.reset()
    engine = scope.blocking_engine()
    try:
        with engine.connect() as conn:
            assert conn.execute(text("SELECT 1")).scalar_one() == 1
    finally:
        engine.dispose()

    assert probe.opened
    assert probe.opened_sync
    assert not probe.opened_async


@pytest.mark.asyncio
async def test_async_engine_fires_only_async_hook(
    scope: IdentityScope, probe: ConnectionPathProbe
) -> None:
    probe.reset()
    async with scope.engine.connect() as conn:
        assert (await conn.execute(text("SELECT 1"))).scalar_one() == 1

    probe.assert_async_only()


def test_new_probe_has_all_flags_clear() -> None:
    probe = ConnectionPathProbe()
    assert (probe.opened, probe.opened_sync, probe.opened_async) == (False, False, False)


def test_reset_clears_every_flag() -> None:
    probe = ConnectionPathProbe()
    event = ConnectionOpening(database_path=Path("x.db"), is_async=False)
    probe.connection_opening(event)
    assert probe.opened and probe.opened_sync

    probe.reset()
    assert (probe.opened, probe.opened_sync, probe.opened_async) == (False, False, False)


@pytest.mark.asyncio
async def test_assert_async_only_names_violated_expectation() -> None:
    probe = ConnectionPathProbe()
    with pytest.raises(AssertionError, match="should have been opened"):
        probe.assert_async_only()

    probe.connection_opening(ConnectionOpening(database_path=Path("x.db"), is_async=False))
    with pytest.raises(AssertionError, match="opened asynchronously"):
        probe.assert_async_only()

    await probe.connection_opening_async(
        ConnectionOpening(database_path=Path("x.db"), is_async=True)
    )
    with pytest.raises(AssertionError, match="not be opened synchronously"):
        probe.assert_async_only()


@pytest.mark.asyncio
async def test_interceptors_run_in_order_and_can_amend_connect_args(tmp_path: Path) -> None:
    calls: list[str] = []
    first = _Recorder("first", calls)
    last = _Recorder("last", calls)
    factory = ConnectionFactory(
        database_path=tmp_path / "amend.db",
        interceptors=[first, _TokenInterceptor(), last],
    )

    conn = await factory.open_async()
    await conn.close()

    assert calls == ["first", "last"]
    assert last.seen[0].is_async
    assert last.seen[0].connect_args["timeout"] == 1.5
    assert (tmp_path / "amend.db").exists()


def test_ensure_deleted_reports_whether_file_existed(tmp_path: Path) -> None:
    factory = ConnectionFactory(database_path=tmp_path / "gone.db")
    assert factory.ensure_deleted() is False

    conn = factory.open_blocking()
    conn.close()
    assert factory.ensure_deleted() is True
    assert not (tmp_path / "gone.db").exists()
