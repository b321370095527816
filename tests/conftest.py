"""
tests.conftest

Shared fixtures for the identity store and the connection-path probe.

Responsibilities:
- Build a fresh scope (new uuid-named database file) per test, wired to a probe.
- Seed one known user, then reset the probe so seeding does not leak into assertions.
- Delete the database and dispose the scope on teardown, including on failure.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from identity_probe.container import IdentityScope
from identity_probe.db.models import User
from identity_probe.observability.logging import configure_logging
from identity_probe.probe import ConnectionPathProbe
from identity_probe.settings import Settings

PASSWORD = "1DigitSeveralLetters!"


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    configure_logging(service_name="identity-probe-tests", level="DEBUG")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    # Minimum bcrypt cost keeps hashing out of the test runtime.
    return Settings(env="test", data_dir=tmp_path, password_hash_rounds=4)


@pytest.fixture
def probe() -> ConnectionPathProbe:
    return ConnectionPathProbe()


@pytest_asyncio.fixture
async def scope(settings: Settings, probe: ConnectionPathProbe) -> AsyncIterator[IdentityScope]:
    async with IdentityScope.for_new_database(settings, interceptors=[probe]) as scope:
        await scope.ensure_deleted()
        await scope.ensure_created()
        try:
            yield scope
        finally:
            await scope.ensure_deleted()


@pytest_asyncio.fixture
async def andy(scope: IdentityScope, probe: ConnectionPathProbe) -> User:
    user = User(user_name="Andy", email="andy@somewhere")
    result = await scope.users.create(user, PASSWORD)
    assert result.succeeded, str(result)
    probe.reset()
    return user
