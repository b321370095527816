"""
tests.test_user_manager_async

Regression tests: user manager operations must open their connection through the
async entry point, never the blocking one.
"""

from __future__ import annotations

import pytest

from identity_probe.container import IdentityScope
from identity_probe.db.models import User
from identity_probe.probe import ConnectionPathProbe

PASSWORD = "1DigitSeveralLetters!"


def _assert_opened_async_only(probe: ConnectionPathProbe) -> None:
    assert probe.opened, "A database connection should have been opened"
    assert probe.opened_async, "The database connection should be opened asynchronously"
    assert not probe.opened_sync, "The database connection should not be opened synchronously"


@pytest.mark.asyncio
async def test_create(scope: IdentityScope, probe: ConnectionPathProbe, andy: User) -> None:
    user = User(user_name="Bob", email="bob@somewhere")
    result = await scope.users.create(user, PASSWORD)

    assert result.succeeded, "User should be created"
    _assert_opened_async_only(probe)


@pytest.mark.asyncio
async def test_find_by_email(scope: IdentityScope, probe: ConnectionPathProbe, andy: User) -> None:
    result = await scope.users.find_by_email("andy@somewhere")

    assert result is not None
    assert result.id == andy.id
    _assert_opened_async_only(probe)


@pytest.mark.asyncio
async def test_update(scope: IdentityScope, probe: ConnectionPathProbe, andy: User) -> None:
    andy.phone_number = "anumber"
    result = await scope.users.update(andy)

    assert result.succeeded
    _assert_opened_async_only(probe)

    stored = await scope.users.find_by_id(andy.id)
    assert stored is not None
    assert stored.phone_number == "anumber"


@pytest.mark.asyncio
async def test_create_with_taken_email_fails(
    scope: IdentityScope, probe: ConnectionPathProbe, andy: User
) -> None:
    result = await scope.users.create(User(user_name="Andrew", email="ANDY@somewhere"), PASSWORD)

    assert not result.succeeded
    assert result.codes == ["DuplicateEmail"]
    # Validation still reads through the async path.
    _assert_opened_async_only(probe)


@pytest.mark.asyncio
async def test_flags_do_not_leak_between_operations(
    scope: IdentityScope, probe: ConnectionPathProbe, andy: User
) -> None:
    assert (probe.opened, probe.opened_sync, probe.opened_async) == (False, False, False)

    await scope.users.find_by_name("andy")
    _assert_opened_async_only(probe)

    probe.reset()
    assert (probe.opened, probe.opened_sync, probe.opened_async) == (False, False, False)

    andy.phone_number = "another"
    assert (await scope.users.update(andy)).succeeded
    _assert_opened_async_only(probe)


@pytest.mark.asyncio
async def test_check_password_opens_no_connection(
    scope: IdentityScope, probe: ConnectionPathProbe, andy: User
) -> None:
    assert await scope.users.check_password(andy, PASSWORD)
    assert not await scope.users.check_password(andy, "wrong")

    assert not probe.opened
    assert not probe.opened_sync
    assert not probe.opened_async


@pytest.mark.asyncio
async def test_creating_an_existing_user_again_fails(
    scope: IdentityScope, probe: ConnectionPathProbe, andy: User
) -> None:
    before = await scope.users.find_by_id(andy.id)
    assert before is not None

    result = await scope.users.create(andy, "2OtherPassword!!")

    assert not result.succeeded
    assert result.codes == ["UserAlreadyExists"]
    after = await scope.users.find_by_id(andy.id)
    assert after is not None
    assert after.password_hash == before.password_hash
    assert after.concurrency_stamp == before.concurrency_stamp
    assert await scope.users.check_password(after, PASSWORD)


@pytest.mark.asyncio
async def test_creating_a_loaded_user_fails_without_touching_the_store(
    scope: IdentityScope, probe: ConnectionPathProbe, andy: User
) -> None:
    loaded = await scope.users.find_by_email("andy@somewhere")
    assert loaded is not None
    probe.reset()

    result = await scope.users.create(loaded, PASSWORD)

    assert result.codes == ["UserAlreadyExists"]
    assert not probe.opened
