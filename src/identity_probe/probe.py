"""
identity_probe.probe

Connection-path probe.

Responsibilities:
- Record whether a connection was opened, and through which entry point
  (blocking or non-blocking).
- Expose a reset operation so each observed operation starts from a clean slate.

The probe only observes: it never opens or authenticates a connection and it cannot fail.
If no connection is opened at all, every flag stays False.
"""

from __future__ import annotations

from identity_probe.db.interceptors import ConnectionInterceptor, ConnectionOpening


class ConnectionPathProbe(ConnectionInterceptor):
    def __init__(self) -> None:
        self.opened = False
        self.opened_sync = False
        self.opened_async = False

    def connection_opening(self, event: ConnectionOpening) -> None:
        # With token-based auth there is no blocking way to fetch the token, e.g.
        #   event.connect_args["access_token"] = run_sync(provider.get_token(...))
        # so production must never get here. Kept so "sync never fires" stays assertable.
        self.opened = True
        self.opened_sync = True

    async def connection_opening_async(self, event: ConnectionOpening) -> None:
        # Production equivalent:
        #   event.connect_args["access_token"] = await provider.get_token(...)
        self.opened = True
        self.opened_async = True

    def reset(self) -> None:
        self.opened = False
        self.opened_sync = False
        self.opened_async = False

    def assert_async_only(self) -> None:
        """
        Raise AssertionError naming the first violated expectation:
        a connection was opened, asynchronously, and not synchronously.
        """

        if not self.opened:
            raise AssertionError("A database connection should have been opened")
        if not self.opened_async:
            raise AssertionError("The database connection should be opened asynchronously")
        if self.opened_sync:
            raise AssertionError("The database connection should not be opened synchronously")

    def __repr__(self) -> str:
        return (
            f"ConnectionPathProbe(opened={self.opened}, opened_sync={self.opened_sync}, "
            f"opened_async={self.opened_async})"
        )
