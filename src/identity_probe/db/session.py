"""
identity_probe.db.session

SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine on top of an intercepted `ConnectionFactory`.
- Create a blocking engine on the same factory (sync entry point).
- Create the async sessionmaker with safe defaults.
"""

from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from identity_probe.db.interceptors import ConnectionFactory


def create_engine(factory: ConnectionFactory) -> AsyncEngine:
    # NullPool: no connection reuse, so every operation goes through the opening hooks.
    return create_async_engine(
        f"sqlite+aiosqlite:///{factory.database_path}",
        async_creator=factory.open_async,
        poolclass=NullPool,
    )


def create_blocking_engine(factory: ConnectionFactory) -> Engine:
    return create_sync_engine(
        f"sqlite:///{factory.database_path}",
        creator=factory.open_blocking,
        poolclass=NullPool,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps returned entities readable after their session closes.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
