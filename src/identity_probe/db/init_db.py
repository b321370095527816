"""
identity_probe.db.init_db

Schema bootstrap helpers.

Responsibilities:
- Create tables for a fresh database file.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from identity_probe.db import models  # noqa: F401  # register models on Base.metadata
from identity_probe.db.base import Base


async def ensure_created(engine: AsyncEngine) -> None:
    """
    Create tables if they don't exist. Opens one connection through the async path.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
