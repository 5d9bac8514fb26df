# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Async SQLAlchemy engine/sessionmaker lifecycle.

This module owns the application-global async SQLAlchemy engine and
``async_sessionmaker`` used by the SQL trade ledger.

Lifecycle:
    * Call ``init_engine_and_sessionmaker(settings)`` at app startup (lifespan).
    * Hand ``get_sessionmaker()`` to repositories; each repository call opens
      and closes its own session.
    * Call ``dispose_engine()`` during shutdown.

Notes:
    * ``pool_pre_ping=True`` helps surface dead connections before use.
    * When ``DATABASE_URL`` is unset the app runs on the in-memory ledger and
      this module is never initialized.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tradebook_api.config.settings import Settings

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def init_engine_and_sessionmaker(settings: Settings) -> None:
    """Initialize the global async engine and sessionmaker.

    Args:
        settings: Application settings providing ``database_url``.

    Raises:
        ValueError: If ``database_url`` is empty.
    """
    global _engine, _sessionmaker

    if not settings.database_url:
        raise ValueError("database_url must be configured")
    if _engine is not None:
        # Already initialized (idempotent).
        return

    _engine = create_async_engine(
        url=settings.database_url,
        pool_pre_ping=True,
        echo=False,
    )
    _sessionmaker = async_sessionmaker(bind=_engine, expire_on_commit=False, class_=AsyncSession)


async def dispose_engine() -> None:
    """Dispose the global engine at application shutdown."""
    global _engine, _sessionmaker
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Return the initialized async sessionmaker.

    Raises:
        RuntimeError: If the sessionmaker is not yet initialized.
    """
    if _sessionmaker is None:
        raise RuntimeError("DB sessionmaker not initialized (call init_engine_and_sessionmaker)")
    return _sessionmaker
