# src/tradebook_api/adapters/repositories/base_repository.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
BaseRepository: shared mechanics for SQLAlchemy-backed repositories.

Purpose:
    * Session-per-call helpers (each call owns its session and transaction).
    * Safe fetch helpers (all, scalar).
    * Uniform mapping of ``SQLAlchemyError`` to ``LedgerUnavailable``.

Layer: adapters / repositories

Notes:
    * No business logic, no domain decisions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tradebook_api.domain.exceptions.ledger import LedgerUnavailable
from tradebook_api.infrastructure.logging.logger import get_json_logger

TModel = TypeVar("TModel")

logger = get_json_logger(__name__)


class BaseRepository(Generic[TModel]):  # noqa: UP046
    """Base class for repositories that open one session per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the repository.

        Args:
            session_factory: Factory bound to the target database.
        """
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Yield a session inside a transaction that commits on success.

        Raises:
            LedgerUnavailable: If any SQLAlchemy error occurs, including on commit.
        """
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as exc:
            raise self._unavailable(operation, exc) from exc

    async def fetch_all(self, stmt: Select[Any], operation: str) -> list[TModel]:
        """Execute a statement and return all rows as a list."""
        try:
            async with self._session_factory() as session:
                res = await session.execute(stmt)
                return list(res.scalars().all())
        except SQLAlchemyError as exc:
            raise self._unavailable(operation, exc) from exc

    async def fetch_scalar(self, stmt: Select[Any], operation: str) -> Any:
        """Execute a statement and return its single scalar value."""
        try:
            async with self._session_factory() as session:
                return await session.scalar(stmt)
        except SQLAlchemyError as exc:
            raise self._unavailable(operation, exc) from exc

    @staticmethod
    def _unavailable(operation: str, exc: SQLAlchemyError) -> LedgerUnavailable:
        logger.error(
            "ledger_unavailable",
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        return LedgerUnavailable(
            "trade ledger is temporarily unavailable",
            details={"operation": operation},
        )
