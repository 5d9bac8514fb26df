# src/tradebook_api/application/schemas/dto/trades.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Application DTOs for the trade ledger.

Synopsis:
    Input DTOs are permissive Pydantic models: they coerce types but leave
    business rules (positive quantity and price, known action) to the
    ``AppendTrade`` use case, which reports violations as
    ``InvalidTradeInput``. Results that carry domain entities are frozen
    dataclasses.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from pydantic import field_validator

from tradebook_api.application.schemas.dto.base import BaseDTO
from tradebook_api.domain.entities.position import Position
from tradebook_api.domain.entities.trade_event import TradeEvent


class TradeEventInput(BaseDTO):
    """Caller-supplied trade before validation.

    Attributes:
        symbol: Ticker in any case; canonicalized on append.
        action: ``BUY`` or ``SELL`` in any case.
        quantity: Share count.
        price: Price per share.
        occurred_on: Trade date; defaults to today (UTC) when omitted.
        note: Optional free text.
    """

    symbol: str
    action: str
    quantity: int
    price: Decimal
    occurred_on: date | None = None
    note: str | None = None


class TradeFilter(BaseDTO):
    """Optional filters for listing trades.

    Attributes:
        symbol: Case-insensitive substring of the symbol.
        action: ``BUY`` or ``SELL``.
        start_date: Inclusive lower bound on ``occurred_on``.
        end_date: Inclusive upper bound on ``occurred_on``.
    """

    symbol: str | None = None
    action: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("symbol", "action")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value.upper() if value else None


@dataclass(frozen=True, slots=True)
class AppendTradeResult:
    """The appended event and the position recomputed right after it."""

    trade: TradeEvent
    position: Position


@dataclass(frozen=True, slots=True)
class ImportRejection:
    """An import item that failed validation, by position in the request."""

    index: int
    message: str


@dataclass(frozen=True, slots=True)
class ImportTradesResult:
    """Outcome of a bulk import: appended events in order, plus rejections."""

    imported: list[TradeEvent]
    rejected: list[ImportRejection]


@dataclass(frozen=True, slots=True)
class PortfolioExport:
    """Snapshot of an owner's ledger with every position recomputed from it.

    ``trades`` are in replay order so a re-import rebuilds the same positions.
    """

    exported_at: datetime
    trades: list[TradeEvent]
    positions: list[Position]
