# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Quote Entity

Purpose:
    Immutable point-in-time snapshot of one equity, produced either by a live
    quote source or by the synthetic generator (no I/O).

Layer: domain/entities
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Final

from .base import BaseEntity

SYNTHETIC_SOURCE_ID: Final[str] = "SYNTHETIC"
DEFAULT_CURRENCY: Final[str] = "INR"

# Providers round independently; allow one hundredth of a percent of drift.
CHANGE_PERCENT_TOLERANCE: Final[Decimal] = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class Quote(BaseEntity):
    """Latest quote entity.

    Args:
        symbol: Canonical, upper-case ticker symbol.
        price: Last traded price (non-negative).
        change: Absolute change versus ``previous_close``.
        change_percent: ``change / previous_close * 100``.
        volume: Traded volume (non-negative).
        day_high: Session high (non-negative).
        day_low: Session low (non-negative).
        open: Session open.
        previous_close: Prior session close.
        source_id: Identifier of the adapter that produced the quote, or
            ``"SYNTHETIC"``.
        is_authentic: ``False`` for generated data.
        retrieved_at: UTC timestamp of acquisition (timezone-aware).
        currency: ISO 4217 code.
        market_cap: Optional market capitalization.

    Raises:
        ValueError: If invariants are violated.
    """

    symbol: str
    price: Decimal
    change: Decimal
    change_percent: Decimal
    volume: int
    day_high: Decimal
    day_low: Decimal
    open: Decimal
    previous_close: Decimal
    source_id: str
    is_authentic: bool
    retrieved_at: datetime
    currency: str = DEFAULT_CURRENCY
    market_cap: Decimal | None = None

    def __post_init__(self) -> None:
        if not self.symbol or self.symbol != self.symbol.strip().upper():
            raise ValueError("symbol must be upper-case non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")
        if self.volume < 0:
            raise ValueError("volume must be >= 0")
        if self.day_high < 0 or self.day_low < 0:
            raise ValueError("day_high and day_low must be >= 0")
        if not self.is_authentic and self.source_id != SYNTHETIC_SOURCE_ID:
            raise ValueError(f"non-authentic quotes must use source_id {SYNTHETIC_SOURCE_ID!r}")
        if self.previous_close != 0:
            expected = self.change / self.previous_close * 100
            if abs(expected - self.change_percent) > CHANGE_PERCENT_TOLERANCE:
                raise ValueError("change_percent must equal change / previous_close * 100")
        if self.retrieved_at.tzinfo is None:
            object.__setattr__(self, "retrieved_at", self.retrieved_at.replace(tzinfo=UTC))

    @property
    def is_synthetic(self) -> bool:
        """Return True when the quote was fabricated rather than fetched."""
        return not self.is_authentic
