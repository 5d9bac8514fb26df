# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Trade Event Entity

Purpose:
    Immutable record of one buy or sell. Corrections are new compensating
    events; existing events are never edited in place.

Layer: domain/entities
"""
from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from tradebook_api.domain.enums.trade_action import TradeAction

from .base import BaseEntity

_ID_ALPHABET = string.ascii_lowercase + string.digits

MAX_SYMBOL_LENGTH = 20
MAX_OWNER_ID_LENGTH = 128
# Prices are stored as NUMERIC(18, 4).
PRICE_SCALE = 4
PRICE_PRECISION = 18
_PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_SCALE)
_PRICE_LIMIT = Decimal(10) ** (PRICE_PRECISION - PRICE_SCALE)


def new_trade_id() -> str:
    """Return a unique trade id of the form ``TRADE_<epoch-ms>_<9 random chars>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"TRADE_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True, slots=True)
class TradeEvent(BaseEntity):
    """A single appended trade.

    Args:
        id: Unique trade identifier.
        owner_id: Owning user (JWT subject).
        symbol: Canonical upper-case ticker.
        action: BUY or SELL.
        quantity: Number of shares (> 0).
        price: Price per share (> 0, at most four decimal places).
        occurred_on: Calendar date the trade was executed.
        recorded_at: UTC time the event was appended; breaks same-day ties.
        note: Optional free text.

    Raises:
        ValueError: If invariants are violated.
    """

    id: str
    owner_id: str
    symbol: str
    action: TradeAction
    quantity: int
    price: Decimal
    occurred_on: date
    recorded_at: datetime
    note: str | None = None

    def __post_init__(self) -> None:
        if not self.owner_id:
            raise ValueError("owner_id must be non-empty")
        if len(self.owner_id) > MAX_OWNER_ID_LENGTH:
            raise ValueError(f"owner_id must be at most {MAX_OWNER_ID_LENGTH} characters")
        if not self.symbol or self.symbol != self.symbol.strip().upper():
            raise ValueError("symbol must be upper-case non-empty")
        if len(self.symbol) > MAX_SYMBOL_LENGTH:
            raise ValueError(f"symbol must be at most {MAX_SYMBOL_LENGTH} characters")
        if not isinstance(self.action, TradeAction):
            raise ValueError("action must be a TradeAction")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError("quantity must be an integer")
        if self.quantity <= 0:
            raise ValueError("quantity must be > 0")
        _check_price(self.price)
        if self.recorded_at.tzinfo is None:
            object.__setattr__(self, "recorded_at", self.recorded_at.replace(tzinfo=UTC))

    @property
    def notional(self) -> Decimal:
        """Return ``quantity * price``."""
        return self.price * self.quantity

    def sort_key(self) -> tuple[date, datetime, str]:
        """Chronological replay order: trade date, then insertion time, then id."""
        return (self.occurred_on, self.recorded_at, self.id)


def _check_price(price: Decimal) -> None:
    if not isinstance(price, Decimal) or not price.is_finite():
        raise ValueError("price must be a finite decimal")
    if price <= 0:
        raise ValueError("price must be > 0")
    if price >= _PRICE_LIMIT:
        raise ValueError(f"price must be below {_PRICE_LIMIT:f}")
    if price.quantize(_PRICE_QUANTUM) != price:
        raise ValueError(f"price must have at most {PRICE_SCALE} decimal places")
