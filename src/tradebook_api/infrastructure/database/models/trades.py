# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""ORM model for the append-only trade ledger (``trade_events``).

Rows are inserted once and never updated. Domain invariants are mirrored as
CHECK constraints so a bad row cannot be written even outside the API.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tradebook_api.domain.entities.trade_event import (
    MAX_OWNER_ID_LENGTH,
    MAX_SYMBOL_LENGTH,
    PRICE_PRECISION,
    PRICE_SCALE,
    TradeEvent,
)
from tradebook_api.domain.enums.trade_action import TradeAction

from .base import Base

__all__ = ["TradeEventRow"]


class TradeEventRow(Base):
    """One appended buy or sell."""

    __tablename__ = "trade_events"
    __table_args__ = (
        CheckConstraint("action IN ('BUY', 'SELL')", name="action_valid"),
        CheckConstraint("quantity > 0", name="quantity_positive"),
        CheckConstraint("price > 0", name="price_positive"),
        Index("ix_trade_events_owner_symbol", "owner_id", "symbol"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(MAX_OWNER_ID_LENGTH), nullable=False)
    symbol: Mapped[str] = mapped_column(String(MAX_SYMBOL_LENGTH), nullable=False)
    action: Mapped[str] = mapped_column(String(4), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(PRICE_PRECISION, PRICE_SCALE), nullable=False)
    occurred_on: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @classmethod
    def from_entity(cls, event: TradeEvent) -> TradeEventRow:
        """Map a domain event to a new row."""
        return cls(
            id=event.id,
            owner_id=event.owner_id,
            symbol=event.symbol,
            action=event.action.value,
            quantity=event.quantity,
            price=event.price,
            occurred_on=event.occurred_on,
            note=event.note,
            recorded_at=event.recorded_at,
        )

    def to_entity(self) -> TradeEvent:
        """Map this row back to a domain event."""
        return TradeEvent(
            id=self.id,
            owner_id=self.owner_id,
            symbol=self.symbol,
            action=TradeAction(self.action),
            quantity=self.quantity,
            price=Decimal(self.price),
            occurred_on=self.occurred_on,
            recorded_at=self.recorded_at,
            note=self.note,
        )
