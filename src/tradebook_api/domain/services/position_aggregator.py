# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Position Aggregator

Purpose:
    Fold an ordered trade history for one (owner, symbol) into a ``Position``
    using weighted-average cost basis.

Layer:
    domain/services

Notes:
    * BUY adds quantity and capital; the average is capital over quantity.
    * SELL removes quantity at the prevailing average. Selling down to zero
      (or below) closes the position and clears its cost basis.
    * ``recompute`` is ``functools.reduce`` over ``apply``; replaying a
      history in one pass and appending events one at a time give identical
      results.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from decimal import Decimal
from functools import reduce

from tradebook_api.domain.entities.position import ZERO, Position
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.enums.trade_action import TradeAction

__all__ = ["PositionState", "apply", "recompute", "order_events"]


@dataclass(frozen=True, slots=True)
class PositionState:
    """Running fold accumulator.

    Kept separate from ``Position`` so the average is carried at full
    precision instead of being recomputed from rounded figures.
    """

    symbol: str
    quantity: int = 0
    invested: Decimal = ZERO
    average: Decimal = ZERO
    trade_count: int = 0
    realized_pnl: Decimal = ZERO

    def to_position(self) -> Position:
        """Project the accumulator onto the public ``Position`` entity."""
        return Position(
            symbol=self.symbol,
            total_quantity=self.quantity,
            weighted_average_price=self.average,
            total_invested=self.invested,
            source_trade_count=self.trade_count,
            realized_pnl=self.realized_pnl,
        )


def order_events(events: Iterable[TradeEvent]) -> list[TradeEvent]:
    """Return ``events`` in replay order (trade date, insertion time, id)."""
    return sorted(events, key=TradeEvent.sort_key)


def apply(state: PositionState, event: TradeEvent) -> PositionState:
    """Fold one trade event into ``state``.

    Args:
        state: Accumulator for the event's symbol.
        event: Next trade in chronological order.

    Returns:
        The updated accumulator.

    Raises:
        ValueError: If the event belongs to a different symbol.
    """
    if event.symbol != state.symbol:
        raise ValueError(f"event symbol {event.symbol!r} does not match {state.symbol!r}")

    count = state.trade_count + 1

    if event.action is TradeAction.BUY:
        quantity = state.quantity + event.quantity
        invested = state.invested + event.notional
        return replace(
            state,
            quantity=quantity,
            invested=invested,
            average=invested / quantity,
            trade_count=count,
        )

    # SELL: realize against the shares actually held.
    closed = min(event.quantity, state.quantity)
    realized = state.realized_pnl + (event.price - state.average) * closed
    quantity = state.quantity - event.quantity
    if quantity <= 0:
        return replace(
            state,
            quantity=0,
            invested=ZERO,
            average=ZERO,
            trade_count=count,
            realized_pnl=realized,
        )
    return replace(
        state,
        quantity=quantity,
        invested=state.average * quantity,
        trade_count=count,
        realized_pnl=realized,
    )


def recompute(events: Iterable[TradeEvent], *, symbol: str | None = None) -> Position:
    """Replay ``events`` and return the resulting position.

    Args:
        events: Trade events for one symbol in chronological order
            (see :func:`order_events`).
        symbol: Canonical symbol; required only when ``events`` may be empty.

    Returns:
        The aggregated ``Position``. An empty history yields a flat position.

    Raises:
        ValueError: If ``events`` is empty and no ``symbol`` is given, or if
            the events span more than one symbol.
    """
    items = list(events)
    if symbol is None:
        if not items:
            raise ValueError("symbol is required for an empty history")
        symbol = items[0].symbol
    return reduce(apply, items, PositionState(symbol=symbol)).to_position()
