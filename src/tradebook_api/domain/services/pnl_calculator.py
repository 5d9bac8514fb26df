# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
P&L Calculator

Purpose:
    Mark positions to a current price and total them up. Pure functions, no I/O.

Layer:
    domain/services
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from tradebook_api.domain.entities.position import (
    ZERO,
    PortfolioValuation,
    Position,
    PositionValuation,
)
from tradebook_api.domain.entities.quote import Quote

__all__ = ["evaluate", "summarize", "percent_of"]

_HUNDRED = Decimal("100")


def percent_of(amount: Decimal, base: Decimal) -> Decimal:
    """Return ``amount / base * 100``, or 0 when ``base`` is 0."""
    if base == 0:
        return ZERO
    return amount / base * _HUNDRED


def evaluate(position: Position, mark: Quote | Decimal) -> PositionValuation:
    """Value ``position`` at the price carried by ``mark``.

    Args:
        position: Aggregated holding.
        mark: A ``Quote`` (its price, source and authenticity are recorded)
            or a bare price.

    Returns:
        The position valuation.
    """
    if isinstance(mark, Quote):
        price = mark.price
        authentic = mark.is_authentic
        source: str | None = mark.source_id
    else:
        price = Decimal(mark)
        authentic = True
        source = None

    current_value = price * position.total_quantity
    invested = position.total_invested
    pnl = current_value - invested
    return PositionValuation(
        symbol=position.symbol,
        quantity=position.total_quantity,
        average_price=position.weighted_average_price,
        current_price=price,
        current_value=current_value,
        invested=invested,
        profit_and_loss=pnl,
        profit_and_loss_percent=percent_of(pnl, invested),
        is_authentic_price=authentic,
        price_source=source,
    )


def summarize(valuations: Iterable[PositionValuation]) -> PortfolioValuation:
    """Total a set of position valuations into a ``PortfolioValuation``."""
    items = tuple(valuations)
    total_invested = sum((v.invested for v in items), ZERO)
    total_value = sum((v.current_value for v in items), ZERO)
    total_pnl = total_value - total_invested
    return PortfolioValuation(
        positions=items,
        total_invested=total_invested,
        total_current_value=total_value,
        total_pnl=total_pnl,
        total_pnl_percent=percent_of(total_pnl, total_invested),
    )
