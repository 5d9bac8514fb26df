# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Trade action enumeration.

Layer:
    domain
"""

from __future__ import annotations

from enum import Enum


class TradeAction(str, Enum):
    """Side of a trade. Values double as the persisted and JSON representation."""

    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, raw: str | TradeAction) -> TradeAction:
        """Return the action for ``raw`` (case-insensitive).

        Raises:
            ValueError: If ``raw`` is not ``BUY`` or ``SELL``.
        """
        if isinstance(raw, TradeAction):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError as exc:
            raise ValueError(f"action must be BUY or SELL, got {raw!r}") from exc
