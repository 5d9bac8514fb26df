# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Ticker symbol canonicalization."""

from __future__ import annotations

from tradebook_api.domain.exceptions.market_data import InvalidSymbol


def canonical_symbol(symbol: str) -> str:
    """Return the canonical (stripped, upper-case) form of ``symbol``.

    Raises:
        InvalidSymbol: If nothing remains after stripping.
    """
    canonical = (symbol or "").strip().upper()
    if not canonical:
        raise InvalidSymbol("symbol must be non-empty", details={"symbol": symbol})
    return canonical
