# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Synthetic Quote Generator

Purpose:
    Produce a plausible, clearly flagged quote when every live source has
    failed, so quote displays never come back empty.

Layer:
    domain/services

Notes:
    * ``is_authentic`` is always False and ``source_id`` is ``"SYNTHETIC"``.
    * Open, high and low are derived from the perturbed price so that
      ``day_high >= max(open, price)`` and ``day_low <= min(open, price)``.
    * Pass a seeded ``random.Random`` for reproducible output.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Final

from tradebook_api.domain.entities.quote import DEFAULT_CURRENCY, SYNTHETIC_SOURCE_ID, Quote

BASE_PRICES: Final[Mapping[str, Decimal]] = MappingProxyType(
    {
        "JIOFIN": Decimal("280"),
        "JIOFINANCIAL": Decimal("280"),
        "RELIANCE": Decimal("2800"),
        "TCS": Decimal("3500"),
        "INFY": Decimal("1400"),
        "HDFCBANK": Decimal("1600"),
        "ICICIBANK": Decimal("900"),
        "BAJFINANCE": Decimal("6500"),
        "BHARTIARTL": Decimal("800"),
        "ITC": Decimal("450"),
    }
)
DEFAULT_BASE_PRICE: Final[Decimal] = Decimal("500")

PRICE_SWING: Final[float] = 0.05
OPEN_SWING: Final[float] = 0.01
RANGE_SWING: Final[float] = 0.02
VOLUME_MIN: Final[int] = 100_000
VOLUME_MAX: Final[int] = 1_100_000

_CENT = Decimal("0.01")
_BP = Decimal("0.0001")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _scale(value: Decimal, factor: float) -> Decimal:
    return _money(value * (Decimal(1) + Decimal(str(round(factor, 6)))))


class SyntheticQuoteGenerator:
    """Generate fabricated quotes from a static base-price table."""

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        base_prices: Mapping[str, Decimal] | None = None,
        default_base_price: Decimal = DEFAULT_BASE_PRICE,
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._rng = rng or random.Random()  # noqa: S311
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._base_prices = base_prices if base_prices is not None else BASE_PRICES
        self._default_base = default_base_price
        self._currency = currency

    def base_price(self, symbol: str) -> Decimal:
        """Return the reference price for ``symbol`` (or the global default)."""
        return self._base_prices.get(symbol.strip().upper(), self._default_base)

    def generate(self, symbol: str) -> Quote:
        """Return a synthetic quote for ``symbol``.

        Args:
            symbol: Ticker; canonicalized to upper case.

        Returns:
            A ``Quote`` with ``is_authentic=False``.
        """
        canonical = symbol.strip().upper()
        base = self.base_price(canonical)
        rng = self._rng

        price = _scale(base, rng.uniform(-PRICE_SWING, PRICE_SWING))
        previous_close = _money(base)
        change = price - previous_close
        open_ = _scale(price, rng.uniform(-OPEN_SWING, OPEN_SWING))
        high = _scale(max(open_, price), rng.uniform(0.0, RANGE_SWING))
        low = _scale(min(open_, price), -rng.uniform(0.0, RANGE_SWING))

        return Quote(
            symbol=canonical,
            price=price,
            change=change,
            change_percent=(change / previous_close * 100).quantize(_BP),
            volume=rng.randrange(VOLUME_MIN, VOLUME_MAX),
            day_high=high,
            day_low=low,
            open=open_,
            previous_close=previous_close,
            source_id=SYNTHETIC_SOURCE_ID,
            is_authentic=False,
            retrieved_at=self._clock(),
            currency=self._currency,
        )
