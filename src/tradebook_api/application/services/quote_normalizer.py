# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Quote Normalizer

Purpose:
    Map each provider's raw payload into the canonical ``Quote`` entity.

Layer:
    application/services

Notes:
    * One mapping function per provider, keyed by ``source_id``. Adding a
      provider means adding a payload model, a source adapter and one entry
      in ``_MAPPERS``; the acquisition pipeline does not change.
    * A missing, zero or negative price is a failure. Missing optional
      fields (volume, market cap, high/low/open) get defaults instead.
    * ``change_percent`` is always recomputed from ``change`` and
      ``previous_close``; provider-reported percentages are ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import (
    ALPHA_VANTAGE_SOURCE_ID,
    NSE_SOURCE_ID,
    YAHOO_SOURCE_ID,
    AlphaVantageQuoteResponse,
    NseQuoteResponse,
    YahooChartResponse,
)
from tradebook_api.domain.entities.quote import DEFAULT_CURRENCY, Quote
from tradebook_api.domain.exceptions.market_data import NormalizationFailure

_ZERO = Decimal("0")
_BP = Decimal("0.0001")


@dataclass(frozen=True, slots=True)
class _Fields:
    """Provider-neutral intermediate shape produced by each mapper."""

    price: Decimal | None
    previous_close: Decimal | None
    change: Decimal | None
    volume: int | None
    high: Decimal | None
    low: Decimal | None
    open: Decimal | None
    currency: str | None = None
    market_cap: Decimal | None = None


def _from_yahoo(payload: object) -> _Fields:
    if not isinstance(payload, YahooChartResponse):
        raise NormalizationFailure("unexpected payload type for yahoo_finance")
    results = payload.chart.result or []
    if not results:
        raise NormalizationFailure("yahoo chart has no result")
    meta = results[0].meta
    previous_close = meta.previous_close or meta.chart_previous_close
    price = meta.regular_market_price or previous_close
    return _Fields(
        price=price,
        previous_close=previous_close,
        change=None,
        volume=meta.regular_market_volume,
        high=meta.regular_market_day_high,
        low=meta.regular_market_day_low,
        open=meta.regular_market_open,
        currency=meta.currency,
        market_cap=meta.market_cap,
    )


def _from_nse(payload: object) -> _Fields:
    if not isinstance(payload, NseQuoteResponse):
        raise NormalizationFailure("unexpected payload type for nse_india")
    info = payload.price_info
    band = info.intra_day_high_low
    return _Fields(
        price=info.last_price,
        previous_close=info.previous_close,
        change=info.change,
        volume=info.total_traded_volume,
        high=band.max if band else None,
        low=band.min if band else None,
        open=info.open,
    )


def _from_alpha_vantage(payload: object) -> _Fields:
    if not isinstance(payload, AlphaVantageQuoteResponse):
        raise NormalizationFailure("unexpected payload type for alpha_vantage")
    quote = payload.global_quote
    if quote is None:
        raise NormalizationFailure("alpha vantage response has no Global Quote")
    return _Fields(
        price=quote.price,
        previous_close=quote.previous_close,
        change=quote.change,
        volume=quote.volume,
        high=quote.high,
        low=quote.low,
        open=quote.open,
    )


_MAPPERS: dict[str, Callable[[object], _Fields]] = {
    YAHOO_SOURCE_ID: _from_yahoo,
    NSE_SOURCE_ID: _from_nse,
    ALPHA_VANTAGE_SOURCE_ID: _from_alpha_vantage,
}


def change_percent(change: Decimal, previous_close: Decimal) -> Decimal:
    """Return ``change / previous_close * 100`` to four places (0 if no close)."""
    if previous_close == 0:
        return _ZERO
    try:
        return (change / previous_close * 100).quantize(_BP)
    except InvalidOperation as exc:
        raise NormalizationFailure("change_percent is not representable") from exc


class QuoteNormalizer:
    """Turn ``RawProviderResponse`` objects into canonical quotes."""

    def __init__(
        self,
        *,
        default_currency: str = DEFAULT_CURRENCY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._default_currency = default_currency
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    @staticmethod
    def supported_sources() -> frozenset[str]:
        """Return the provider ids this normalizer can map."""
        return frozenset(_MAPPERS)

    def normalize(self, provider_id: str, raw: RawProviderResponse) -> Quote:
        """Map ``raw`` from ``provider_id`` into a ``Quote``.

        Args:
            provider_id: Source identifier selecting the mapping function.
            raw: Raw response returned by that source.

        Returns:
            Quote: Authentic quote attributed to ``provider_id``.

        Raises:
            NormalizationFailure: Unknown provider, missing or non-positive
                price, or values that violate ``Quote`` invariants.
        """
        mapper = _MAPPERS.get(provider_id)
        if mapper is None:
            raise NormalizationFailure(
                "no normalizer registered for provider", details={"provider": provider_id}
            )

        fields = mapper(raw.payload)
        price = fields.price
        if price is None or price <= 0:
            raise NormalizationFailure(
                "provider returned no positive price",
                details={"provider": provider_id, "symbol": raw.symbol},
            )

        if fields.change is not None:
            change = fields.change
            previous_close = (
                fields.previous_close
                if fields.previous_close is not None
                else price - change
            )
        else:
            previous_close = fields.previous_close if fields.previous_close is not None else price
            change = price - previous_close

        try:
            return Quote(
                symbol=raw.symbol.strip().upper(),
                price=price,
                change=change,
                change_percent=change_percent(change, previous_close),
                volume=fields.volume or 0,
                day_high=fields.high or price,
                day_low=fields.low or price,
                open=fields.open or price,
                previous_close=previous_close,
                source_id=provider_id,
                is_authentic=True,
                retrieved_at=raw.received_at or self._clock(),
                currency=fields.currency or self._default_currency,
                market_cap=fields.market_cap,
            )
        except ValueError as exc:
            raise NormalizationFailure(
                str(exc), details={"provider": provider_id, "symbol": raw.symbol}
            ) from exc
