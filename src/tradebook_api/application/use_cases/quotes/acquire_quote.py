# src/tradebook_api/application/use_cases/quotes/acquire_quote.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Acquire Quote

Purpose:
    Return a usable quote for one symbol, trying each configured source in
    priority order and falling back to a synthetic quote when all fail.

Layer: application/use_cases

Algorithm:
    1. Canonicalize the symbol (strip, upper-case).
    2. For each source in order, call it through the retry wrapper.
    3. Normalize the raw response; the first positive price wins and later
       sources are never called.
    4. Any source or normalization failure is logged and the next source is
       tried.
    5. When every source has failed, return a synthetic quote
       (``is_authentic=False``).

    Provider problems never escape ``execute``; only an empty symbol does.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from tradebook_api.application.interfaces.quote_source import QuoteSource
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.domain.entities.quote import Quote
from tradebook_api.domain.exceptions.market_data import AllSourcesExhausted, SourceError
from tradebook_api.domain.services.symbols import canonical_symbol
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator
from tradebook_api.infrastructure.logging.logger import get_json_logger
from tradebook_api.infrastructure.resilience.retry import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    with_retry,
)

logger = get_json_logger(__name__)


class AcquireQuote:
    """Quote acquisition pipeline with ordered fallthrough.

    Args:
        sources: Quote sources, most trusted first.
        normalizer: Maps raw provider responses to ``Quote``.
        synthetic: Fallback generator used when every source fails.
        max_attempts: Attempts per source (passed to the retry wrapper).
        base_delay_ms: Linear backoff unit for the retry wrapper.
        sleep: Awaitable sleep used by the retry wrapper (injectable for tests).
    """

    def __init__(
        self,
        sources: Sequence[QuoteSource],
        normalizer: QuoteNormalizer,
        synthetic: SyntheticQuoteGenerator,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._sources = tuple(sources)
        self._normalizer = normalizer
        self._synthetic = synthetic
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms
        self._sleep = sleep

    @property
    def source_ids(self) -> list[str]:
        """Return the configured source identifiers in priority order."""
        return [s.source_id for s in self._sources]

    async def execute(self, symbol: str) -> Quote:
        """Acquire a quote for ``symbol``.

        Args:
            symbol: Ticker symbol in any case.

        Returns:
            Quote: From the first source that yields a positive price, or a
            synthetic quote when none does.

        Raises:
            InvalidSymbol: If ``symbol`` is blank.
        """
        canonical = canonical_symbol(symbol)

        for position, source in enumerate(self._sources, start=1):
            quote = await self._try_source(source, canonical, position)
            if quote is not None:
                logger.info(
                    "quote_acquired",
                    extra={"symbol": canonical, "source": quote.source_id, "price": quote.price},
                )
                return quote

        exhausted = AllSourcesExhausted(
            "all quote sources failed",
            details={"symbol": canonical, "sources": self.source_ids},
        )
        logger.warning(
            "quote_sources_exhausted",
            extra={"symbol": canonical, "code": exhausted.code, **exhausted.details},
        )
        return self._synthetic.generate(canonical)

    async def _try_source(self, source: QuoteSource, symbol: str, position: int) -> Quote | None:
        """Return a normalized quote from ``source`` or ``None`` on any failure."""
        try:
            raw = await with_retry(
                lambda: source.fetch_quote(symbol),
                max_attempts=self._max_attempts,
                base_delay_ms=self._base_delay_ms,
                sleep=self._sleep,
            )
            quote = self._normalizer.normalize(source.source_id, raw)
        except SourceError as exc:
            logger.warning(
                "quote_source_failed",
                extra={
                    "symbol": symbol,
                    "source": source.source_id,
                    "position": position,
                    "error_code": exc.code,
                    "reason": exc.message,
                },
            )
            return None
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "quote_source_crashed",
                extra={
                    "symbol": symbol,
                    "source": source.source_id,
                    "position": position,
                    "error_type": type(exc).__name__,
                },
            )
            return None

        if quote.price <= 0:
            return None
        return quote
