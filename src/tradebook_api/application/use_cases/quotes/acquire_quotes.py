# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Use Case: Acquire Quotes (batch)

Purpose:
    Acquire quotes for several symbols one at a time, pausing between symbols
    to stay under provider rate limits. A failure for one symbol becomes an
    error entry in the result; the rest of the batch still runs.

Layer: application/use_cases
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence

from tradebook_api.application.schemas.dto.quotes import QuoteResult
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.domain.exceptions.base import DomainError
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

DEFAULT_BATCH_DELAY_S = 1.0


class AcquireQuotes:
    """Sequential, throttled batch over :class:`AcquireQuote`."""

    def __init__(
        self,
        acquire_quote: AcquireQuote,
        *,
        delay_s: float = DEFAULT_BATCH_DELAY_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._acquire_quote = acquire_quote
        self._delay_s = delay_s
        self._sleep = sleep

    async def execute(self, symbols: Sequence[str]) -> list[QuoteResult]:
        """Acquire a quote for each symbol, in input order.

        Args:
            symbols: Ticker symbols in any case.

        Returns:
            One ``QuoteResult`` per input symbol.
        """
        results: list[QuoteResult] = []
        for index, symbol in enumerate(symbols):
            if index and self._delay_s > 0:
                await self._sleep(self._delay_s)
            label = (symbol or "").strip().upper()
            try:
                quote = await self._acquire_quote.execute(symbol)
            except DomainError as exc:
                logger.warning(
                    "quote_batch_entry_failed",
                    extra={"symbol": label, "error_code": exc.code, "reason": exc.message},
                )
                results.append(QuoteResult(symbol=label, error=exc.message or exc.code))
                continue
            results.append(QuoteResult(symbol=quote.symbol, quote=quote))
        return results
