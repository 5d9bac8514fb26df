from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pytest

from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import NSE_SOURCE_ID
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.domain.exceptions.market_data import SourceUnavailable
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator


async def _no_sleep(_: float) -> None:
    return None


def _batch(source: Any, sleep: Callable[[float], Any], delay_s: float = 0.5) -> AcquireQuotes:
    single = AcquireQuote(
        [source],
        QuoteNormalizer(),
        SyntheticQuoteGenerator(rng=random.Random(0)),
        sleep=_no_sleep,
    )
    return AcquireQuotes(single, delay_s=delay_s, sleep=sleep)


@pytest.mark.asyncio
async def test_results_follow_input_order_with_delay_between_symbols(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    recorded, sleep = sleeps
    source = stub_source(NSE_SOURCE_ID, lambda symbol: nse_raw(symbol, "100"))

    results = await _batch(source, sleep).execute(["tcs", "INFY", "itc"])

    assert [r.symbol for r in results] == ["TCS", "INFY", "ITC"]
    assert all(not r.failed and r.quote is not None for r in results)
    assert source.calls == ["TCS", "INFY", "ITC"]
    # No pause before the first symbol.
    assert recorded == [0.5, 0.5]


@pytest.mark.asyncio
async def test_single_symbol_batch_does_not_sleep(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    recorded, sleep = sleeps
    source = stub_source(NSE_SOURCE_ID, lambda symbol: nse_raw(symbol, "100"))

    await _batch(source, sleep).execute(["TCS"])
    assert recorded == []


@pytest.mark.asyncio
async def test_invalid_entry_is_reported_without_aborting_batch(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    _, sleep = sleeps
    source = stub_source(NSE_SOURCE_ID, lambda symbol: nse_raw(symbol, "100"))

    results = await _batch(source, sleep, delay_s=0).execute(["TCS", "  ", "INFY"])

    assert [r.failed for r in results] == [False, True, False]
    bad = results[1]
    assert bad.symbol == ""
    assert bad.quote is None
    assert bad.error == "symbol must be non-empty"
    assert source.calls == ["TCS", "INFY"]


@pytest.mark.asyncio
async def test_failed_sources_still_produce_synthetic_entries(
    stub_source: Any, sleeps: Any
) -> None:
    _, sleep = sleeps
    source = stub_source(NSE_SOURCE_ID, SourceUnavailable("down"))

    results = await _batch(source, sleep, delay_s=0).execute(["TCS", "INFY"])

    assert all(not r.failed for r in results)
    assert all(r.quote is not None and r.quote.is_synthetic for r in results)
