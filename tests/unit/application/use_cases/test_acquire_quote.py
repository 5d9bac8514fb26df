from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pytest

from tradebook_api.application.interfaces.quote_source import QuoteSource, RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import (
    ALPHA_VANTAGE_SOURCE_ID,
    NSE_SOURCE_ID,
    YAHOO_SOURCE_ID,
)
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.domain.entities.quote import SYNTHETIC_SOURCE_ID
from tradebook_api.domain.exceptions.market_data import (
    InvalidSymbol,
    SourceParseError,
    SourceRateLimited,
    SourceUnavailable,
)
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator


def _pipeline(sources: list[Any], sleep: Callable[[float], Any], **kwargs: Any) -> AcquireQuote:
    return AcquireQuote(
        sources,
        QuoteNormalizer(),
        SyntheticQuoteGenerator(rng=random.Random(3)),
        sleep=sleep,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_first_successful_source_wins(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    recorded, sleep = sleeps
    primary = stub_source(NSE_SOURCE_ID, nse_raw("TCS", "3500"))
    secondary = stub_source(ALPHA_VANTAGE_SOURCE_ID, SourceUnavailable("should not be called"))
    assert isinstance(primary, QuoteSource)

    quote = await _pipeline([primary, secondary], sleep).execute(" tcs ")

    assert quote.symbol == "TCS"
    assert quote.source_id == NSE_SOURCE_ID
    assert quote.is_authentic is True
    assert primary.calls == ["TCS"]
    assert secondary.calls == []
    assert recorded == []


@pytest.mark.asyncio
async def test_failing_source_is_retried_then_skipped(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    recorded, sleep = sleeps
    broken = stub_source(YAHOO_SOURCE_ID, SourceUnavailable("timeout"))
    healthy = stub_source(NSE_SOURCE_ID, nse_raw("INFY", "1400"))

    quote = await _pipeline([broken, healthy], sleep, max_attempts=3, base_delay_ms=1000).execute(
        "INFY"
    )

    assert quote.source_id == NSE_SOURCE_ID
    assert len(broken.calls) == 3
    assert healthy.calls == ["INFY"]
    # Linear backoff between attempts on the failing source only.
    assert recorded == [1.0, 2.0]


@pytest.mark.asyncio
async def test_transient_failure_recovers_within_same_source(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    recorded, sleep = sleeps
    flaky = stub_source(NSE_SOURCE_ID, SourceRateLimited("rate_limited"), nse_raw("TCS", "10"))

    quote = await _pipeline([flaky], sleep, base_delay_ms=200).execute("TCS")

    assert quote.price == 10
    assert len(flaky.calls) == 2
    assert recorded == [0.2]


@pytest.mark.asyncio
async def test_non_positive_price_falls_through_without_retry(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    _, sleep = sleeps
    zero = stub_source(NSE_SOURCE_ID, nse_raw("TCS", "0"))
    good = stub_source(NSE_SOURCE_ID, nse_raw("TCS", "3400"))

    quote = await _pipeline([zero, good], sleep).execute("TCS")

    assert quote.price == 3400
    assert len(zero.calls) == 1


@pytest.mark.asyncio
async def test_all_sources_failing_yields_synthetic_quote(
    stub_source: Any, sleeps: Any
) -> None:
    _, sleep = sleeps
    sources = [
        stub_source(YAHOO_SOURCE_ID, SourceUnavailable("http_error")),
        stub_source(NSE_SOURCE_ID, SourceParseError("bad_shape")),
        stub_source(ALPHA_VANTAGE_SOURCE_ID, RuntimeError("unexpected")),
    ]

    quote = await _pipeline(sources, sleep, max_attempts=2).execute("reliance")

    assert quote.symbol == "RELIANCE"
    assert quote.source_id == SYNTHETIC_SOURCE_ID
    assert quote.is_authentic is False
    assert quote.price > 0
    assert [len(s.calls) for s in sources] == [2, 2, 2]


@pytest.mark.asyncio
async def test_no_sources_configured_yields_synthetic_quote(sleeps: Any) -> None:
    _, sleep = sleeps
    quote = await _pipeline([], sleep).execute("ITC")
    assert quote.is_synthetic


@pytest.mark.asyncio
async def test_blank_symbol_is_rejected_before_any_source_call(
    stub_source: Any, nse_raw: Callable[..., RawProviderResponse], sleeps: Any
) -> None:
    _, sleep = sleeps
    source = stub_source(NSE_SOURCE_ID, nse_raw())

    with pytest.raises(InvalidSymbol):
        await _pipeline([source], sleep).execute("   ")
    assert source.calls == []


def test_source_ids_in_priority_order(stub_source: Any, sleeps: Any) -> None:
    _, sleep = sleeps
    uc = _pipeline(
        [stub_source(YAHOO_SOURCE_ID, None), stub_source(NSE_SOURCE_ID, None)], sleep
    )
    assert uc.source_ids == [YAHOO_SOURCE_ID, NSE_SOURCE_ID]
