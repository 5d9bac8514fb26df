from __future__ import annotations

import random
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from tradebook_api.adapters.repositories.in_memory_trade_ledger import InMemoryTradeLedger
from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import NSE_SOURCE_ID
from tradebook_api.application.services.positions import group_by_symbol, load_positions
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.application.use_cases.portfolio.analyze_symbol import AnalyzeSymbol
from tradebook_api.application.use_cases.portfolio.get_portfolio_summary import (
    GetPortfolioSummary,
)
from tradebook_api.application.use_cases.portfolio.get_portfolio_valuation import (
    GetPortfolioValuation,
)
from tradebook_api.application.use_cases.portfolio.get_position import GetPosition
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.domain.entities.position import Position
from tradebook_api.domain.entities.quote import Quote
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.exceptions.market_data import InvalidSymbol
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator

MakeTrade = Callable[..., TradeEvent]


async def _no_sleep(_: float) -> None:
    return None


async def _ledger(make_trade: MakeTrade) -> InMemoryTradeLedger:
    ledger = InMemoryTradeLedger()
    for event in (
        make_trade("BUY", 10, "100", symbol="TCS", occurred_on=date(2026, 1, 2)),
        make_trade("BUY", 10, "200", symbol="TCS", occurred_on=date(2026, 1, 3)),
        make_trade("SELL", 5, "300", symbol="TCS", occurred_on=date(2026, 2, 1)),
        make_trade("BUY", 4, "50", symbol="INFY", occurred_on=date(2026, 1, 5)),
        make_trade("SELL", 4, "60", symbol="INFY", occurred_on=date(2026, 1, 6)),
        make_trade("BUY", 2, "1000", symbol="ITC", occurred_on=date(2026, 3, 1)),
    ):
        await ledger.append(event)
    return ledger


@pytest.mark.asyncio
async def test_load_positions_includes_closed_ones(make_trade: MakeTrade) -> None:
    ledger = await _ledger(make_trade)

    positions = await load_positions(ledger, "owner-1")

    assert list(positions) == ["INFY", "ITC", "TCS"]
    assert positions["INFY"].is_open is False
    assert positions["TCS"].total_quantity == 15


def test_group_by_symbol_orders_each_history(make_trade: MakeTrade) -> None:
    late = make_trade(symbol="TCS", occurred_on=date(2026, 5, 1))
    early = make_trade(symbol="TCS", occurred_on=date(2026, 1, 1))
    other = make_trade(symbol="INFY")

    grouped = group_by_symbol([late, other, early])

    assert grouped == {"INFY": [other], "TCS": [early, late]}


@pytest.mark.asyncio
async def test_get_position(make_trade: MakeTrade) -> None:
    uc = GetPosition(await _ledger(make_trade))

    tcs = await uc.execute("owner-1", "tcs")
    assert tcs.total_quantity == 15
    assert tcs.weighted_average_price == Decimal("150")

    assert await uc.execute("owner-1", "NEVERTRADED") == Position.empty("NEVERTRADED")
    with pytest.raises(InvalidSymbol):
        await uc.execute("owner-1", " ")


@pytest.mark.asyncio
async def test_valuation_with_supplied_marks(
    make_trade: MakeTrade, make_quote: Callable[..., Quote]
) -> None:
    uc = GetPortfolioValuation(await _ledger(make_trade))

    valuation = await uc.execute(
        "owner-1", {"TCS": make_quote("TCS", "160"), "ITC": Decimal("900")}
    )

    # Closed INFY position is not valued.
    assert [v.symbol for v in valuation.positions] == ["ITC", "TCS"]
    itc, tcs = valuation.positions
    assert tcs.current_value == Decimal("2400")
    assert tcs.profit_and_loss == Decimal("150")
    assert tcs.price_source == NSE_SOURCE_ID
    assert itc.profit_and_loss == Decimal("-200")
    assert itc.price_source is None
    assert valuation.total_invested == Decimal("4250")
    assert valuation.total_current_value == Decimal("4200")
    assert valuation.total_pnl == Decimal("-50")


@pytest.mark.asyncio
async def test_valuation_missing_mark_is_zero_and_not_authentic(make_trade: MakeTrade) -> None:
    uc = GetPortfolioValuation(await _ledger(make_trade))

    valuation = await uc.execute("owner-1", {"TCS": Decimal("150")})

    itc = valuation.positions[0]
    assert itc.symbol == "ITC"
    assert itc.current_price == 0
    assert itc.current_value == 0
    assert itc.profit_and_loss == Decimal("-2000")
    assert itc.is_authentic_price is False
    assert itc.price_source is None


@pytest.mark.asyncio
async def test_valuation_acquires_quotes_for_open_positions_only(
    make_trade: MakeTrade,
    stub_source: Any,
    nse_raw: Callable[..., RawProviderResponse],
) -> None:
    source = stub_source(NSE_SOURCE_ID, lambda symbol: nse_raw(symbol, "500"))
    acquire = AcquireQuotes(
        AcquireQuote(
            [source],
            QuoteNormalizer(),
            SyntheticQuoteGenerator(rng=random.Random(1)),
            sleep=_no_sleep,
        ),
        delay_s=0,
    )
    uc = GetPortfolioValuation(await _ledger(make_trade), acquire)

    valuation = await uc.execute("owner-1")

    assert source.calls == ["ITC", "TCS"]
    assert all(v.current_price == Decimal("500") for v in valuation.positions)
    assert all(v.is_authentic_price for v in valuation.positions)


@pytest.mark.asyncio
async def test_valuation_of_empty_ledger() -> None:
    valuation = await GetPortfolioValuation(InMemoryTradeLedger()).execute("owner-1")
    assert valuation.positions == ()
    assert valuation.total_pnl_percent == 0


@pytest.mark.asyncio
async def test_summary_counts(make_trade: MakeTrade) -> None:
    summary = await GetPortfolioSummary(await _ledger(make_trade)).execute("owner-1")

    assert summary.total_symbols == 3
    assert summary.total_trades == 6
    assert summary.active_positions == 2
    assert summary.total_quantity == 17


@pytest.mark.asyncio
async def test_analyze_symbol(make_trade: MakeTrade) -> None:
    analysis = await AnalyzeSymbol(await _ledger(make_trade)).execute("owner-1", "TCS")

    assert analysis.buy_count == 2
    assert analysis.sell_count == 1
    assert analysis.total_bought_quantity == 20
    assert analysis.total_sold_quantity == 5
    assert analysis.average_buy_price == Decimal("150")
    assert analysis.average_sell_price == Decimal("300")
    assert analysis.first_trade_on == date(2026, 1, 2)
    assert analysis.last_trade_on == date(2026, 2, 1)
    assert analysis.current_quantity == 15
    assert analysis.realized_pnl == Decimal("750")


@pytest.mark.asyncio
async def test_analyze_untraded_symbol() -> None:
    analysis = await AnalyzeSymbol(InMemoryTradeLedger()).execute("owner-1", "abc")

    assert analysis.symbol == "ABC"
    assert analysis.buy_count == analysis.sell_count == 0
    assert analysis.average_buy_price == 0
    assert analysis.first_trade_on is None
    assert analysis.current_quantity == 0
