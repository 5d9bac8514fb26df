from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest

from tradebook_api.domain.entities.position import Position, PositionValuation
from tradebook_api.domain.entities.quote import SYNTHETIC_SOURCE_ID, Quote
from tradebook_api.domain.services.pnl_calculator import evaluate, percent_of, summarize


def _position(symbol: str = "TCS", qty: int = 10, avg: str = "100") -> Position:
    average = Decimal(avg)
    return Position(
        symbol=symbol,
        total_quantity=qty,
        weighted_average_price=average,
        total_invested=average * qty,
        source_trade_count=1,
    )


def test_evaluate_with_bare_price() -> None:
    v = evaluate(_position(), Decimal("120"))

    assert v.current_value == Decimal("1200")
    assert v.invested == Decimal("1000")
    assert v.profit_and_loss == Decimal("200")
    assert v.profit_and_loss_percent == Decimal("20")
    assert v.is_authentic_price is True
    assert v.price_source is None


def test_evaluate_loss() -> None:
    v = evaluate(_position(qty=4, avg="250"), Decimal("200"))
    assert v.profit_and_loss == Decimal("-200")
    assert v.profit_and_loss_percent == Decimal("-20")


def test_evaluate_with_synthetic_quote_records_provenance(
    make_quote: Callable[..., Quote],
) -> None:
    quote = make_quote("TCS", "90", source_id=SYNTHETIC_SOURCE_ID, is_authentic=False)
    v = evaluate(_position(), quote)

    assert v.current_price == Decimal("90")
    assert v.is_authentic_price is False
    assert v.price_source == SYNTHETIC_SOURCE_ID


def test_flat_position_has_zero_percent() -> None:
    v = evaluate(Position.empty("TCS"), Decimal("500"))
    assert v.invested == 0
    assert v.profit_and_loss == 0
    assert v.profit_and_loss_percent == 0


def test_percent_of_zero_base() -> None:
    assert percent_of(Decimal("5"), Decimal("0")) == 0


def test_summarize_totals() -> None:
    valuations = [
        evaluate(_position("TCS", 10, "100"), Decimal("110")),
        evaluate(_position("INFY", 5, "200"), Decimal("180")),
    ]
    total = summarize(valuations)

    assert total.total_invested == Decimal("2000")
    assert total.total_current_value == Decimal("2000")
    assert total.total_pnl == 0
    assert total.total_pnl_percent == 0
    assert [v.symbol for v in total.positions] == ["TCS", "INFY"]


def test_summarize_empty() -> None:
    total = summarize([])
    assert total.positions == ()
    assert total.total_invested == 0
    assert total.total_pnl_percent == 0


def test_valuation_rejects_inconsistent_pnl() -> None:
    with pytest.raises(ValueError, match="profit_and_loss"):
        PositionValuation(
            symbol="TCS",
            quantity=1,
            average_price=Decimal("1"),
            current_price=Decimal("2"),
            current_value=Decimal("2"),
            invested=Decimal("1"),
            profit_and_loss=Decimal("5"),
            profit_and_loss_percent=Decimal("500"),
        )


def test_worked_example_valuation() -> None:
    v = evaluate(_position(qty=100, avg="250"), Decimal("260"))

    assert v.current_value == Decimal("26000")
    assert v.invested == Decimal("25000")
    assert v.profit_and_loss == Decimal("1000")
    assert v.profit_and_loss_percent == Decimal("4.0")
