from __future__ import annotations

import re
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from tradebook_api.domain.entities.trade_event import TradeEvent, new_trade_id
from tradebook_api.domain.enums.trade_action import TradeAction


def _event(**overrides: object) -> TradeEvent:
    fields: dict[str, object] = {
        "id": "TRADE_1_abc",
        "owner_id": "owner-1",
        "symbol": "INFY",
        "action": TradeAction.BUY,
        "quantity": 5,
        "price": Decimal("1400.50"),
        "occurred_on": date(2026, 3, 2),
        "recorded_at": datetime(2026, 3, 2, 10, 0, tzinfo=UTC),
    }
    fields.update(overrides)
    return TradeEvent(**fields)  # type: ignore[arg-type]


def test_notional_and_sort_key() -> None:
    e = _event()
    assert e.notional == Decimal("7002.50")
    assert e.sort_key() == (date(2026, 3, 2), e.recorded_at, "TRADE_1_abc")


@pytest.mark.parametrize(
    "overrides",
    [
        {"quantity": 0},
        {"quantity": -3},
        {"quantity": True},
        {"price": Decimal("0")},
        {"price": Decimal("-10")},
        {"price": Decimal("0.00001")},
        {"price": Decimal("100.123456")},
        {"price": Decimal("1E+14")},
        {"price": Decimal("NaN")},
        {"symbol": "infy"},
        {"symbol": ""},
        {"symbol": "X" * 21},
        {"owner_id": ""},
        {"owner_id": "o" * 129},
        {"action": "BUY"},
    ],
)
def test_invariants_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        _event(**overrides)


@pytest.mark.parametrize(
    ("price", "symbol"),
    [
        (Decimal("0.0001"), "M"),
        (Decimal("100.12340000"), "X" * 20),
        (Decimal("99999999999999.9999"), "TCS"),
    ],
)
def test_storage_limits_are_inclusive(price: Decimal, symbol: str) -> None:
    e = _event(price=price, symbol=symbol)
    assert e.price == price


def test_naive_recorded_at_is_treated_as_utc() -> None:
    e = _event(recorded_at=datetime(2026, 3, 2, 10, 0))
    assert e.recorded_at.tzinfo is UTC


def test_new_trade_id_shape_and_uniqueness() -> None:
    ids = {new_trade_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(re.fullmatch(r"TRADE_\d+_[a-z0-9]{9}", i) for i in ids)


@pytest.mark.parametrize("raw", ["buy", " BUY ", "Buy", TradeAction.BUY])
def test_trade_action_parse_is_case_insensitive(raw: str | TradeAction) -> None:
    assert TradeAction.parse(raw) is TradeAction.BUY


def test_trade_action_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="BUY or SELL"):
        TradeAction.parse("HOLD")
