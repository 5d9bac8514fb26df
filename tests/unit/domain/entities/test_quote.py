from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest

from tradebook_api.domain.entities.quote import SYNTHETIC_SOURCE_ID, Quote


def _kwargs(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "symbol": "RELIANCE",
        "price": Decimal("2450"),
        "change": Decimal("50"),
        "change_percent": Decimal("2.0833"),
        "volume": 1_000,
        "day_high": Decimal("2460"),
        "day_low": Decimal("2400"),
        "open": Decimal("2410"),
        "previous_close": Decimal("2400"),
        "source_id": "yahoo_finance",
        "is_authentic": True,
        "retrieved_at": datetime(2026, 10, 16, 9, 30),
    }
    base.update(overrides)
    return base


def test_valid_quote_defaults_and_naive_timestamp_becomes_utc() -> None:
    q = Quote(**_kwargs())
    assert q.currency == "INR"
    assert q.market_cap is None
    assert q.retrieved_at.tzinfo is not None
    assert q.retrieved_at.utcoffset().total_seconds() == 0  # type: ignore[union-attr]
    assert q.is_synthetic is False


def test_quote_is_frozen() -> None:
    q = Quote(**_kwargs())
    with pytest.raises(FrozenInstanceError):
        q.price = Decimal("1")  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"symbol": "reliance"},
        {"symbol": ""},
        {"price": Decimal("-1")},
        {"volume": -5},
        {"day_low": Decimal("-0.01")},
    ],
)
def test_invalid_fields_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        Quote(**_kwargs(**overrides))


def test_change_percent_must_match_change_over_previous_close() -> None:
    with pytest.raises(ValueError, match="change_percent"):
        Quote(**_kwargs(change_percent=Decimal("5")))


def test_change_percent_tolerates_provider_rounding() -> None:
    q = Quote(**_kwargs(change_percent=Decimal("2.09")))
    assert q.change_percent == Decimal("2.09")


def test_change_percent_unchecked_when_previous_close_is_zero() -> None:
    q = Quote(**_kwargs(previous_close=Decimal("0"), change_percent=Decimal("0")))
    assert q.previous_close == 0


def test_non_authentic_quote_must_be_attributed_to_synthetic() -> None:
    with pytest.raises(ValueError, match="SYNTHETIC"):
        Quote(**_kwargs(is_authentic=False))

    q = Quote(**_kwargs(is_authentic=False, source_id=SYNTHETIC_SOURCE_ID))
    assert q.is_synthetic is True
