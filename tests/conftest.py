# tests/conftest.py
from __future__ import annotations

import itertools
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

import pytest

from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import (
    NSE_SOURCE_ID,
    NseQuoteResponse,
)
from tradebook_api.config.settings import get_settings
from tradebook_api.domain.entities.quote import Quote
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.enums.trade_action import TradeAction
from tradebook_api.infrastructure.external_apis.settings import get_quote_source_settings

FIXED_NOW = datetime(2026, 10, 16, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Pin a hermetic configuration: test env, auth off, in-memory ledger."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("AUTH_ENABLED", "false")
    for name in (
        "DATABASE_URL",
        "AUTH_HS256_SECRET",
        "ALLOWED_ORIGINS",
        "QUOTES_SOURCES",
        "QUOTES_ALPHA_VANTAGE_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_quote_source_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_quote_source_settings.cache_clear()


@pytest.fixture
def sleeps() -> tuple[list[float], Callable[[float], Any]]:
    """Recording replacement for ``asyncio.sleep``."""
    recorded: list[float] = []

    async def _sleep(delay: float) -> None:
        recorded.append(delay)

    return recorded, _sleep


@pytest.fixture
def make_quote() -> Callable[..., Quote]:
    def _make(
        symbol: str = "TCS",
        price: str = "100",
        *,
        previous_close: str | None = None,
        source_id: str = NSE_SOURCE_ID,
        is_authentic: bool = True,
    ) -> Quote:
        p = Decimal(price)
        prev = Decimal(previous_close) if previous_close is not None else p
        change = p - prev
        return Quote(
            symbol=symbol,
            price=p,
            change=change,
            change_percent=(change / prev * 100) if prev else Decimal("0"),
            volume=1000,
            day_high=p,
            day_low=p,
            open=p,
            previous_close=prev,
            source_id=source_id,
            is_authentic=is_authentic,
            retrieved_at=FIXED_NOW,
        )

    return _make


@pytest.fixture
def make_trade() -> Callable[..., TradeEvent]:
    """Factory for trade events; ``recorded_at`` increases with every call."""
    seq: Iterator[int] = itertools.count()

    def _make(
        action: str = "BUY",
        quantity: int = 10,
        price: str = "100",
        *,
        symbol: str = "TCS",
        owner_id: str = "owner-1",
        occurred_on: date = date(2026, 1, 5),
        note: str | None = None,
    ) -> TradeEvent:
        n = next(seq)
        return TradeEvent(
            id=f"TRADE_{n:04d}",
            owner_id=owner_id,
            symbol=symbol,
            action=TradeAction(action),
            quantity=quantity,
            price=Decimal(price),
            occurred_on=occurred_on,
            recorded_at=FIXED_NOW + timedelta(seconds=n),
            note=note,
        )

    return _make


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Monotonic fake clock, one second per call."""
    seq = itertools.count()
    return lambda: FIXED_NOW + timedelta(seconds=next(seq))


@pytest.fixture
def nse_raw() -> Callable[..., RawProviderResponse]:
    """Build a parsed NSE response the way ``NseIndiaSource`` would."""

    def _make(
        symbol: str = "TCS", last_price: str | None = "3500", **price_info: Any
    ) -> RawProviderResponse:
        info: dict[str, Any] = {"lastPrice": last_price, **price_info}
        return RawProviderResponse(
            source_id=NSE_SOURCE_ID,
            symbol=symbol,
            payload=NseQuoteResponse.model_validate({"priceInfo": info}),
            source_url="https://nse.test/api/quote-equity",
            received_at=FIXED_NOW,
        )

    return _make


class StubSource:
    """In-process quote source replaying scripted outcomes."""

    def __init__(self, source_id: str, *outcomes: Any) -> None:
        self.source_id = source_id
        self._outcomes = list(outcomes)
        self.calls: list[str] = []

    async def fetch_quote(self, symbol: str) -> RawProviderResponse:
        self.calls.append(symbol)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return outcome(symbol)
        return outcome


@pytest.fixture
def stub_source() -> type[StubSource]:
    return StubSource
