from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tradebook_api.adapters.repositories.in_memory_trade_ledger import InMemoryTradeLedger
from tradebook_api.application.interfaces.quote_source import RawProviderResponse
from tradebook_api.application.schemas.raw.quote_payloads import NSE_SOURCE_ID
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator
from tradebook_api.infrastructure.external_apis.settings import get_quote_source_settings
from tradebook_api.main import create_app


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def quote_source(stub_source: Any, nse_raw: Callable[..., RawProviderResponse]) -> Any:
    """NSE stub quoting every symbol at 110 (previous close 100)."""
    return stub_source(NSE_SOURCE_ID, lambda symbol: nse_raw(symbol, "110", change="10"))


@pytest.fixture
def install_sources() -> Callable[[FastAPI, list[Any]], None]:
    """Replace the app's quote pipeline with one over the given sources."""

    def _install(app: FastAPI, sources: list[Any]) -> None:
        app.state.acquire_quote = AcquireQuote(
            sources,
            QuoteNormalizer(),
            SyntheticQuoteGenerator(rng=random.Random(7)),
            sleep=_no_sleep,
        )

    return _install


@pytest.fixture
def app(
    monkeypatch: pytest.MonkeyPatch,
    quote_source: Any,
    install_sources: Callable[[FastAPI, list[Any]], None],
) -> FastAPI:
    monkeypatch.setenv("QUOTES_BATCH_DELAY_MS", "0")
    get_quote_source_settings.cache_clear()

    application = create_app()
    application.state.trade_ledger = InMemoryTradeLedger()
    install_sources(application, [quote_source])
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    # No context manager: the lifespan would replace the seeded state.
    return TestClient(app)


@pytest.fixture
def post_trade(client: TestClient) -> Callable[..., dict[str, Any]]:
    """POST a trade and return the ``data`` member of the 201 response."""

    def _post(
        action: str = "BUY",
        quantity: int = 10,
        price: str = "100",
        *,
        symbol: str = "TCS",
        occurred_on: str = "2026-01-05",
        note: str | None = None,
    ) -> dict[str, Any]:
        r = client.post(
            "/v1/trades",
            json={
                "symbol": symbol,
                "action": action,
                "quantity": quantity,
                "price": price,
                "occurred_on": occurred_on,
                "note": note,
            },
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _post
