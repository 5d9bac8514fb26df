from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tradebook_api.adapters.repositories.in_memory_trade_ledger import InMemoryTradeLedger
from tradebook_api.config.settings import get_settings
from tradebook_api.dependencies.ledger import get_trade_ledger
from tradebook_api.domain.entities.trade_event import TradeEvent
from tradebook_api.domain.exceptions.ledger import LedgerUnavailable
from tradebook_api.infrastructure.http.errors import LEDGER_RETRY_AFTER_S

PostTrade = Callable[..., dict[str, Any]]


class BrokenLedger:
    """Ledger whose store is unreachable."""

    async def append(self, event: TradeEvent) -> TradeEvent:
        raise LedgerUnavailable("trade ledger is temporarily unavailable")

    async def list_for_symbol(self, owner_id: str, symbol: str) -> Sequence[TradeEvent]:
        raise LedgerUnavailable("trade ledger is temporarily unavailable")

    async def list_for_owner(self, owner_id: str) -> Sequence[TradeEvent]:
        raise LedgerUnavailable("trade ledger is temporarily unavailable")

    async def count(self, owner_id: str, symbol: str) -> int:
        raise LedgerUnavailable("trade ledger is temporarily unavailable")


@pytest.fixture
def seeded(post_trade: PostTrade) -> None:
    post_trade("BUY", 10, "100", occurred_on="2026-01-05")
    post_trade("BUY", 10, "200", occurred_on="2026-02-10", symbol="INFY")
    post_trade("SELL", 4, "150", occurred_on="2026-03-01", note="trim")


def test_append_returns_trade_and_position(client: TestClient) -> None:
    r = client.post(
        "/v1/trades",
        json={"symbol": " tcs ", "action": "buy", "quantity": 12, "price": "3500.50"},
    )

    assert r.status_code == 201
    assert r.headers["ETag"]
    data = r.json()["data"]
    assert data["trade"]["id"].startswith("TRADE_")
    assert data["trade"]["symbol"] == "TCS"
    assert data["trade"]["action"] == "BUY"
    assert data["trade"]["occurred_on"]
    assert data["position"]["total_quantity"] == 12
    assert Decimal(data["position"]["weighted_average_price"]) == Decimal("3500.50")
    assert data["position"]["source_trade_count"] == 1


def test_sell_updates_position_and_realized_pnl(post_trade: PostTrade) -> None:
    post_trade("BUY", 10, "100")
    data = post_trade("SELL", 4, "150")

    assert data["position"]["total_quantity"] == 6
    assert Decimal(data["position"]["weighted_average_price"]) == Decimal("100")
    assert Decimal(data["position"]["realized_pnl"]) == Decimal("200")


@pytest.mark.parametrize(
    "override",
    [{"quantity": 0}, {"quantity": -3}, {"price": "0"}, {"action": "HOLD"}, {"symbol": "  "}],
)
def test_business_rule_violations_are_422(client: TestClient, override: dict[str, Any]) -> None:
    body = {"symbol": "TCS", "action": "BUY", "quantity": 1, "price": "10", **override}

    r = client.post("/v1/trades", json=body)

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "INVALID_TRADE_INPUT"


@pytest.mark.parametrize(
    "override", [{"price": "100.123456"}, {"price": "1E+20"}, {"symbol": "X" * 21}]
)
def test_values_beyond_storage_limits_fail_validation(
    client: TestClient, override: dict[str, Any]
) -> None:
    body = {"symbol": "TCS", "action": "BUY", "quantity": 1, "price": "10", **override}

    r = client.post("/v1/trades", json=body)

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get("/v1/trades").json()["total"] == 0


def test_malformed_body_is_validation_error(client: TestClient) -> None:
    r = client.post("/v1/trades", json={"symbol": "TCS", "action": "BUY", "quantity": 1})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.usefixtures("seeded")
def test_listing_is_newest_first_and_paginated(client: TestClient) -> None:
    first = client.get("/v1/trades", params={"page_size": 2}).json()
    second = client.get("/v1/trades", params={"page": 2, "page_size": 2}).json()

    assert (first["page"], first["page_size"], first["total"]) == (1, 2, 3)
    assert [i["occurred_on"] for i in first["items"]] == ["2026-03-01", "2026-02-10"]
    assert [i["occurred_on"] for i in second["items"]] == ["2026-01-05"]


@pytest.mark.usefixtures("seeded")
@pytest.mark.parametrize(
    ("params", "expected"),
    [
        ({"action": "sell"}, ["2026-03-01"]),
        ({"symbol": "inf"}, ["2026-02-10"]),
        ({"start_date": "2026-02-01"}, ["2026-03-01", "2026-02-10"]),
        ({"end_date": "2026-02-10", "symbol": "TCS"}, ["2026-01-05"]),
    ],
)
def test_listing_filters(
    client: TestClient, params: dict[str, str], expected: list[str]
) -> None:
    items = client.get("/v1/trades", params=params).json()["items"]
    assert [i["occurred_on"] for i in items] == expected


@pytest.mark.usefixtures("seeded")
def test_export_is_csv_attachment(client: TestClient) -> None:
    r = client.get("/v1/trades/export")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    lines = r.text.strip().split("\n")
    assert lines[0] == "Date,Symbol,Type,Quantity,Price,Notes"
    assert lines[1] == "2026-03-01,TCS,SELL,4,150,trim"
    assert len(lines) == 4


@pytest.mark.usefixtures("seeded")
def test_history_is_chronological_for_one_symbol(client: TestClient) -> None:
    r = client.get("/v1/trades/tcs/history")

    assert r.status_code == 200
    data = r.json()["data"]
    assert [(t["action"], t["occurred_on"]) for t in data] == [
        ("BUY", "2026-01-05"),
        ("SELL", "2026-03-01"),
    ]


def test_unavailable_ledger_is_503(app: FastAPI, client: TestClient) -> None:
    app.dependency_overrides[get_trade_ledger] = BrokenLedger

    r = client.post(
        "/v1/trades", json={"symbol": "TCS", "action": "BUY", "quantity": 1, "price": "10"}
    )

    assert r.status_code == 503
    assert r.headers["Retry-After"] == str(LEDGER_RETRY_AFTER_S)
    assert r.json()["error"]["code"] == "LEDGER_UNAVAILABLE"
    assert client.get("/v1/trades").status_code == 503


def test_auth_enabled_requires_bearer_token(
    monkeypatch: pytest.MonkeyPatch, client: TestClient
) -> None:
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("AUTH_HS256_SECRET", "s" * 40)
    get_settings.cache_clear()

    r = client.get("/v1/trades")

    assert r.status_code == 401
    assert r.json()["error"]["code"] == "HTTP_ERROR"


def test_import_appends_valid_items_and_lists_rejections(client: TestClient) -> None:
    trades = [
        {"symbol": "TCS", "action": "BUY", "quantity": 100, "price": "250"},
        {"symbol": "TCS", "action": "BUY", "quantity": 0, "price": "250"},
        {"symbol": "TCS", "action": "BUY", "quantity": 50, "price": "245"},
    ]

    r = client.post("/v1/trades/import", json={"trades": trades})

    assert r.status_code == 200
    data = r.json()["data"]
    assert [t["quantity"] for t in data["imported"]] == [100, 50]
    assert [rej["index"] for rej in data["rejected"]] == [1]
    assert client.get("/v1/trades").json()["total"] == 2


def test_import_with_value_beyond_storage_limits_appends_nothing(client: TestClient) -> None:
    trades = [
        {"symbol": "TCS", "action": "BUY", "quantity": 1, "price": "10"},
        {"symbol": "TCS", "action": "BUY", "quantity": 1, "price": "10.123456"},
    ]

    r = client.post("/v1/trades/import", json={"trades": trades})

    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get("/v1/trades").json()["total"] == 0


@pytest.mark.usefixtures("seeded")
def test_json_export_reimports_into_the_same_positions(
    app: FastAPI, client: TestClient
) -> None:
    exported = client.get("/v1/trades/export/json")

    assert exported.status_code == 200
    data = exported.json()["data"]
    assert data["exported_at"]
    assert [t["occurred_on"] for t in data["trades"]] == [
        "2026-01-05",
        "2026-02-10",
        "2026-03-01",
    ]
    positions = {p["symbol"]: p for p in data["positions"]}
    assert positions["TCS"]["total_quantity"] == 6

    app.state.trade_ledger = InMemoryTradeLedger()
    r = client.post("/v1/trades/import", json=data)

    assert r.status_code == 200
    assert r.json()["data"]["rejected"] == []
    again = client.get("/v1/trades/export/json").json()["data"]
    assert again["positions"] == data["positions"]
