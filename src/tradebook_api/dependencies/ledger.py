# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Dependency wiring for the trade ledger and the ledger/portfolio use cases.

Layer:
    dependencies

Design:
    * ``DATABASE_URL`` selects the backing: unset means the in-process
      ledger, set means the SQLAlchemy ledger on the global sessionmaker.
    * The ledger and its keyed lock live on ``app.state`` so every request
      of one app appends through the same lock map.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tradebook_api.adapters.repositories.in_memory_trade_ledger import InMemoryTradeLedger
from tradebook_api.adapters.repositories.trade_ledger_repository import SqlAlchemyTradeLedger
from tradebook_api.application.interfaces.trade_ledger import TradeLedger
from tradebook_api.application.use_cases.portfolio.analyze_symbol import AnalyzeSymbol
from tradebook_api.application.use_cases.portfolio.get_portfolio_summary import (
    GetPortfolioSummary,
)
from tradebook_api.application.use_cases.portfolio.get_portfolio_valuation import (
    GetPortfolioValuation,
)
from tradebook_api.application.use_cases.portfolio.get_position import GetPosition
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.application.use_cases.trades.append_trade import AppendTrade
from tradebook_api.application.use_cases.trades.export_trades import (
    ExportPortfolio,
    ExportTradesCsv,
)
from tradebook_api.application.use_cases.trades.get_trade_history import GetTradeHistory
from tradebook_api.application.use_cases.trades.import_trades import ImportTrades
from tradebook_api.application.use_cases.trades.list_trades import ListTrades
from tradebook_api.config.settings import get_settings
from tradebook_api.dependencies.quotes import get_acquire_quotes
from tradebook_api.infrastructure.concurrency.keyed_lock import KeyedLock
from tradebook_api.infrastructure.database.session import (
    get_sessionmaker,
    init_engine_and_sessionmaker,
)


def build_trade_ledger() -> TradeLedger:
    """Select the ledger backing from settings."""
    settings = get_settings()
    if settings.uses_in_memory_ledger:
        return InMemoryTradeLedger()
    init_engine_and_sessionmaker(settings)
    return SqlAlchemyTradeLedger(get_sessionmaker())


def get_trade_ledger(request: Request) -> TradeLedger:
    """FastAPI dependency returning the app-wide ledger."""
    state = request.app.state
    ledger = getattr(state, "trade_ledger", None)
    if ledger is None:
        ledger = state.trade_ledger = build_trade_ledger()
    return ledger


def get_trade_locks(request: Request) -> KeyedLock:
    state = request.app.state
    locks = getattr(state, "trade_locks", None)
    if locks is None:
        locks = state.trade_locks = KeyedLock()
    return locks


LedgerDep = Annotated[TradeLedger, Depends(get_trade_ledger)]


def get_append_trade(
    ledger: LedgerDep, locks: Annotated[KeyedLock, Depends(get_trade_locks)]
) -> AppendTrade:
    return AppendTrade(ledger, locks=locks)


def get_list_trades(ledger: LedgerDep) -> ListTrades:
    return ListTrades(ledger)


def get_export_trades(ledger: LedgerDep) -> ExportTradesCsv:
    return ExportTradesCsv(ListTrades(ledger))


def get_export_portfolio(ledger: LedgerDep) -> ExportPortfolio:
    return ExportPortfolio(ledger)


def get_import_trades(
    append_trade: Annotated[AppendTrade, Depends(get_append_trade)],
) -> ImportTrades:
    return ImportTrades(append_trade)


def get_trade_history(ledger: LedgerDep) -> GetTradeHistory:
    return GetTradeHistory(ledger)


def get_position_uc(ledger: LedgerDep) -> GetPosition:
    return GetPosition(ledger)


def get_portfolio_valuation(
    ledger: LedgerDep, acquire_quotes: Annotated[AcquireQuotes, Depends(get_acquire_quotes)]
) -> GetPortfolioValuation:
    return GetPortfolioValuation(ledger, acquire_quotes)


def get_portfolio_summary(ledger: LedgerDep) -> GetPortfolioSummary:
    return GetPortfolioSummary(ledger)


def get_analyze_symbol(ledger: LedgerDep) -> AnalyzeSymbol:
    return AnalyzeSymbol(ledger)
