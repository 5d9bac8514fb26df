# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Portfolio Router.

Summary:
    Authenticated read models derived from the owner's ledger: single
    position, mark-to-market valuation (quotes acquired through the quote
    pipeline), ledger summary and per-symbol analysis.

Layer:
    adapters/routers
"""
from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Path, Request, Response

from tradebook_api.adapters.presenters.portfolio_presenter import PortfolioPresenter
from tradebook_api.adapters.presenters.trades_presenter import TradesPresenter
from tradebook_api.adapters.routers.base_router import BaseRouter
from tradebook_api.adapters.schemas.http.envelopes import SuccessEnvelope
from tradebook_api.adapters.schemas.http.portfolio import (
    PortfolioSummaryHTTP,
    PortfolioValuationHTTP,
    SymbolAnalysisHTTP,
)
from tradebook_api.adapters.schemas.http.trades import PositionItem
from tradebook_api.application.use_cases.portfolio.analyze_symbol import AnalyzeSymbol
from tradebook_api.application.use_cases.portfolio.get_portfolio_summary import (
    GetPortfolioSummary,
)
from tradebook_api.application.use_cases.portfolio.get_portfolio_valuation import (
    GetPortfolioValuation,
)
from tradebook_api.application.use_cases.portfolio.get_position import GetPosition
from tradebook_api.dependencies.ledger import (
    get_analyze_symbol,
    get_portfolio_summary,
    get_portfolio_valuation,
    get_position_uc,
)
from tradebook_api.infrastructure.auth.jwt_dependency import Principal, auth_required

router = BaseRouter(version="v1", resource="portfolio", tags=["Portfolio"])
presenter = PortfolioPresenter()
positions_presenter = TradesPresenter()

PrincipalDep = Annotated[Principal, Depends(auth_required())]
SymbolPath = Annotated[str, Path(max_length=20)]


@router.get(
    "/positions/{symbol}",
    response_model=SuccessEnvelope[PositionItem],
    responses=BaseRouter.std_error_responses(),
    summary="Current position for one symbol",
)
async def get_position(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    symbol: SymbolPath,
    uc: Annotated[GetPosition, Depends(get_position_uc)],
) -> Any:
    position = await uc.execute(principal.sub, symbol)
    result = positions_presenter.present_position(position, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)


@router.get(
    "/valuation",
    response_model=SuccessEnvelope[PortfolioValuationHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Open positions marked to current quotes",
)
async def get_valuation(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    uc: Annotated[GetPortfolioValuation, Depends(get_portfolio_valuation)],
) -> Any:
    valuation = await uc.execute(principal.sub)
    result = presenter.present_valuation(valuation, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)


@router.get(
    "/summary",
    response_model=SuccessEnvelope[PortfolioSummaryHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Ledger-wide counts",
)
async def get_summary(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    uc: Annotated[GetPortfolioSummary, Depends(get_portfolio_summary)],
) -> Any:
    summary = await uc.execute(principal.sub)
    result = presenter.present_summary(summary, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)


@router.get(
    "/analysis/{symbol}",
    response_model=SuccessEnvelope[SymbolAnalysisHTTP],
    responses=BaseRouter.std_error_responses(),
    summary="Trading activity for one symbol",
)
async def get_analysis(
    request: Request,
    response: Response,
    principal: PrincipalDep,
    symbol: SymbolPath,
    uc: Annotated[AnalyzeSymbol, Depends(get_analyze_symbol)],
) -> Any:
    analysis = await uc.execute(principal.sub, symbol)
    result = presenter.present_analysis(analysis, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)
