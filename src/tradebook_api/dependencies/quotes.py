# src/tradebook_api/dependencies/quotes.py
# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Dependency wiring for quote acquisition.

Overview:
    Builds the quote sources named by ``QUOTES_SOURCES`` (in that priority
    order), the normalizer and the synthetic fallback, and exposes
    :class:`AcquireQuote` / :class:`AcquireQuotes` as FastAPI dependencies.

Layer:
    dependencies

Design:
    * Sources share the application's ``httpx.AsyncClient`` when the lifespan
      has created one (``app.state.http_client``).
    * The wired pipeline is cached on ``app.state`` so transports that skip
      the lifespan still get a single instance per app.
    * Alpha Vantage is skipped when no API key is configured.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx
from fastapi import Request

from tradebook_api.application.interfaces.quote_source import QuoteSource
from tradebook_api.application.services.quote_normalizer import QuoteNormalizer
from tradebook_api.application.use_cases.quotes.acquire_quote import AcquireQuote
from tradebook_api.application.use_cases.quotes.acquire_quotes import AcquireQuotes
from tradebook_api.domain.services.synthetic_quotes import SyntheticQuoteGenerator
from tradebook_api.infrastructure.external_apis.alpha_vantage.client import AlphaVantageSource
from tradebook_api.infrastructure.external_apis.base_client import HttpQuoteSource
from tradebook_api.infrastructure.external_apis.nse.client import NseIndiaSource
from tradebook_api.infrastructure.external_apis.settings import (
    QuoteSourceSettings,
    get_quote_source_settings,
)
from tradebook_api.infrastructure.external_apis.yahoo.client import YahooFinanceSource
from tradebook_api.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

SOURCE_REGISTRY: Mapping[str, type[HttpQuoteSource]] = {
    "yahoo": YahooFinanceSource,
    "nse": NseIndiaSource,
    "alpha_vantage": AlphaVantageSource,
}


def build_quote_sources(
    settings: QuoteSourceSettings, http: httpx.AsyncClient | None = None
) -> list[QuoteSource]:
    """Instantiate the configured sources in priority order."""
    sources: list[QuoteSource] = []
    for name in settings.sources:
        source_cls = SOURCE_REGISTRY.get(name)
        if source_cls is None:
            logger.warning("quote_source_unknown", extra={"source": name})
            continue
        if source_cls is AlphaVantageSource and settings.alpha_vantage_api_key is None:
            logger.info("quote_source_skipped", extra={"source": name, "reason": "no_api_key"})
            continue
        sources.append(source_cls(settings, http=http))
    return sources


def build_acquire_quote(
    settings: QuoteSourceSettings, http: httpx.AsyncClient | None = None
) -> AcquireQuote:
    """Wire the full acquisition pipeline from settings."""
    return AcquireQuote(
        build_quote_sources(settings, http),
        QuoteNormalizer(default_currency=settings.default_currency),
        SyntheticQuoteGenerator(currency=settings.default_currency),
        max_attempts=settings.max_attempts,
        base_delay_ms=settings.base_delay_ms,
    )


def get_acquire_quote(request: Request) -> AcquireQuote:
    """FastAPI dependency returning the app-wide :class:`AcquireQuote`."""
    state = request.app.state
    acquire = getattr(state, "acquire_quote", None)
    if acquire is None:
        acquire = build_acquire_quote(
            get_quote_source_settings(), getattr(state, "http_client", None)
        )
        state.acquire_quote = acquire
    return acquire


def get_acquire_quotes(request: Request) -> AcquireQuotes:
    """FastAPI dependency returning the throttled batch use case."""
    settings = get_quote_source_settings()
    return AcquireQuotes(get_acquire_quote(request), delay_s=settings.batch_delay_ms / 1000.0)
