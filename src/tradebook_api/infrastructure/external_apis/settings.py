# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Pydantic settings for the quote source adapters and acquisition pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _default_sources() -> list[str]:
    """Default source order, most trusted first."""
    return ["yahoo", "nse", "alpha_vantage"]


class QuoteSourceSettings(BaseSettings):
    """Configuration for quote sources, retry and batch throttling.

    Environment variables (with ``model_config.env_prefix``):

    * ``QUOTES_TIMEOUT_S``
    * ``QUOTES_MAX_ATTEMPTS``
    * ``QUOTES_BASE_DELAY_MS``
    * ``QUOTES_BATCH_DELAY_MS``
    * ``QUOTES_SOURCES`` (comma-separated, in priority order)
    * ``QUOTES_DEFAULT_CURRENCY``
    * ``QUOTES_USER_AGENT``
    * ``QUOTES_YAHOO_BASE_URL`` / ``QUOTES_NSE_BASE_URL`` / ``QUOTES_ALPHA_VANTAGE_BASE_URL``
    * ``QUOTES_ALPHA_VANTAGE_API_KEY``
    """

    timeout_s: float = Field(
        15.0,
        ge=1.0,
        le=60.0,
        description="Per-request timeout in seconds for every source call.",
    )
    max_attempts: int = Field(
        3,
        ge=1,
        le=10,
        description="Attempts per source before falling through to the next one.",
    )
    base_delay_ms: int = Field(
        1000,
        ge=0,
        le=30_000,
        description="Linear backoff unit; the wait after attempt n is n times this.",
    )
    batch_delay_ms: int = Field(
        1000,
        ge=0,
        le=30_000,
        description="Pause between symbols in batch acquisition.",
    )
    # Raw env value (comma-separated); normalized in a property below.
    sources_raw: str | None = Field(
        None,
        alias="QUOTES_SOURCES",
        description="Comma-separated source names in priority order.",
    )
    default_currency: str = Field("INR", min_length=3, max_length=3)
    user_agent: str = Field(BROWSER_USER_AGENT, description="Browser-like identity header.")

    yahoo_base_url: str = Field("https://query1.finance.yahoo.com")
    nse_base_url: str = Field("https://www.nseindia.com")
    alpha_vantage_base_url: str = Field("https://www.alphavantage.co")
    alpha_vantage_api_key: SecretStr | None = Field(
        None,
        description="Alpha Vantage key; the source is skipped when unset.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="QUOTES_",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def sources(self) -> list[str]:
        """Return normalized source names (lowercased, stripped, de-duplicated)."""
        raw = self.sources_raw
        if not raw:
            return _default_sources()
        parts: Iterable[str] = (p.strip().lower() for p in raw.split(","))
        seen: list[str] = []
        for part in parts:
            if part and part not in seen:
                seen.append(part)
        return seen


@lru_cache(maxsize=1)
def get_quote_source_settings() -> QuoteSourceSettings:
    """Return a cached ``QuoteSourceSettings`` instance."""
    return QuoteSourceSettings()
