# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Application Port: Quote source.

One implementation per external provider. Every source exposes the same
single call and hands back the provider's payload already parsed into its
typed model; turning that payload into a canonical ``Quote`` is the
normalizer's job, not the source's.

Design:
    * Sources own symbol translation (exchange suffixes), request headers and
      response parsing for their provider.
    * Failures are raised as ``SourceUnavailable``, ``SourceParseError`` or
      ``SourceRateLimited``; the acquisition pipeline treats them alike.
    * Sources hold no mutable state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from tradebook_api.application.schemas.raw.quote_payloads import ProviderResponseModel


@dataclass(frozen=True, slots=True)
class RawProviderResponse:
    """A provider payload plus the context needed to normalize it.

    Attributes:
        source_id: Identifier of the source that produced the payload.
        symbol: Canonical symbol that was requested (no provider suffix).
        payload: Validated provider payload model.
        source_url: URL that was fetched, for diagnostics.
        received_at: UTC time the response arrived.
    """

    source_id: str
    symbol: str
    payload: ProviderResponseModel
    source_url: str
    received_at: datetime


@runtime_checkable
class QuoteSource(Protocol):
    """Protocol for a single external quote provider."""

    source_id: str

    async def fetch_quote(self, symbol: str) -> RawProviderResponse:
        """Fetch the provider's raw quote for ``symbol``.

        Args:
            symbol: Canonical upper-case symbol without exchange suffix.

        Returns:
            RawProviderResponse: Parsed provider payload.

        Raises:
            SourceUnavailable: Network error, timeout or non-2xx status.
            SourceRateLimited: Provider throttled the request.
            SourceParseError: Payload did not match the provider model.
        """
        ...
