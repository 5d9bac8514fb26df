# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Quote Source Domain Exceptions

Purpose:
    Failure conditions raised by quote source adapters and the quote
    normalizer. The acquisition pipeline absorbs every ``SourceError`` and
    moves on to the next source, so none of these reach HTTP callers; the
    subclasses exist so logs can tell the failure modes apart.

    ``InvalidSymbol`` is the one caller-facing error in this module.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class SourceError(DomainError):
    """Base class for failures attributable to one quote source."""

    code = "QUOTE_SOURCE_ERROR"


class SourceUnavailable(SourceError):
    """Network failure, timeout, or non-2xx HTTP status from a source."""

    code = "QUOTE_SOURCE_UNAVAILABLE"


class SourceParseError(SourceError):
    """Source responded, but the payload did not match the expected shape."""

    code = "QUOTE_SOURCE_PARSE_ERROR"


class SourceRateLimited(SourceError):
    """Source explicitly throttled the request (HTTP 429)."""

    code = "QUOTE_SOURCE_RATE_LIMITED"


class NormalizationFailure(SourceParseError):
    """Raw payload could not be mapped to a valid quote (e.g. non-positive price)."""

    code = "QUOTE_NORMALIZATION_FAILED"


class AllSourcesExhausted(DomainError):
    """Every configured source failed; resolved internally with a synthetic quote."""

    code = "QUOTE_SOURCES_EXHAUSTED"


class InvalidSymbol(DomainError):
    """Caller supplied an empty or malformed ticker symbol."""

    code = "INVALID_SYMBOL"
