# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Trade Ledger Domain Exceptions

Purpose:
    Errors surfaced to callers of the trade ledger and position use cases.
    Unlike quote source failures these are never absorbed: a trade record is
    either appended whole or rejected.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidTradeInput(DomainError):
    """Trade input failed validation (quantity, price, action, symbol or date)."""

    code = "INVALID_TRADE_INPUT"


class LedgerUnavailable(DomainError):
    """Persistence failure while appending or reading trades. Safe to retry."""

    code = "LEDGER_UNAVAILABLE"
