# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Application results for quote acquisition.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from dataclasses import dataclass

from tradebook_api.domain.entities.quote import Quote


@dataclass(frozen=True, slots=True)
class QuoteResult:
    """Outcome for one symbol of a batch acquisition.

    Exactly one of ``quote`` and ``error`` is set; ``failed`` mirrors
    ``error is not None``.
    """

    symbol: str
    quote: Quote | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Return True when the symbol produced no quote."""
        return self.error is not None
