# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""
Base HTTP Schema (Adapters Layer)

Purpose:
    Canonical Pydantic base for all adapter-layer HTTP schemas.
    Enforces strict config and deterministic JSON encoding.

Layer: adapters/schemas/http

Notes:
    - Transport-facing only. Application DTOs must not import from this module.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseHTTPSchema(BaseModel):
    """Base class for all HTTP-facing schemas.

    Decimals are emitted as plain decimal strings (never exponent form) and
    aware datetimes as ISO-8601 with a ``Z`` suffix for UTC.
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        str_strip_whitespace=True,
        ser_json_inf_nan="null",
        use_enum_values=True,
        json_encoders={
            Decimal: lambda v: format(v, "f"),
            datetime: lambda v: (
                v.isoformat().replace("+00:00", "Z") if v.tzinfo else v.isoformat()
            ),
            date: lambda v: v.isoformat(),
        },
    )

    def model_dump_http(self, **kwargs: Any) -> dict[str, Any]:
        """Return a JSON-serializable dict suitable for HTTP responses.

        Args:
            **kwargs: Optional Pydantic dump settings (e.g., ``exclude_none=True``).
        """
        return self.model_dump(mode="json", by_alias=True, **kwargs)
