# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""JWT (HS256) Authentication Dependency.

Feature-flagged dependency that enforces bearer authentication when enabled.
The principal's ``sub`` claim is the ledger owner id.

Exact 401 messages: "Missing bearer token", "Missing token", "Invalid token".
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

import jwt
from fastapi import HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from tradebook_api.config.settings import Settings, get_settings
from tradebook_api.infrastructure.logging.logger import set_request_context

DEV_PRINCIPAL_SUB = "dev-user"


class Principal(BaseModel):
    """Authenticated principal extracted from a verified JWT.

    Attributes:
        sub: Subject claim (owner identifier).
        scopes: Normalized scopes as a tuple.
        claims: Full claims mapping.
    """

    model_config = ConfigDict(frozen=True)

    sub: str = ""
    scopes: tuple[str, ...] = ()
    claims: Mapping[str, Any] = Field(default_factory=dict)


def _extract_bearer_token(request: Request) -> str:
    """Return the raw JWT from the ``Authorization`` header.

    Raises:
        HTTPException: 401 on a missing/malformed header or an empty token.
    """
    auth = (request.headers.get("Authorization") or "").strip()
    if not auth or not auth.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")
    return token


def _decode(token: str, settings: Settings) -> Mapping[str, Any]:
    """Decode and validate a JWT with the configured secret and algorithm.

    Raises:
        HTTPException: 401 if the token is invalid or expired.
    """
    try:
        return jwt.decode(
            token,
            settings.auth_hs256_secret or "",
            algorithms=[settings.auth_algorithm],
            options={"verify_aud": False},
        )
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc


def auth_required(
    required_scopes: str | Iterable[str] | None = None,
) -> Callable[..., Awaitable[Principal]]:
    """Create a dependency that enforces authentication and optional scope checks.

    Behavior is feature-flagged by ``AUTH_ENABLED``. When disabled (development
    and test only) a fixed ``dev-user`` principal is returned.
    """
    if isinstance(required_scopes, str):
        required: set[str] = {s for s in required_scopes.split() if s}
    else:
        required = set(required_scopes or ())

    async def _dep(request: Request) -> Principal:
        settings = get_settings()

        if not settings.auth_enabled:
            set_request_context(owner_id=DEV_PRINCIPAL_SUB)
            return Principal(sub=DEV_PRINCIPAL_SUB)

        token = _extract_bearer_token(request)
        claims = _decode(token, settings)

        sub = str(claims.get("sub") or "")
        if not sub:
            raise HTTPException(status_code=401, detail="Invalid token")

        raw_scopes = claims.get("scopes", claims.get("scope", ""))
        if isinstance(raw_scopes, str):
            scope_set = {s for s in raw_scopes.split() if s}
        elif isinstance(raw_scopes, (list, tuple, set)):
            scope_set = {str(s) for s in raw_scopes if str(s)}
        else:
            scope_set = set()

        if required and not required.issubset(scope_set):
            raise HTTPException(status_code=403, detail="Forbidden")

        set_request_context(owner_id=sub)
        return Principal(sub=sub, scopes=tuple(sorted(scope_set)), claims=claims)

    return _dep
