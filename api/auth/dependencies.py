"""
Auth dependencies for protected FastAPI routes.

Ownership always comes from the verified token, never from the request body.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import UnauthorizedError

from . import security


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise UnauthorizedError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise UnauthorizedError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise UnauthorizedError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_owner(access_token: str = Depends(get_bearer_token)) -> str:
    try:
        return security.owner_id_from_token(access_token)
    except security.AuthSecurityError as exc:
        raise UnauthorizedError(str(exc)) from exc
