"""
Webhook Authentication

The WordPress plugin signs each webhook call with a short-lived JWT using a
secret shared with this service. A token is accepted when its signature,
issuer (`wordpress`), audience (`wp-search-indexer`) and expiry check out
and its `scope` claim is a list.
"""

from __future__ import annotations

import logging
from typing import Callable

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings, get_settings
from .models import CallerContext

logger = logging.getLogger("indexer.auth")

TOKEN_ISSUER = "wordpress"
TOKEN_AUDIENCE = "wp-search-indexer"

_REQUIRED_CLAIMS = ["iss", "aud", "iat", "exp", "scope"]

bearer = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def verify_webhook_jwt(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> CallerContext:
    """Decode the bearer token of a webhook call into a CallerContext."""
    if settings.webhook_jwt_secret is None:
        logger.error("webhook_jwt_secret is not configured; rejecting webhook call")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook authentication is not configured.",
        )

    try:
        claims = jwt.decode(
            creds.credentials,
            settings.webhook_jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algo],
            audience=TOKEN_AUDIENCE,
            issuer=TOKEN_ISSUER,
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected webhook token: %s", exc)
        raise _unauthorized(f"Invalid token: {exc}")

    if not isinstance(claims["scope"], list):
        raise _unauthorized("Invalid token: 'scope' claim must be a list.")

    return CallerContext(
        client_id=claims.get("client_id") or TOKEN_ISSUER,
        scopes=claims["scope"],
    )


def require_scopes(*required_scopes: str) -> Callable[..., CallerContext]:
    """Dependency factory rejecting callers that lack any of `required_scopes`."""

    def check_scopes(caller: CallerContext = Depends(verify_webhook_jwt)) -> CallerContext:
        missing = [s for s in required_scopes if s not in caller.scopes]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required scope(s): {', '.join(missing)}",
            )
        return caller

    return check_scopes
