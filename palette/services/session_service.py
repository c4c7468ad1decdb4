"""Session helpers (refresh cookie, bearer token dependency)."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, Response

from palette.core.config import get_settings
from palette.core.errors import InvalidTokenError, MissingTokenError
from palette.services.token_service import TokenService

REFRESH_TOKEN_COOKIE_NAME = "PTOKEN_REFRESH"
BEARER_TYPE = "Bearer"


@dataclass(frozen=True)
class LoginUser:
    """Identity injected into handlers that require a valid access token."""

    user_id: int
    email: str
    access_token: str


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.strip():
        raise MissingTokenError()
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_TYPE.lower() or not token.strip():
        raise InvalidTokenError("Invalid authorization format.")
    return token.strip()


def login_user(authorization: str | None = Header(default=None)) -> LoginUser:
    """FastAPI dependency: require a valid access token and inject the caller."""
    token = bearer_token(authorization)
    claims = TokenService().validate_access_token(token)
    return LoginUser(user_id=claims.user_id, email=claims.email, access_token=token)


def set_refresh_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        REFRESH_TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="lax",
        max_age=settings.refresh_token_ttl_seconds,
        path="/",
    )


def expire_refresh_cookie(response: Response) -> None:
    settings = get_settings()
    response.set_cookie(
        REFRESH_TOKEN_COOKIE_NAME,
        "",
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="lax",
        max_age=0,
        path="/",
    )
