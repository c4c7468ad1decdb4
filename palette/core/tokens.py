"""
Signed bearer tokens.

Format: ``<base64url(json payload)>.<base64url(hmac-sha256 signature)>``.
Claims: ``sub`` (user id), ``email``, ``typ`` (access|refresh), ``iat``,
``exp`` and ``jti``.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import ExpiredTokenError, InvalidTokenError, MissingTokenError


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    token_type: TokenType
    issued_at: int
    expires_at: int
    jti: str


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def _sign(payload_b64url: str, secret: str) -> str:
    sig = hmac.new(
        secret.encode("utf-8"),
        payload_b64url.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return _b64url_encode(sig)


def issue_token(
    *,
    secret: str,
    user_id: int,
    email: str,
    token_type: TokenType,
    ttl_seconds: int,
    now: int | None = None,
) -> str:
    issued = int(now if now is not None else time.time())
    payload = {
        "sub": int(user_id),
        "email": email,
        "typ": token_type.value,
        "iat": issued,
        "exp": issued + max(1, int(ttl_seconds)),
        # two tokens issued in the same second must still differ
        "jti": secrets.token_urlsafe(8),
    }
    payload_raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    payload_b64 = _b64url_encode(payload_raw)
    return f"{payload_b64}.{_sign(payload_b64, secret)}"


def _parse(token: str | None, secret: str) -> dict[str, Any]:
    if not token or not token.strip():
        raise MissingTokenError()

    parts = token.strip().split(".")
    if len(parts) != 2:
        raise InvalidTokenError("Malformed token.")

    payload_b64, sig_b64 = parts
    if not hmac.compare_digest(_sign(payload_b64, secret), sig_b64):
        raise InvalidTokenError("Bad token signature.")

    try:
        payload: Any = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as exc:
        raise InvalidTokenError("Bad token payload.") from exc
    if not isinstance(payload, dict):
        raise InvalidTokenError("Bad token payload.")
    return payload


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            email=str(payload["email"]),
            token_type=TokenType(payload["typ"]),
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
            jti=str(payload.get("jti") or ""),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("Bad token claims.") from exc


def decode_token(
    token: str | None,
    *,
    secret: str,
    expected_type: TokenType,
    now: int | None = None,
) -> TokenClaims:
    """Verify signature, type claim and expiry; return the claims."""
    claims = _claims_from_payload(_parse(token, secret))
    if claims.token_type is not expected_type:
        raise InvalidTokenError("Token type mismatch.")
    now_int = int(now if now is not None else time.time())
    if claims.expires_at <= now_int:
        raise ExpiredTokenError()
    return claims


def peek_claims(token: str | None, *, secret: str) -> TokenClaims | None:
    """Signature-checked claims without expiry/type checks, or None when unusable."""
    try:
        return _claims_from_payload(_parse(token, secret))
    except (MissingTokenError, InvalidTokenError):
        return None
