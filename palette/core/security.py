"""Security helpers (hashing of stored refresh tokens)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_token(token: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(token)
    return f"{_PREFIX}{hashed}"


def verify_token_hash(token: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not token or not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, token)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False
